# apps/catalog/admin.py
from __future__ import annotations

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Almacen, Inventario, Lote, Presentacion, Producto


@admin.register(Almacen)
class AlmacenAdmin(admin.ModelAdmin):
    list_display = ("nombre", "ciudad", "direccion", "actualizado")
    search_fields = ("nombre", "ciudad")
    ordering = ("nombre", "id")
    readonly_fields = ("creado", "actualizado")


@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "activo")
    list_filter = ("activo",)
    search_fields = ("nombre",)


class InventarioInline(admin.TabularInline):
    model = Inventario
    extra = 0
    fields = ("almacen", "cantidad", "stock_minimo", "lote")
    autocomplete_fields = ("almacen",)


@admin.register(Presentacion)
class PresentacionAdmin(admin.ModelAdmin):
    """
    Admin de soporte para presentaciones: precios de referencia, activación
    y stock por almacén (inline).
    """
    list_display = ("nombre", "producto", "tipo", "capacidad_kg", "precio_venta", "estado_badge")
    list_select_related = ("producto",)
    list_filter = ("tipo", "activo")
    search_fields = ("nombre", "producto__nombre")
    inlines = [InventarioInline]
    list_per_page = 50

    def estado_badge(self, obj: Presentacion):
        color = "28a745" if obj.activo else "6c757d"
        label = _("Activa") if obj.activo else _("Inactiva")
        return format_html(
            '<span style="display:inline-block;padding:.2rem .45rem;border-radius:.25rem;'
            'font-size:.75rem;color:#fff;background-color:#{};">{}</span>',
            color, label
        )

    estado_badge.short_description = _("Estado")
    estado_badge.admin_order_field = "activo"

    actions = ("accion_activar", "accion_desactivar")

    @admin.action(description=_("Marcar seleccionadas como activas"))
    def accion_activar(self, request, queryset):
        updated = queryset.update(activo=True)
        self.message_user(request, _(
            "%(count)d presentación(es) activada(s).") % {"count": updated})

    @admin.action(description=_("Marcar seleccionadas como inactivas"))
    def accion_desactivar(self, request, queryset):
        updated = queryset.update(activo=False)
        self.message_user(request, _(
            "%(count)d presentación(es) desactivada(s).") % {"count": updated})


@admin.register(Inventario)
class InventarioAdmin(admin.ModelAdmin):
    list_display = ("presentacion", "almacen", "cantidad", "stock_minimo", "ultima_actualizacion")
    list_select_related = ("presentacion", "almacen")
    list_filter = ("almacen",)
    search_fields = ("presentacion__nombre", "almacen__nombre")


@admin.register(Lote)
class LoteAdmin(admin.ModelAdmin):
    list_display = ("id", "producto", "proveedor", "peso_humedo_kg", "peso_seco_kg", "fecha_ingreso")
    list_select_related = ("producto",)
    date_hierarchy = "fecha_ingreso"
    search_fields = ("proveedor", "descripcion", "producto__nombre")
