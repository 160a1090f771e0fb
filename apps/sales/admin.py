# apps/sales/admin.py
from django.contrib import admin

from .models import Venta, VentaDetalle


class VentaDetalleInline(admin.TabularInline):
    model = VentaDetalle
    extra = 0
    fields = ("presentacion", "cantidad", "precio_unitario")
    readonly_fields = ("presentacion", "cantidad", "precio_unitario")


@admin.register(Venta)
class VentaAdmin(admin.ModelAdmin):
    """
    Admin de soporte. Líneas y estado_pago son de solo lectura: las líneas
    mueven stock y el estado se deriva de los pagos (usar los servicios).
    """
    list_display = (
        "id",
        "cliente",
        "almacen",
        "fecha",
        "tipo_pago",
        "estado_pago",
        "total",
        "pedido",
    )
    list_select_related = ("cliente", "almacen")
    list_filter = ("estado_pago", "tipo_pago", "almacen")
    search_fields = ("id", "cliente__nombre")
    date_hierarchy = "fecha"
    inlines = [VentaDetalleInline]
    readonly_fields = ("estado_pago", "pedido", "creado", "actualizado")
