# apps/pedidos/admin.py
from django.contrib import admin

from .models import Pedido, PedidoDetalle


class PedidoDetalleInline(admin.TabularInline):
    model = PedidoDetalle
    extra = 0
    fields = ("presentacion", "cantidad", "precio_estimado")


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    """
    Admin de soporte. El estado se cambia con los servicios (FSM);
    acá es de solo lectura.
    """
    list_display = ("id", "cliente", "almacen", "fecha_entrega", "estado", "total_estimado")
    list_select_related = ("cliente", "almacen")
    list_filter = ("estado", "almacen")
    search_fields = ("cliente__nombre", "notas")
    date_hierarchy = "fecha_entrega"
    readonly_fields = ("estado", "creado", "actualizado")
    inlines = [PedidoDetalleInline]
