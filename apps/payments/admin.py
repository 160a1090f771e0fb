# apps/payments/admin.py
from django.contrib import admin

from .models import Pago


@admin.register(Pago)
class PagoAdmin(admin.ModelAdmin):
    """Pagos en solo lectura: se registran con services.payments.registrar_pago."""
    list_display = ("fecha", "venta", "monto", "metodo_pago", "referencia", "creado_en")
    list_select_related = ("venta",)
    list_filter = ("metodo_pago", "fecha")
    search_fields = ("referencia", "venta__id")
    readonly_fields = [f.name for f in Pago._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
