from apps.orders.forms import DetalleForm, DetalleFormSet

from .venta import VentaForm

__all__ = ["VentaForm", "DetalleForm", "DetalleFormSet"]
