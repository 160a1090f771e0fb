# apps/sales/selectors.py
from __future__ import annotations

from datetime import date
from typing import Optional

from django.db.models import QuerySet

from apps.sales.models import Venta


def ventas_qs(
    *,
    estado_pago: Optional[str] = None,
    almacen_id: Optional[int] = None,
    cliente_id: Optional[int] = None,
    desde: Optional[date] = None,
    hasta: Optional[date] = None,
) -> QuerySet[Venta]:
    qs = Venta.objects.select_related("cliente", "almacen").prefetch_related("detalles", "pagos")
    if estado_pago:
        qs = qs.filter(estado_pago=estado_pago)
    if almacen_id:
        qs = qs.filter(almacen_id=almacen_id)
    if cliente_id:
        qs = qs.filter(cliente_id=cliente_id)
    if desde:
        qs = qs.filter(fecha__gte=desde)
    if hasta:
        qs = qs.filter(fecha__lte=hasta)
    return qs.order_by("-fecha", "-id")


def ventas_pendientes(*, cliente_id: Optional[int] = None) -> QuerySet[Venta]:
    """Ventas con saldo: estado_pago pendiente o parcial."""
    return ventas_qs(cliente_id=cliente_id).filter(
        estado_pago__in=[Venta.EstadoPago.PENDIENTE, Venta.EstadoPago.PARCIAL],
    ).order_by("fecha", "id")


def ventas_vencidas(*, hoy: date) -> QuerySet[Venta]:
    """Ventas a crédito con vencimiento anterior a `hoy` y saldo pendiente."""
    return ventas_pendientes().filter(
        tipo_pago=Venta.TipoPago.CREDITO, fecha_vencimiento__lt=hoy)
