# apps/payments/selectors.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from django.db.models import QuerySet, Sum

from apps.payments.models import Pago
from apps.sales import payment_status
from apps.sales.models import Venta
from apps.sales.selectors import ventas_pendientes


def pagos_de_venta(venta_id) -> QuerySet[Pago]:
    return Pago.objects.filter(venta_id=venta_id).order_by("fecha", "creado_en")


def total_cobrado(*, desde=None, hasta=None, metodo_pago: Optional[str] = None) -> Decimal:
    qs = Pago.objects.all()
    if desde:
        qs = qs.filter(fecha__gte=desde)
    if hasta:
        qs = qs.filter(fecha__lte=hasta)
    if metodo_pago:
        qs = qs.filter(metodo_pago=metodo_pago)
    return qs.aggregate(total=Sum("monto"))["total"] or Decimal("0")


def ventas_con_saldo(*, cliente_id: Optional[int] = None) -> List[Tuple[Venta, Decimal]]:
    """
    Ventas pendientes/parciales con su saldo (para elegir a qué venta imputar un pago).
    """
    return [
        (venta, payment_status.saldo_pendiente(venta.total, venta.pagos.all()))
        for venta in ventas_pendientes(cliente_id=cliente_id)
    ]
