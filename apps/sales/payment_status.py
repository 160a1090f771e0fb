# apps/sales/payment_status.py
"""
Derivación del estado de pago de una venta a partir de sus pagos.

- pendiente: pagado ≈ 0
- parcial:   0 < pagado < total
- pagado:    pagado ≥ total

Las comparaciones usan una tolerancia (ORDERS_PAYMENT_EPSILON, 0.005 por
defecto) para no quedar en 'parcial' por diferencias de redondeo.

Para pagos no negativos que solo se agregan, el estado es monótono:
pendiente → parcial → pagado, nunca retrocede.

Esta es la derivación autoritativa por venta. La estimación de cobranza
de los reportes (apps.reports) es otra cosa y no se alimenta de acá.
"""

from decimal import Decimal
from typing import Any, Iterable

from django.conf import settings

from apps.orders.calculations import _D

PENDIENTE = "pendiente"
PARCIAL = "parcial"
PAGADO = "pagado"


def epsilon() -> Decimal:
    return Decimal(str(getattr(settings, "ORDERS_PAYMENT_EPSILON", "0.005")))


def total_pagado(pagos: Iterable[Any]) -> Decimal:
    """Σ monto de los pagos (objetos con .monto o dicts con 'monto')."""
    total = Decimal("0")
    for pago in pagos or []:
        monto = pago.get("monto") if isinstance(pago, dict) else getattr(pago, "monto", 0)
        total += _D(monto)
    return total


def derivar_estado_pago(total, pagado) -> str:
    eps = epsilon()
    total = _D(total)
    pagado = _D(pagado)
    if pagado <= eps:
        return PENDIENTE
    if pagado >= total - eps:
        return PAGADO
    return PARCIAL


def estado_desde_pagos(total, pagos: Iterable[Any]) -> str:
    return derivar_estado_pago(total, total_pagado(pagos))


def saldo_pendiente(total, pagos: Iterable[Any]) -> Decimal:
    """total - pagado, nunca negativo."""
    saldo = _D(total) - total_pagado(pagos)
    return saldo if saldo > 0 else Decimal("0")
