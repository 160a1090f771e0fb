# apps/pedidos/selectors.py
from __future__ import annotations

from datetime import date
from typing import Optional

from django.db.models import QuerySet

from apps.pedidos.fsm import ESTADOS_EDITABLES
from apps.pedidos.models import Pedido


def pedidos_qs(
    *,
    estado: Optional[str] = None,
    almacen_id: Optional[int] = None,
    cliente_id: Optional[int] = None,
) -> QuerySet[Pedido]:
    qs = Pedido.objects.select_related("cliente", "almacen").prefetch_related("detalles")
    if estado:
        qs = qs.filter(estado=estado)
    if almacen_id:
        qs = qs.filter(almacen_id=almacen_id)
    if cliente_id:
        qs = qs.filter(cliente_id=cliente_id)
    return qs.order_by("fecha_entrega", "id")


def pedidos_por_entregar(*, hasta: Optional[date] = None, almacen_id: Optional[int] = None) -> QuerySet[Pedido]:
    """
    Pedidos programados/confirmados con entrega hasta `hasta` (proyección de despacho).
    """
    qs = pedidos_qs(almacen_id=almacen_id).filter(
        estado__in=[e.value for e in ESTADOS_EDITABLES])
    if hasta:
        qs = qs.filter(fecha_entrega__lte=hasta)
    return qs
