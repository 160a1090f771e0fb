# apps/catalog/services/inventory.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.catalog.models import Inventario
from apps.orders.calculations import parse_cantidad
from apps.orders.exceptions import InsufficientStock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventarioResult:
    """Resultado de un movimiento de stock: filas tocadas y cantidades finales."""
    almacen_id: int
    movimientos: Tuple[Tuple[int, int], ...] = ()  # (presentacion_id, cantidad_resultante)


def _agrupar(lineas: Iterable[Dict[str, Any]]) -> Dict[int, int]:
    """Suma cantidades por presentación (una venta no debería repetir, pero se tolera)."""
    cantidades: Dict[int, int] = {}
    for linea in lineas or []:
        presentacion_id = int(linea["presentacion_id"])
        cantidad = parse_cantidad(linea["cantidad"])
        if cantidad <= 0:
            raise ValidationError({"cantidad": "La cantidad debe ser mayor a 0."})
        cantidades[presentacion_id] = cantidades.get(presentacion_id, 0) + cantidad
    return cantidades


@transaction.atomic
def descontar_stock(*, almacen_id: int, lineas: Iterable[Dict[str, Any]]) -> InventarioResult:
    """
    Descuenta del almacén la cantidad de cada línea.

    Reglas:
    - Todo o nada: si una presentación no alcanza, no se descuenta ninguna.
    - Sin fila de Inventario → stock 0 (InsufficientStock).
    - Las filas se bloquean (select_for_update) en orden de presentación.
    """
    cantidades = _agrupar(lineas)
    filas = {
        inv.presentacion_id: inv
        for inv in (
            Inventario.objects
            .select_for_update()
            .filter(almacen_id=almacen_id, presentacion_id__in=list(cantidades))
            .order_by("presentacion_id")
        )
    }

    for presentacion_id, solicitado in sorted(cantidades.items()):
        disponible = filas[presentacion_id].cantidad if presentacion_id in filas else 0
        if solicitado > disponible:
            logger.warning(
                "Descuento rechazado almacen=%s presentacion=%s solicitado=%s disponible=%s",
                almacen_id, presentacion_id, solicitado, disponible,
            )
            raise InsufficientStock(
                presentacion_id=presentacion_id,
                disponible=disponible,
                solicitado=solicitado,
            )

    movimientos: List[Tuple[int, int]] = []
    for presentacion_id, solicitado in sorted(cantidades.items()):
        inv = filas[presentacion_id]
        inv.cantidad = inv.cantidad - solicitado
        inv.save(update_fields=["cantidad", "ultima_actualizacion"])
        movimientos.append((presentacion_id, inv.cantidad))

    logger.info("Stock descontado almacen=%s movimientos=%s", almacen_id, movimientos)
    return InventarioResult(almacen_id=almacen_id, movimientos=tuple(movimientos))


@transaction.atomic
def ajustar_stock(*, almacen_id: int, presentacion_id: int, cantidad: int) -> InventarioResult:
    """
    Fija el stock de la presentación en el almacén (alta de inventario o conteo).
    Crea la fila si no existe.
    """
    cantidad_n = parse_cantidad(cantidad)
    inv, _ = (
        Inventario.objects
        .select_for_update()
        .get_or_create(almacen_id=almacen_id, presentacion_id=presentacion_id)
    )
    inv.cantidad = cantidad_n
    inv.save()
    return InventarioResult(almacen_id=almacen_id, movimientos=((presentacion_id, cantidad_n),))


@transaction.atomic
def reponer_stock(*, almacen_id: int, lineas: Iterable[Dict[str, Any]]) -> InventarioResult:
    """
    Devuelve al almacén las cantidades de las líneas (anulación o edición de
    una venta). Crea la fila de Inventario si no existe.
    """
    cantidades = _agrupar(lineas)
    movimientos: List[Tuple[int, int]] = []
    for presentacion_id, cantidad in sorted(cantidades.items()):
        inv, _ = (
            Inventario.objects
            .select_for_update()
            .get_or_create(almacen_id=almacen_id, presentacion_id=presentacion_id)
        )
        inv.cantidad = inv.cantidad + cantidad
        inv.save(update_fields=["cantidad", "ultima_actualizacion"])
        movimientos.append((presentacion_id, inv.cantidad))
    logger.info("Stock repuesto almacen=%s movimientos=%s", almacen_id, movimientos)
    return InventarioResult(almacen_id=almacen_id, movimientos=tuple(movimientos))
