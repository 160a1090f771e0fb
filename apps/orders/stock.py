# apps/orders/stock.py
"""
Validación de cantidades contra el stock disponible por almacén.

El stock se lee del CatalogCache (sin acceso directo a BD). Una presentación
ausente del catálogo del almacén cuenta como stock 0.

- Pedidos: la validación es orientativa (el editor registra una advertencia).
- Ventas: es obligatoria antes de agregar/actualizar líneas (`exigir`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.orders.exceptions import InsufficientStock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultadoStock:
    ok: bool
    disponible: int
    solicitado: int
    presentacion_id: object = None

    @property
    def mensaje(self) -> str:
        if self.ok:
            return ""
        return f"Stock insuficiente: disponible {self.disponible}"


class StockValidator:
    """Valida cantidades usando el catálogo cacheado del almacén."""

    def __init__(self, catalogo):
        # catalogo: CatalogCache (o cualquier objeto con .disponible(almacen_id, presentacion_id))
        self.catalogo = catalogo

    def validar(self, presentacion_id, cantidad: int, almacen_id) -> ResultadoStock:
        """ok si cantidad <= disponible(presentacion, almacen)."""
        disponible = self.catalogo.disponible(almacen_id, presentacion_id)
        ok = int(cantidad) <= disponible
        if not ok:
            logger.info(
                "Stock insuficiente presentacion=%s almacen=%s solicitado=%s disponible=%s",
                presentacion_id, almacen_id, cantidad, disponible,
            )
        return ResultadoStock(
            ok=ok,
            disponible=disponible,
            solicitado=int(cantidad),
            presentacion_id=presentacion_id,
        )

    def exigir(self, presentacion_id, cantidad: int, almacen_id) -> ResultadoStock:
        """Como `validar`, pero lanza InsufficientStock si no alcanza."""
        resultado = self.validar(presentacion_id, cantidad, almacen_id)
        if not resultado.ok:
            raise InsufficientStock(
                presentacion_id=presentacion_id,
                disponible=resultado.disponible,
                solicitado=resultado.solicitado,
            )
        return resultado
