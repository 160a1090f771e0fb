# apps/catalog/gateways.py
"""
Adaptadores ORM de los puertos de catálogo e inventario.
Los errores de BD se traducen a TransportError (reintentables).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from django.db import DatabaseError

from apps.catalog import selectors
from apps.catalog.services.inventory import descontar_stock
from apps.orders.exceptions import TransportError
from apps.orders.ports import CatalogService, InventoryService, PresentacionCatalogo

logger = logging.getLogger(__name__)


class ORMCatalogService(CatalogService):
    def list_presentations(self, almacen_id: int) -> List[PresentacionCatalogo]:
        try:
            return selectors.presentaciones_por_almacen(almacen_id)
        except DatabaseError as exc:
            logger.exception("Error leyendo catálogo almacen=%s", almacen_id)
            raise TransportError(f"No se pudo cargar el catálogo del almacén {almacen_id}.") from exc


class ORMInventoryService(InventoryService):
    def descontar(self, almacen_id: int, lineas: Iterable[Dict[str, Any]]) -> None:
        try:
            descontar_stock(almacen_id=almacen_id, lineas=lineas)
        except DatabaseError as exc:
            logger.exception("Error descontando stock almacen=%s", almacen_id)
            raise TransportError("No se pudo actualizar el inventario.") from exc
