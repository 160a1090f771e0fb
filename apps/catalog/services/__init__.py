# apps/catalog/services/__init__.py
from .cache import CatalogCache
from .inventory import (
    InventarioResult,
    descontar_stock,
    reponer_stock,
    ajustar_stock,
)
from .lotes import crear_lote

__all__ = [
    "CatalogCache",
    "InventarioResult",
    "descontar_stock",
    "reponer_stock",
    "ajustar_stock",
    "crear_lote",
]
