# apps/sales/services/__init__.py
from .editor import VentaEditor
from .ventas import (
    actualizar_venta,
    crear_venta,
    eliminar_venta,
    sincronizar_estado_pago,
)

__all__ = [
    "VentaEditor",
    "actualizar_venta",
    "crear_venta",
    "eliminar_venta",
    "sincronizar_estado_pago",
]
