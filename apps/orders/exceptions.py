# apps/orders/exceptions.py
"""
Taxonomía de errores del núcleo de pedidos/ventas.

- Errores de campo: se usan `django.core.exceptions.ValidationError` y se
  resuelven en la fachada de validación (los editores devuelven dicts).
- Stock y estado: excepciones tipadas; el llamador decide si pregunta al usuario.
- Transporte: fallas de colaboradores externos (BD/red). Siempre reintentables.

Todos los mensajes son específicos y accionables.
"""

from __future__ import annotations

from typing import Dict, Optional


class OrderCoreError(Exception):
    """Base de los errores del núcleo."""


class InvalidQuantity(OrderCoreError):
    """Cantidad no positiva o no entera al agregar una línea."""

    def __init__(self, cantidad=None):
        self.cantidad = cantidad
        super().__init__(
            f"Cantidad inválida: {cantidad!r}. Debe ser un entero mayor a 0.")


class IndexOutOfRange(OrderCoreError):
    """Índice de línea inexistente (solo en modo estricto)."""

    def __init__(self, indice: int, largo: int):
        self.indice = indice
        self.largo = largo
        super().__init__(
            f"No existe la línea {indice} (el pedido tiene {largo} líneas).")


class InsufficientStock(OrderCoreError):
    """La cantidad pedida supera el stock disponible del almacén."""

    def __init__(self, *, presentacion_id, disponible: int, solicitado: int):
        self.presentacion_id = presentacion_id
        self.disponible = disponible
        self.solicitado = solicitado
        super().__init__(f"Stock insuficiente: disponible {disponible}")


class OrderClosed(OrderCoreError):
    """Se intentó mutar un pedido en estado terminal (entregado/cancelado)."""

    def __init__(self, estado: str):
        self.estado = str(estado)
        super().__init__(
            f"El pedido está {self.estado}; no admite cambios.")


class InvalidTransition(OrderCoreError):
    """Transición de estado no permitida por la FSM."""

    def __init__(self, desde: str, hacia: str):
        self.desde = str(desde)
        self.hacia = str(hacia)
        super().__init__(f"No se puede pasar de {self.desde} a {self.hacia}")


class AlreadyConverted(OrderCoreError):
    """El pedido ya fue convertido en venta (estado entregado)."""

    def __init__(self, pedido_id):
        self.pedido_id = pedido_id
        super().__init__(f"El pedido {pedido_id} ya fue convertido en venta.")


class SourceNotFound(OrderCoreError):
    """El registro (pedido o venta) no existe en el colaborador."""

    def __init__(self, registro_id, recurso: str = "pedido"):
        self.registro_id = registro_id
        self.recurso = recurso
        super().__init__(f"No se encontró el {recurso} {registro_id}.")


class ConversionFailed(OrderCoreError):
    """La conversión pedido → venta no pudo completarse."""

    def __init__(self, mensaje: str, *, errores: Optional[Dict[str, str]] = None):
        self.errores = dict(errores or {})
        super().__init__(mensaje)


class TransportError(OrderCoreError):
    """Falla de un colaborador externo (persistencia/red)."""

