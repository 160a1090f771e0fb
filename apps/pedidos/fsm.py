# apps/pedidos/fsm.py
"""
Máquina de estados del pedido proyectado.

Estados: programado | confirmado | entregado | cancelado

Reglas de transición:
- Desde 'programado' se puede:
    - confirmar → 'confirmado'   (acción explícita, sin efectos colaterales)
    - cancelar → 'cancelado'
- Desde 'confirmado' se puede:
    - cancelar → 'cancelado'
- 'programado' y 'confirmado' pasan a 'entregado' SOLO al convertirse en venta
  (ver services/conversion.py).
- 'entregado' y 'cancelado' son finales: no admiten cambios de líneas ni de estado.

El estado de pago de la venta resultante se gestiona aparte
(apps/sales/payment_status.py).
"""

from enum import Enum
from typing import Iterable, Union

from apps.orders.exceptions import InvalidTransition, OrderClosed


class PedidoEstado(str, Enum):
    PROGRAMADO = "programado"
    CONFIRMADO = "confirmado"
    ENTREGADO = "entregado"
    CANCELADO = "cancelado"


# Transiciones explícitas (acciones del usuario)
_TRANSICIONES = {
    PedidoEstado.PROGRAMADO: {PedidoEstado.CONFIRMADO, PedidoEstado.CANCELADO},
    PedidoEstado.CONFIRMADO: {PedidoEstado.CANCELADO},
    PedidoEstado.ENTREGADO:  set(),
    PedidoEstado.CANCELADO:  set(),
}

# Transiciones reservadas a la conversión pedido → venta
_TRANSICIONES_CONVERSION = {
    PedidoEstado.PROGRAMADO: {PedidoEstado.ENTREGADO},
    PedidoEstado.CONFIRMADO: {PedidoEstado.ENTREGADO},
}

ESTADOS_EDITABLES = (PedidoEstado.PROGRAMADO, PedidoEstado.CONFIRMADO)


def _coerce_estado(value: Union[str, PedidoEstado]) -> PedidoEstado:
    """Convierte cadenas o enums en PedidoEstado; lanza ValueError si es inválido."""
    if isinstance(value, PedidoEstado):
        return value
    return PedidoEstado(str(value))


def transiciones_desde(desde: Union[str, PedidoEstado], *, via_conversion: bool = False) -> Iterable[PedidoEstado]:
    """Devuelve el conjunto de estados permitidos desde 'desde'."""
    estado = _coerce_estado(desde)
    permitidos = set(_TRANSICIONES.get(estado, set()))
    if via_conversion:
        permitidos |= _TRANSICIONES_CONVERSION.get(estado, set())
    return permitidos


def puede_transicionar(
    desde: Union[str, PedidoEstado],
    hacia: Union[str, PedidoEstado],
    *,
    via_conversion: bool = False,
) -> bool:
    """Valida si se permite pasar de un estado a otro."""
    try:
        estado_desde = _coerce_estado(desde)
        estado_hacia = _coerce_estado(hacia)
    except ValueError:
        return False
    return estado_hacia in transiciones_desde(estado_desde, via_conversion=via_conversion)


def es_final(estado: Union[str, PedidoEstado]) -> bool:
    """True si el estado no admite transiciones (ni siquiera por conversión)."""
    try:
        e = _coerce_estado(estado)
    except ValueError:
        return False
    return not transiciones_desde(e, via_conversion=True)


def es_convertible(estado: Union[str, PedidoEstado]) -> bool:
    try:
        return _coerce_estado(estado) in ESTADOS_EDITABLES
    except ValueError:
        return False


def exigir_editable(estado: Union[str, PedidoEstado]) -> None:
    """Lanza OrderClosed si el pedido está en un estado final."""
    if es_final(estado):
        raise OrderClosed(_coerce_estado(estado).value)


def exigir_transicion(
    desde: Union[str, PedidoEstado],
    hacia: Union[str, PedidoEstado],
    *,
    via_conversion: bool = False,
) -> PedidoEstado:
    """
    Valida la transición y devuelve el estado destino.
    - Estado origen final → OrderClosed.
    - Transición no permitida (o 'entregado' fuera de la conversión) → InvalidTransition.
    """
    exigir_editable(desde)
    if not puede_transicionar(desde, hacia, via_conversion=via_conversion):
        raise InvalidTransition(_coerce_estado(desde).value, str(getattr(hacia, "value", hacia)))
    return _coerce_estado(hacia)
