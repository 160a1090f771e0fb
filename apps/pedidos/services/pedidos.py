# apps/pedidos/services/pedidos.py
"""
Comandos principales sobre el modelo Pedido.
Capa de mutaciones: no renderiza, no maneja requests.

Toda mutación respeta la FSM (apps/pedidos/fsm.py): un pedido en estado
final (entregado/cancelado) no admite cambios → OrderClosed.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.orders import validators
from apps.orders.exceptions import InvalidQuantity, OrderClosed
from apps.orders.lines import LineSet
from apps.pedidos import fsm
from apps.pedidos.fsm import PedidoEstado
from apps.pedidos.models import Pedido, PedidoDetalle

logger = logging.getLogger(__name__)

CAMPO_PRECIO = "precio_estimado"
CAMPOS_EDITABLES = ("cliente_id", "almacen_id", "fecha_entrega", "notas")


def _lineas(detalles: Iterable[Mapping[str, Any]]) -> LineSet:
    """Normaliza los detalles (merge por presentación, cantidades/precios válidos)."""
    try:
        return LineSet.desde_detalles(detalles, campo_precio=CAMPO_PRECIO)
    except ValidationError as e:
        raise ValidationError({"detalles": e.messages})
    except InvalidQuantity as e:
        raise ValidationError({"detalles": str(e)})


def _guardar_detalles(pedido: Pedido, lineas: LineSet) -> None:
    pedido.detalles.all().delete()
    PedidoDetalle.objects.bulk_create([
        PedidoDetalle(
            pedido=pedido,
            presentacion_id=linea.presentacion_id,
            cantidad=linea.cantidad,
            precio_estimado=linea.precio_unitario,
        )
        for linea in lineas
    ])


def _bloquear(pedido_id) -> Pedido:
    return Pedido.objects.select_for_update().get(pk=pedido_id)


# ---------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------

@transaction.atomic
def crear_pedido(
    *,
    cliente_id,
    almacen_id,
    fecha_entrega,
    detalles: Iterable[Mapping[str, Any]],
    notas: str = "",
    vendedor=None,
) -> Pedido:
    """
    Crea un Pedido en estado 'programado' con sus líneas.
    Lanza ValidationError({campo: mensaje}) si falta algún dato requerido.
    """
    detalles = list(detalles or [])
    datos = {
        "cliente_id": cliente_id,
        "almacen_id": almacen_id,
        "fecha_entrega": fecha_entrega,
        "detalles": detalles,
    }
    errores = validators.validar(validators.REGLAS_PEDIDO, datos)
    if errores:
        raise ValidationError(errores)

    lineas = _lineas(detalles)
    pedido = Pedido(
        cliente_id=cliente_id,
        almacen_id=almacen_id,
        fecha_entrega=fecha_entrega,
        notas=(notas or "").strip(),
        estado=PedidoEstado.PROGRAMADO.value,
        vendedor=vendedor,
    )
    pedido.full_clean()
    pedido.save()
    _guardar_detalles(pedido, lineas)
    logger.info("Pedido %s creado (%s líneas, almacen=%s)", pedido.pk, len(lineas), almacen_id)
    return pedido


@transaction.atomic
def actualizar_pedido(
    *,
    pedido_id,
    detalles: Optional[Iterable[Mapping[str, Any]]] = None,
    **cambios: Any,
) -> Pedido:
    """
    Actualiza campos del pedido (patch semantics) y, si se pasan, reemplaza
    sus líneas.

    - Pedido en estado final → OrderClosed.
    - Cambio de almacén: exige las líneas nuevas (las anteriores no son
      portables entre almacenes).
    - El estado NO se cambia acá (ver cambiar_estado / conversión).
    """
    desconocidos = set(cambios) - set(CAMPOS_EDITABLES)
    if desconocidos:
        raise ValidationError(f"Campos no editables: {', '.join(sorted(desconocidos))}")

    pedido = _bloquear(pedido_id)
    fsm.exigir_editable(pedido.estado)
    almacen_anterior = pedido.almacen_id

    for campo, valor in cambios.items():
        if campo == "notas":
            valor = (valor or "").strip()
        setattr(pedido, campo, valor)

    reglas = {k: v for k, v in validators.REGLAS_PEDIDO.items() if k != "detalles"}
    datos = {
        "cliente_id": pedido.cliente_id,
        "almacen_id": pedido.almacen_id,
        "fecha_entrega": pedido.fecha_entrega,
    }
    if detalles is not None:
        detalles = list(detalles)
        reglas["detalles"] = validators.REGLAS_PEDIDO["detalles"]
        datos["detalles"] = detalles
    errores = validators.validar(reglas, datos)
    if pedido.almacen_id != almacen_anterior and detalles is None:
        errores.setdefault(
            "detalles", "Al cambiar de almacén se deben cargar nuevamente los productos.")
    if errores:
        raise ValidationError(errores)

    pedido.full_clean()
    pedido.save()
    if detalles is not None:
        _guardar_detalles(pedido, _lineas(detalles))

    logger.info("Pedido %s actualizado (%s)", pedido.pk, ", ".join(sorted(cambios)) or "líneas")
    return pedido


@transaction.atomic
def eliminar_pedido(*, pedido_id) -> None:
    """
    Elimina un pedido no entregado. Un pedido entregado ya tiene su venta
    y no se borra desde acá.
    """
    pedido = _bloquear(pedido_id)
    if pedido.estado == PedidoEstado.ENTREGADO.value:
        raise OrderClosed(pedido.estado)
    pedido.delete()
    logger.info("Pedido %s eliminado", pedido_id)


# ---------------------------------------------------------------------
# FSM (estado)
# ---------------------------------------------------------------------

@transaction.atomic
def cambiar_estado(*, pedido_id, nuevo_estado, via_conversion: bool = False) -> Pedido:
    """
    Transición de estado validada por la FSM.
    - Estado actual final → OrderClosed (sin cambios).
    - Transición inválida → InvalidTransition (sin cambios).
    """
    pedido = _bloquear(pedido_id)
    destino = fsm.exigir_transicion(pedido.estado, nuevo_estado, via_conversion=via_conversion)
    prev = pedido.estado
    pedido.estado = destino.value
    pedido.save(update_fields=["estado", "actualizado"])
    logger.info("Pedido %s: %s → %s", pedido.pk, prev, pedido.estado)
    return pedido


def confirmar_pedido(*, pedido_id) -> Pedido:
    """programado → confirmado (acción explícita del usuario)."""
    return cambiar_estado(pedido_id=pedido_id, nuevo_estado=PedidoEstado.CONFIRMADO)


def cancelar_pedido(*, pedido_id) -> Pedido:
    """programado | confirmado → cancelado."""
    return cambiar_estado(pedido_id=pedido_id, nuevo_estado=PedidoEstado.CANCELADO)


def marcar_entregado(*, pedido_id) -> Pedido:
    """
    programado | confirmado → entregado.
    Reservado a la conversión pedido → venta (services/conversion.py).
    """
    return cambiar_estado(
        pedido_id=pedido_id, nuevo_estado=PedidoEstado.ENTREGADO, via_conversion=True)
