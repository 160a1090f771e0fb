# apps/sales/services/ventas.py
"""
Comandos principales sobre el modelo Venta.
Capa de mutaciones: no renderiza, no maneja requests.

- Crear una venta descuenta stock del almacén en la misma transacción
  (si alguna línea no alcanza, no se crea nada: InsufficientStock).
- `estado_pago` solo cambia vía `sincronizar_estado_pago` (derivado de pagos).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.catalog.services.inventory import descontar_stock, reponer_stock
from apps.orders import validators
from apps.orders.exceptions import AlreadyConverted, InvalidQuantity
from apps.orders.lines import CAMPO_PRECIO, LineSet
from apps.sales import payment_status
from apps.sales.models import Venta, VentaDetalle

logger = logging.getLogger(__name__)

CAMPOS_EDITABLES = ("cliente_id", "almacen_id", "fecha", "tipo_pago", "fecha_vencimiento", "notas")


def _lineas(detalles: Iterable[Mapping[str, Any]]) -> LineSet:
    try:
        return LineSet.desde_detalles(detalles, campo_precio=CAMPO_PRECIO)
    except ValidationError as e:
        raise ValidationError({"detalles": e.messages})
    except InvalidQuantity as e:
        raise ValidationError({"detalles": str(e)})


def _guardar_detalles(venta: Venta, lineas: LineSet) -> None:
    venta.detalles.all().delete()
    VentaDetalle.objects.bulk_create([
        VentaDetalle(
            venta=venta,
            presentacion_id=linea.presentacion_id,
            cantidad=linea.cantidad,
            precio_unitario=linea.precio_unitario,
        )
        for linea in lineas
    ])


def _detalles_actuales(venta: Venta) -> list:
    return [
        {"presentacion_id": d.presentacion_id, "cantidad": d.cantidad}
        for d in venta.detalles.all()
    ]


def _validar_tipo_pago(tipo_pago: str) -> None:
    if tipo_pago not in Venta.TipoPago.values:
        raise ValidationError({"tipo_pago": f"Tipo de pago inválido: {tipo_pago}"})


# ---------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------

@transaction.atomic
def crear_venta(
    *,
    cliente_id,
    almacen_id,
    fecha,
    detalles: Iterable[Mapping[str, Any]],
    tipo_pago: str = Venta.TipoPago.CONTADO,
    fecha_vencimiento=None,
    notas: str = "",
    pedido_id=None,
    vendedor=None,
) -> Venta:
    """
    Crea una venta con sus líneas y descuenta el stock del almacén.

    - Datos requeridos faltantes → ValidationError({campo: mensaje}).
    - Stock insuficiente en alguna línea → InsufficientStock (rollback total).
    - El pedido de origen ya tiene venta → AlreadyConverted.
    """
    detalles = list(detalles or [])
    errores = validators.validar(validators.REGLAS_VENTA, {
        "cliente_id": cliente_id,
        "almacen_id": almacen_id,
        "fecha": fecha,
        "detalles": detalles,
    })
    if errores:
        raise ValidationError(errores)
    _validar_tipo_pago(tipo_pago)

    if pedido_id is not None and Venta.objects.filter(pedido_id=pedido_id).exists():
        raise AlreadyConverted(pedido_id)

    lineas = _lineas(detalles)
    venta = Venta(
        cliente_id=cliente_id,
        almacen_id=almacen_id,
        fecha=fecha,
        tipo_pago=tipo_pago,
        fecha_vencimiento=fecha_vencimiento or None,
        notas=(notas or "").strip(),
        pedido_id=pedido_id,
        vendedor=vendedor,
        estado_pago=Venta.EstadoPago.PENDIENTE,
    )
    venta.full_clean()
    venta.save()
    _guardar_detalles(venta, lineas)
    descontar_stock(almacen_id=almacen_id, lineas=lineas.a_payload())

    logger.info("Venta %s creada (%s líneas, total=%s, almacen=%s, pedido=%s)",
                venta.pk, len(lineas), lineas.total(), almacen_id, pedido_id)
    return venta


@transaction.atomic
def actualizar_venta(
    *,
    venta_id,
    detalles: Optional[Iterable[Mapping[str, Any]]] = None,
    **cambios: Any,
) -> Venta:
    """
    Actualiza campos de la venta (patch semantics).

    Reemplazar líneas (o cambiar de almacén) repone el stock de las líneas
    anteriores y descuenta el de las nuevas. Solo se permite si la venta no
    tiene pagos registrados.
    """
    desconocidos = set(cambios) - set(CAMPOS_EDITABLES)
    if desconocidos:
        raise ValidationError(f"Campos no editables: {', '.join(sorted(desconocidos))}")

    venta = Venta.objects.select_for_update().get(pk=venta_id)
    almacen_anterior = venta.almacen_id
    anteriores = _detalles_actuales(venta)

    for campo, valor in cambios.items():
        if campo == "notas":
            valor = (valor or "").strip()
        setattr(venta, campo, valor)
    _validar_tipo_pago(venta.tipo_pago)

    cambia_almacen = venta.almacen_id != almacen_anterior
    if detalles is not None or cambia_almacen:
        if venta.pagos.exists():
            raise ValidationError(
                "No se pueden modificar los productos de una venta con pagos registrados.")
        if detalles is None:
            raise ValidationError(
                {"detalles": "Al cambiar de almacén se deben cargar nuevamente los productos."})

    reglas = {k: v for k, v in validators.REGLAS_VENTA.items() if k != "detalles"}
    datos = {"cliente_id": venta.cliente_id, "almacen_id": venta.almacen_id, "fecha": venta.fecha}
    if detalles is not None:
        detalles = list(detalles)
        reglas["detalles"] = validators.REGLAS_VENTA["detalles"]
        datos["detalles"] = detalles
    errores = validators.validar(reglas, datos)
    if errores:
        raise ValidationError(errores)

    venta.full_clean()
    venta.save()

    if detalles is not None:
        lineas = _lineas(detalles)
        reponer_stock(almacen_id=almacen_anterior, lineas=anteriores)
        _guardar_detalles(venta, lineas)
        descontar_stock(almacen_id=venta.almacen_id, lineas=lineas.a_payload())
        sincronizar_estado_pago(venta=venta)

    logger.info("Venta %s actualizada (%s)", venta.pk, ", ".join(sorted(cambios)) or "líneas")
    return venta


@transaction.atomic
def eliminar_venta(*, venta_id) -> None:
    """
    Elimina una venta sin pagos y repone su stock.
    """
    venta = Venta.objects.select_for_update().get(pk=venta_id)
    if venta.pagos.exists():
        raise ValidationError("No se puede eliminar una venta con pagos registrados.")
    reponer_stock(almacen_id=venta.almacen_id, lineas=_detalles_actuales(venta))
    venta.delete()
    logger.info("Venta %s eliminada (stock repuesto)", venta_id)


# ---------------------------------------------------------------------
# Estado de pago (derivado)
# ---------------------------------------------------------------------

@transaction.atomic
def sincronizar_estado_pago(*, venta: Venta) -> Venta:
    """
    Recalcula `estado_pago` desde total y pagos y lo guarda si cambió.
    """
    pagos = list(venta.pagos.all())
    nuevo = payment_status.estado_desde_pagos(venta.total, pagos)
    if nuevo != venta.estado_pago:
        prev = venta.estado_pago
        venta.estado_pago = nuevo
        venta.save(update_fields=["estado_pago", "actualizado"])
        logger.info("Venta %s: estado_pago %s → %s", venta.pk, prev, nuevo)
    return venta
