# apps/pedidos/services/conversion.py
"""
Conversión de un pedido proyectado en una venta confirmada.

Pasos:
1) Se vuelve a leer el pedido completo desde el colaborador (nunca se usa
   una copia en memoria que pueda estar desactualizada).
2) Se arma la venta: mismo cliente y almacén, fecha = hoy, tipo_pago crédito
   por defecto, una línea por línea del pedido con
   precio_unitario := precio_estimado (sin re-cotizar contra el catálogo).
3) Se crea la venta. El descuento de stock es responsabilidad del
   colaborador de ventas; acá solo se informan las cantidades.
4) Se marca el pedido como 'entregado'. Si esto falla, la venta se conserva
   y el resultado lleva una advertencia (no se revierte la venta).

Errores:
- Pedido inexistente → SourceNotFound.
- Pedido entregado → AlreadyConverted.
- Pedido cancelado o con datos inválidos → ConversionFailed(errores).
- Fallas de transporte al crear la venta → se propagan sin cambios.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.orders import validators
from apps.orders.exceptions import (
    AlreadyConverted,
    ConversionFailed,
    InvalidQuantity,
    SourceNotFound,
)
from apps.orders.lines import CAMPO_PRECIO, LineSet
from apps.orders.ports import OrderService, SaleService
from apps.pedidos import fsm
from apps.pedidos.fsm import PedidoEstado

logger = logging.getLogger(__name__)

EVENTO_ESTADO_PENDIENTE = "conversion_estado_pendiente"


@dataclass(frozen=True)
class ResultadoConversion:
    venta: Dict[str, Any]
    advertencias: Tuple[str, ...] = ()

    @property
    def con_advertencias(self) -> bool:
        return bool(self.advertencias)


def construir_venta(pedido: Mapping[str, Any], *, hoy: datetime.date) -> Dict[str, Any]:
    """
    Payload de la venta a partir del pedido. El precio estimado de cada
    línea queda congelado como precio real.
    """
    lineas = LineSet.desde_detalles(pedido.get("detalles") or [], campo_precio="precio_estimado")
    detalles = [
        {k: v for k, v in item.items() if k != "id"}
        for item in lineas.a_payload(campo_precio=CAMPO_PRECIO)
    ]
    return {
        "cliente_id": pedido.get("cliente_id"),
        "almacen_id": pedido.get("almacen_id"),
        "fecha": hoy.isoformat(),
        "tipo_pago": getattr(settings, "ORDERS_DEFAULT_TIPO_PAGO", "credito"),
        "notas": pedido.get("notas") or "",
        "pedido_id": pedido.get("id"),
        "detalles": detalles,
    }


def convertir_pedido_a_venta(
    pedido_id,
    *,
    pedidos: OrderService,
    ventas: SaleService,
    hoy: Optional[datetime.date] = None,
    app_log: bool = True,
) -> ResultadoConversion:
    pedido = pedidos.get(pedido_id)
    if pedido is None:
        raise SourceNotFound(pedido_id)

    estado = pedido.get("estado")
    if estado == PedidoEstado.ENTREGADO.value:
        raise AlreadyConverted(pedido_id)
    if not fsm.es_convertible(estado):
        raise ConversionFailed(
            f"El pedido {pedido_id} está {estado}; no se puede convertir en venta.",
            errores={"estado": f"Estado no convertible: {estado}"},
        )

    errores = validators.validar(validators.REGLAS_PEDIDO, pedido)
    if errores:
        raise ConversionFailed(
            f"El pedido {pedido_id} tiene datos incompletos.", errores=errores)

    hoy = hoy or timezone.localdate()
    try:
        payload = construir_venta(pedido, hoy=hoy)
    except (ValidationError, InvalidQuantity) as exc:
        raise ConversionFailed(
            f"El pedido {pedido_id} tiene líneas inválidas: {exc}",
            errores={"detalles": str(exc)},
        ) from exc

    errores = validators.validar(validators.REGLAS_VENTA, payload)
    if errores:
        raise ConversionFailed(
            f"La venta del pedido {pedido_id} no es válida.", errores=errores)

    venta = ventas.create(payload)
    if venta is None:
        raise ConversionFailed(
            f"El servicio de ventas no devolvió la venta del pedido {pedido_id}.")
    venta_id = venta.get("id")
    logger.info("Pedido %s convertido en venta %s (%s líneas)",
                pedido_id, venta_id, len(payload["detalles"]))

    advertencias = []
    try:
        pedidos.update(pedido_id, {"estado": PedidoEstado.ENTREGADO.value})
    except Exception as exc:
        mensaje = (
            f"La venta {venta_id} se creó, pero no se pudo marcar el pedido "
            f"{pedido_id} como entregado: {exc}"
        )
        advertencias.append(mensaje)
        if app_log:
            _registrar_advertencia(mensaje, pedido_id=pedido_id, venta_id=venta_id, exc=exc)
        logger.warning(mensaje, extra={"applog": False, "pedido_id": pedido_id, "venta_id": venta_id})

    return ResultadoConversion(venta=venta, advertencias=tuple(advertencias))


def _registrar_advertencia(mensaje: str, *, pedido_id, venta_id, exc: Exception) -> None:
    """
    Deja la advertencia en AppLog. La venta ya existe: si la BD tampoco
    acepta el log, se informa por el logger y la conversión sigue.
    """
    from apps.app_log.services.logger import log_event

    try:
        log_event(
            "warning",
            __name__,
            EVENTO_ESTADO_PENDIENTE,
            mensaje,
            meta={"pedido_id": pedido_id, "venta_id": venta_id,
                  "exception_type": type(exc).__name__},
            resource_type="pedidos.Pedido",
            resource_id=pedido_id,
        )
    except Exception:
        logger.exception("No se pudo registrar en AppLog la advertencia del pedido %s",
                         pedido_id, extra={"applog": False})
