# apps/sales/gateways.py
"""
Adaptador ORM del puerto SaleService.

`create` delega en services.ventas.crear_venta, que descuenta el stock en la
misma transacción. Los errores de BD se traducen a TransportError.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction

from apps.orders.exceptions import SourceNotFound, TransportError
from apps.orders.ports import SaleService
from apps.sales import payment_status
from apps.sales.models import Venta
from apps.sales.services import ventas as ventas_services

logger = logging.getLogger(__name__)


def venta_a_dict(venta: Venta) -> Dict[str, Any]:
    detalles = list(venta.detalles.all())
    pagos = list(venta.pagos.all())
    total = venta.total
    return {
        "id": venta.pk,
        "cliente_id": venta.cliente_id,
        "almacen_id": venta.almacen_id,
        "pedido_id": venta.pedido_id,
        "fecha": venta.fecha.isoformat() if venta.fecha else None,
        "tipo_pago": venta.tipo_pago,
        "estado_pago": venta.estado_pago,
        "fecha_vencimiento": venta.fecha_vencimiento.isoformat() if venta.fecha_vencimiento else None,
        "notas": venta.notas,
        "detalles": [
            {
                "id": d.pk,
                "presentacion_id": d.presentacion_id,
                "cantidad": d.cantidad,
                "precio_unitario": str(d.precio_unitario),
            }
            for d in detalles
        ],
        "total": str(total),
        "monto_pagado": str(payment_status.total_pagado(pagos)),
        "saldo_pendiente": str(payment_status.saldo_pendiente(total, pagos)),
    }


class ORMSaleService(SaleService):
    def get(self, venta_id) -> Optional[Dict[str, Any]]:
        try:
            venta = (
                Venta.objects
                .prefetch_related("detalles", "pagos")
                .filter(pk=venta_id)
                .first()
            )
        except DatabaseError as exc:
            raise TransportError(f"No se pudo leer la venta {venta_id}.") from exc
        return venta_a_dict(venta) if venta else None

    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        try:
            venta = ventas_services.crear_venta(
                cliente_id=datos.get("cliente_id"),
                almacen_id=datos.get("almacen_id"),
                fecha=datos.get("fecha"),
                detalles=datos.get("detalles") or [],
                tipo_pago=datos.get("tipo_pago") or Venta.TipoPago.CONTADO,
                fecha_vencimiento=datos.get("fecha_vencimiento"),
                notas=datos.get("notas") or "",
                pedido_id=datos.get("pedido_id"),
            )
        except DatabaseError as exc:
            logger.exception("Error creando venta")
            raise TransportError("No se pudo guardar la venta.") from exc
        return self.get(venta.pk)

    def update(self, venta_id, datos: Dict[str, Any]) -> Dict[str, Any]:
        campos = {k: v for k, v in datos.items() if k in ventas_services.CAMPOS_EDITABLES}
        try:
            with transaction.atomic():
                ventas_services.actualizar_venta(
                    venta_id=venta_id, detalles=datos.get("detalles"), **campos)
        except Venta.DoesNotExist as exc:
            raise SourceNotFound(venta_id, "venta") from exc
        except DatabaseError as exc:
            logger.exception("Error actualizando venta %s", venta_id)
            raise TransportError(f"No se pudo actualizar la venta {venta_id}.") from exc
        return self.get(venta_id)

    def delete(self, venta_id) -> None:
        try:
            ventas_services.eliminar_venta(venta_id=venta_id)
        except DatabaseError as exc:
            raise TransportError(f"No se pudo eliminar la venta {venta_id}.") from exc
