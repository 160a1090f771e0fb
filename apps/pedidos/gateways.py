# apps/pedidos/gateways.py
"""
Adaptador ORM del puerto OrderService.

Serializa pedidos como dicts con montos en strings decimales y delega las
mutaciones en services.pedidos. Los errores de BD se traducen a TransportError.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction

from apps.orders.exceptions import SourceNotFound, TransportError
from apps.orders.ports import OrderService
from apps.pedidos.fsm import PedidoEstado
from apps.pedidos.models import Pedido
from apps.pedidos.services import pedidos as pedidos_services

logger = logging.getLogger(__name__)


def pedido_a_dict(pedido: Pedido) -> Dict[str, Any]:
    detalles = list(pedido.detalles.all())
    return {
        "id": pedido.pk,
        "cliente_id": pedido.cliente_id,
        "almacen_id": pedido.almacen_id,
        "vendedor_id": pedido.vendedor_id,
        "fecha_entrega": pedido.fecha_entrega.isoformat() if pedido.fecha_entrega else None,
        "estado": pedido.estado,
        "notas": pedido.notas,
        "detalles": [
            {
                "id": d.pk,
                "presentacion_id": d.presentacion_id,
                "cantidad": d.cantidad,
                "precio_estimado": str(d.precio_estimado),
            }
            for d in detalles
        ],
        "total_estimado": str(sum((d.subtotal for d in detalles), Decimal("0"))),
    }


class ORMOrderService(OrderService):
    def get(self, pedido_id) -> Optional[Dict[str, Any]]:
        try:
            pedido = (
                Pedido.objects
                .prefetch_related("detalles")
                .filter(pk=pedido_id)
                .first()
            )
        except DatabaseError as exc:
            raise TransportError(f"No se pudo leer el pedido {pedido_id}.") from exc
        return pedido_a_dict(pedido) if pedido else None

    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        try:
            pedido = pedidos_services.crear_pedido(
                cliente_id=datos.get("cliente_id"),
                almacen_id=datos.get("almacen_id"),
                fecha_entrega=datos.get("fecha_entrega"),
                detalles=datos.get("detalles") or [],
                notas=datos.get("notas") or "",
            )
        except DatabaseError as exc:
            logger.exception("Error creando pedido")
            raise TransportError("No se pudo guardar el pedido.") from exc
        return self.get(pedido.pk)

    def update(self, pedido_id, datos: Dict[str, Any]) -> Dict[str, Any]:
        """
        Actualización parcial. `estado` se enruta por la FSM: 'entregado'
        solo como parte de la conversión, el resto como transición explícita.
        Campos y estado se aplican juntos o no se aplica nada.
        """
        datos = dict(datos)
        estado = datos.pop("estado", None)
        try:
            with transaction.atomic():
                campos = {k: v for k, v in datos.items() if k in pedidos_services.CAMPOS_EDITABLES}
                if campos or "detalles" in datos:
                    pedidos_services.actualizar_pedido(
                        pedido_id=pedido_id, detalles=datos.get("detalles"), **campos)
                if estado == PedidoEstado.ENTREGADO.value:
                    pedidos_services.marcar_entregado(pedido_id=pedido_id)
                elif estado is not None:
                    pedidos_services.cambiar_estado(pedido_id=pedido_id, nuevo_estado=estado)
        except Pedido.DoesNotExist as exc:
            raise SourceNotFound(pedido_id) from exc
        except DatabaseError as exc:
            logger.exception("Error actualizando pedido %s", pedido_id)
            raise TransportError(f"No se pudo actualizar el pedido {pedido_id}.") from exc
        return self.get(pedido_id)

    def delete(self, pedido_id) -> None:
        try:
            pedidos_services.eliminar_pedido(pedido_id=pedido_id)
        except DatabaseError as exc:
            raise TransportError(f"No se pudo eliminar el pedido {pedido_id}.") from exc
