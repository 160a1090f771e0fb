# apps/pedidos/services/editor.py
"""
Sesión de edición de un pedido proyectado.

- Precio por línea: `precio_estimado` (tomado del catálogo si no se informa).
- Stock: validación orientativa; si no alcanza, se agrega igual y queda una
  advertencia en `editor.advertencias`.
- Pedidos entregados/cancelados no admiten cambios (OrderClosed).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from apps.orders import validators
from apps.orders.editor import EditorOrden, ResultadoEnvio
from apps.orders.lines import LineSet
from apps.orders.ports import OrderService
from apps.pedidos import fsm
from apps.pedidos.fsm import PedidoEstado

logger = logging.getLogger(__name__)


class PedidoEditor(EditorOrden):
    campo_precio = "precio_estimado"
    campo_fecha = "fecha_entrega"
    reglas = validators.REGLAS_PEDIDO
    stock_obligatorio = False

    def __init__(self, catalogo, *, pedido_id=None, estado=PedidoEstado.PROGRAMADO, **kwargs):
        super().__init__(catalogo, **kwargs)
        self.pedido_id = pedido_id
        self.estado = PedidoEstado(getattr(estado, "value", estado))

    @classmethod
    def desde_registro(cls, registro: Mapping[str, Any], catalogo) -> "PedidoEditor":
        """Sesión de edición para un pedido existente (dict de OrderService.get)."""
        return cls(
            catalogo,
            pedido_id=registro.get("id"),
            estado=registro.get("estado") or PedidoEstado.PROGRAMADO,
            almacen_id=registro.get("almacen_id"),
            cliente_id=registro.get("cliente_id"),
            fecha=registro.get("fecha_entrega"),
            notas=registro.get("notas") or "",
            lineas=LineSet.desde_detalles(
                registro.get("detalles") or [], campo_precio=cls.campo_precio),
        )

    def verificar_editable(self) -> None:
        fsm.exigir_editable(self.estado)

    def guardar(self, pedidos: OrderService) -> ResultadoEnvio:
        """Crea o actualiza el pedido a través del colaborador."""
        if self.pedido_id is None:
            resultado = self.enviar(pedidos.create)
        else:
            resultado = self.enviar(lambda datos: pedidos.update(self.pedido_id, datos))

        if resultado.ok and resultado.registro:
            self.pedido_id = resultado.registro.get("id", self.pedido_id)
            self.lineas.cargar(
                resultado.registro.get("detalles") or [], campo_precio=self.campo_precio)
            logger.info("Pedido %s guardado (%s líneas)", self.pedido_id, len(self.lineas))
        return resultado
