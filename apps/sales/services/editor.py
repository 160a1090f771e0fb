# apps/sales/services/editor.py
"""
Sesión de edición de una venta.

- Precio por línea: `precio_unitario` (precio real).
- Stock obligatorio: agregar/actualizar una línea por encima del stock del
  almacén lanza InsufficientStock y no modifica las líneas.
- Al editar una venta existente, las cantidades que ella misma ya descontó
  cuentan como disponibles.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from apps.orders import validators
from apps.orders.editor import EditorOrden, ResultadoEnvio
from apps.orders.lines import LineSet
from apps.orders.ports import SaleService

logger = logging.getLogger(__name__)

TIPOS_PAGO = ("contado", "credito")


class VentaEditor(EditorOrden):
    campo_fecha = "fecha"
    reglas = validators.REGLAS_VENTA
    stock_obligatorio = True

    def __init__(self, catalogo, *, venta_id=None, tipo_pago: Optional[str] = None,
                 fecha_vencimiento=None, **kwargs):
        super().__init__(catalogo, **kwargs)
        self.venta_id = venta_id
        self.tipo_pago = tipo_pago or "contado"
        self.fecha_vencimiento = fecha_vencimiento
        # cantidades ya descontadas por esta venta (por presentación)
        self._reservado: Dict[Any, int] = {
            linea.presentacion_id: linea.cantidad for linea in self.lineas
        } if venta_id is not None else {}

    @classmethod
    def desde_registro(cls, registro: Mapping[str, Any], catalogo) -> "VentaEditor":
        return cls(
            catalogo,
            venta_id=registro.get("id"),
            tipo_pago=registro.get("tipo_pago"),
            fecha_vencimiento=registro.get("fecha_vencimiento"),
            almacen_id=registro.get("almacen_id"),
            cliente_id=registro.get("cliente_id"),
            fecha=registro.get("fecha"),
            notas=registro.get("notas") or "",
            lineas=LineSet.desde_detalles(registro.get("detalles") or [], campo_precio=cls.campo_precio),
        )

    def datos_extra(self) -> Dict[str, Any]:
        datos = {"tipo_pago": self.tipo_pago}
        if self.fecha_vencimiento:
            datos["fecha_vencimiento"] = self.fecha_vencimiento
        return datos

    def validar(self) -> Dict[str, str]:
        errores = super().validar()
        if self.tipo_pago not in TIPOS_PAGO:
            errores["tipo_pago"] = f"Tipo de pago inválido: {self.tipo_pago}"
        return errores

    def cambiar_almacen(self, nuevo_almacen_id) -> list:
        self._reservado = {}
        return super().cambiar_almacen(nuevo_almacen_id)

    def _chequear_stock(self, presentacion_id, cantidad: int):
        propio = self._reservado.get(presentacion_id, 0)
        return super()._chequear_stock(presentacion_id, max(0, cantidad - propio))

    def guardar(self, ventas: SaleService) -> ResultadoEnvio:
        """Crea o actualiza la venta a través del colaborador."""
        if self.venta_id is None:
            resultado = self.enviar(ventas.create)
        else:
            resultado = self.enviar(lambda datos: ventas.update(self.venta_id, datos))

        if resultado.ok and resultado.registro:
            self.venta_id = resultado.registro.get("id", self.venta_id)
            self.lineas.cargar(resultado.registro.get("detalles") or [], campo_precio=self.campo_precio)
            self._reservado = {l.presentacion_id: l.cantidad for l in self.lineas}
            logger.info("Venta %s guardada (%s líneas)", self.venta_id, len(self.lineas))
        return resultado
