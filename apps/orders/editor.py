# apps/orders/editor.py
"""
Sesión de edición de una orden (pedido o venta).

Compone un LineSet, un StockValidator y el CatalogCache del almacén activo.
Las variantes (PedidoEditor, VentaEditor) solo cambian:
- `campo_precio`: nombre del precio en el payload (precio_estimado / precio_unitario)
- `campo_fecha` y `reglas`: conjunto de reglas de la fachada de validación
- `stock_obligatorio`: si la falta de stock bloquea (venta) o solo advierte (pedido)

Flujo: mutaciones locales → `validar()` → `enviar(guardar)`. Un envío fallido
(errores de validación o de transporte) deja las líneas sin cambios.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from django.core.exceptions import ValidationError

from apps.orders import validators
from apps.orders.calculations import parse_cantidad, redondear
from apps.orders.exceptions import InvalidQuantity
from apps.orders.lines import CAMPO_CANTIDAD, CAMPO_PRECIO, LineaOrden, LineSet
from apps.orders.stock import ResultadoStock, StockValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultadoEnvio:
    ok: bool
    registro: Optional[Dict[str, Any]] = None
    errores: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CambioAlmacen:
    """Resultado de `solicitar_cambio_almacen` (contrato de UI)."""
    aplicado: bool
    requiere_confirmacion: bool = False
    lineas_descartadas: int = 0


class EditorOrden:
    campo_precio: str = CAMPO_PRECIO
    campo_fecha: str = "fecha"
    reglas = validators.REGLAS_VENTA
    stock_obligatorio: bool = True

    def __init__(
        self,
        catalogo,
        *,
        almacen_id=None,
        cliente_id=None,
        fecha=None,
        notas: str = "",
        lineas: Optional[LineSet] = None,
    ):
        self.catalogo = catalogo
        self.stock = StockValidator(catalogo)
        self.lineas = lineas if lineas is not None else LineSet()
        self.almacen_id = almacen_id
        self.cliente_id = cliente_id
        self.fecha = fecha
        self.notas = notas or ""
        self.advertencias: List[str] = []

    # ----------------------------
    # Hooks de las variantes
    # ----------------------------
    def verificar_editable(self) -> None:
        """Lanza si la orden no admite cambios. La base siempre es editable."""

    def datos_extra(self) -> Dict[str, Any]:
        return {}

    # ----------------------------
    # Líneas
    # ----------------------------
    def agregar_linea(self, presentacion_id, cantidad, precio_unitario=None) -> LineaOrden:
        """
        Agrega (o suma a) la línea de la presentación.
        Sin precio explícito se toma el precio de venta del catálogo del almacén.
        """
        self.verificar_editable()
        try:
            cantidad_n = parse_cantidad(cantidad)
        except ValidationError:
            raise InvalidQuantity(cantidad)
        if cantidad_n <= 0:
            raise InvalidQuantity(cantidad)

        if precio_unitario is None:
            precio_unitario = self._precio_catalogo(presentacion_id)

        self._chequear_stock(presentacion_id, self.lineas.cantidad_de(presentacion_id) + cantidad_n)
        return self.lineas.agregar(presentacion_id, cantidad_n, precio_unitario)

    def actualizar_linea(self, indice: int, campo: str, valor: Any, *, estricto: bool = False) -> Optional[LineaOrden]:
        self.verificar_editable()
        if campo == CAMPO_CANTIDAD and 0 <= indice < len(self.lineas):
            cantidad = parse_cantidad(valor)
            if cantidad >= 1 or not estricto:
                self._chequear_stock(self.lineas[indice].presentacion_id, max(cantidad, 1))
        return self.lineas.actualizar(indice, campo, valor, estricto=estricto)

    def quitar_linea(self, indice: int, *, estricto: bool = False) -> Optional[LineaOrden]:
        self.verificar_editable()
        return self.lineas.quitar(indice, estricto=estricto)

    # ----------------------------
    # Almacén
    # ----------------------------
    def cambiar_almacen(self, nuevo_almacen_id) -> list:
        """
        Cambia el almacén activo. Siempre vacía las líneas (stock y precios no
        son portables entre almacenes) e invalida/recarga el catálogo nuevo.
        Devuelve las presentaciones del nuevo almacén.
        """
        self.verificar_editable()
        anterior = self.almacen_id
        descartadas = len(self.lineas)
        self.lineas.limpiar()
        self.advertencias = []
        self.almacen_id = nuevo_almacen_id
        self.catalogo.invalidate(nuevo_almacen_id)
        logger.info("Cambio de almacén %s → %s (%s líneas descartadas)",
                    anterior, nuevo_almacen_id, descartadas)
        return self.catalogo.get(nuevo_almacen_id)

    def solicitar_cambio_almacen(self, nuevo_almacen_id, *, confirmar: bool = False) -> CambioAlmacen:
        """
        Variante de UI de `cambiar_almacen`: si hay líneas cargadas y el
        usuario no confirmó, no cambia nada y pide confirmación.
        """
        self.verificar_editable()
        if nuevo_almacen_id == self.almacen_id:
            return CambioAlmacen(aplicado=False)
        lineas = len(self.lineas)
        if lineas and not confirmar:
            return CambioAlmacen(aplicado=False, requiere_confirmacion=True, lineas_descartadas=lineas)
        self.cambiar_almacen(nuevo_almacen_id)
        return CambioAlmacen(aplicado=True, lineas_descartadas=lineas)

    # ----------------------------
    # Totales / validación / envío
    # ----------------------------
    def total(self) -> Decimal:
        return self.lineas.total()

    def total_redondeado(self) -> Decimal:
        return redondear(self.lineas.total())

    def datos(self) -> Dict[str, Any]:
        datos = {
            "cliente_id": self.cliente_id,
            "almacen_id": self.almacen_id,
            self.campo_fecha: self.fecha,
            "notas": self.notas,
            "detalles": self.lineas.a_payload(campo_precio=self.campo_precio),
        }
        datos.update(self.datos_extra())
        return datos

    def validar(self) -> Dict[str, str]:
        """Errores de la fachada ({campo: mensaje}); vacío si es válido."""
        datos = self.datos()
        errores = validators.validar(self.reglas, datos)
        for idx, detalle in enumerate(datos["detalles"]):
            linea = dict(detalle, precio_unitario=detalle.get(self.campo_precio))
            for campo, mensaje in validators.validar(validators.REGLAS_LINEA, linea).items():
                errores[f"detalles.{idx}.{campo}"] = mensaje
        return errores

    def payload(self) -> Dict[str, Any]:
        return self.datos()

    def enviar(self, guardar: Callable[[Dict[str, Any]], Dict[str, Any]]) -> ResultadoEnvio:
        """
        Valida y entrega el payload a `guardar` (create/update del colaborador).
        - Errores de validación → ResultadoEnvio(ok=False, errores=...).
        - Errores de transporte → se propagan; las líneas quedan intactas.
        """
        self.verificar_editable()
        errores = self.validar()
        if errores:
            return ResultadoEnvio(ok=False, errores=errores)

        respaldo = self.lineas.copia()
        try:
            registro = guardar(self.payload())
        except Exception:
            self.lineas.reemplazar(respaldo)
            raise
        return ResultadoEnvio(ok=True, registro=registro)

    # ----------------------------
    # Helpers
    # ----------------------------
    def _chequear_stock(self, presentacion_id, cantidad: int) -> Optional[ResultadoStock]:
        if self.almacen_id in (None, ""):
            raise ValidationError("El almacén es requerido")
        if self.stock_obligatorio:
            return self.stock.exigir(presentacion_id, cantidad, self.almacen_id)
        resultado = self.stock.validar(presentacion_id, cantidad, self.almacen_id)
        if not resultado.ok:
            self.advertencias.append(resultado.mensaje)
        return resultado

    def _precio_catalogo(self, presentacion_id):
        if self.almacen_id in (None, ""):
            raise ValidationError("El almacén es requerido")
        presentacion = self.catalogo.buscar(self.almacen_id, presentacion_id)
        if presentacion is None or presentacion.precio_venta is None:
            return Decimal("0")
        return presentacion.precio_venta
