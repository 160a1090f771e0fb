# apps/orders/lines.py
"""
Conjunto de líneas de una orden (pedido o venta), independiente de la UI.

Reglas:
- Una sola línea por presentación: agregar una presentación existente suma
  la cantidad (merge-add) en lugar de duplicar la línea.
- cantidad: entero > 0. precio_unitario: Decimal >= 0.
- El total se calcula siempre desde las líneas (no hay total cacheado).
- Una operación rechazada no modifica el conjunto.

Modo estricto vs. UI:
- `actualizar(..., estricto=False)` clampa cantidad 0 a 1 (comportamiento del
  formulario); con `estricto=True` la rechaza.
- `quitar(..., estricto=False)` ignora índices fuera de rango; con
  `estricto=True` lanza IndexOutOfRange.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Iterable, Iterator, List, Optional

from django.core.exceptions import ValidationError

from apps.orders.calculations import (
    calcular_cantidad_total,
    calcular_total,
    parse_cantidad,
    parse_decimal,
    redondear,
    subtotal as _subtotal,
)
from apps.orders.exceptions import IndexOutOfRange, InvalidQuantity

logger = logging.getLogger(__name__)

CAMPO_CANTIDAD = "cantidad"
CAMPO_PRECIO = "precio_unitario"
CAMPOS_EDITABLES = (CAMPO_CANTIDAD, CAMPO_PRECIO)


@dataclass(frozen=True)
class LineaOrden:
    """Línea inmutable; las mutaciones reemplazan la instancia en el conjunto."""
    presentacion_id: int
    cantidad: int
    precio_unitario: Decimal
    id: Optional[int] = None

    @property
    def subtotal(self) -> Decimal:
        return _subtotal(self.cantidad, self.precio_unitario)


class LineSet:
    """
    Colección ordenada de LineaOrden con semántica de merge por presentación.
    """

    def __init__(self, lineas: Optional[Iterable[LineaOrden]] = None):
        self._lineas: List[LineaOrden] = []
        for linea in lineas or []:
            self.agregar(linea.presentacion_id, linea.cantidad,
                         linea.precio_unitario, id=linea.id)

    # ----------------------------
    # Lectura
    # ----------------------------
    def __len__(self) -> int:
        return len(self._lineas)

    def __iter__(self) -> Iterator[LineaOrden]:
        return iter(list(self._lineas))

    def __getitem__(self, indice: int) -> LineaOrden:
        return self._lineas[indice]

    @property
    def lineas(self) -> List[LineaOrden]:
        return list(self._lineas)

    def indice_de(self, presentacion_id) -> Optional[int]:
        """Posición de la línea de `presentacion_id` o None."""
        for idx, linea in enumerate(self._lineas):
            if linea.presentacion_id == presentacion_id:
                return idx
        return None

    def cantidad_de(self, presentacion_id) -> int:
        """Cantidad ya cargada para la presentación (0 si no está)."""
        idx = self.indice_de(presentacion_id)
        return self._lineas[idx].cantidad if idx is not None else 0

    def total(self) -> Decimal:
        """Σ(cantidad × precio_unitario) con precisión completa."""
        return calcular_total(self._lineas)

    def total_redondeado(self) -> Decimal:
        """Total a 2 decimales, para mostrar."""
        return redondear(self.total())

    def cantidad_total(self) -> int:
        return calcular_cantidad_total(self._lineas)

    def subtotal(self, indice: int) -> Decimal:
        return self._lineas[indice].subtotal

    # ----------------------------
    # Mutaciones
    # ----------------------------
    def agregar(self, presentacion_id, cantidad, precio_unitario, *, id=None) -> LineaOrden:
        """
        Agrega una línea o, si la presentación ya existe, suma la cantidad.
        El precio unitario queda con el último valor informado.
        """
        try:
            cantidad_n = parse_cantidad(cantidad)
        except ValidationError:
            raise InvalidQuantity(cantidad)
        if cantidad_n <= 0:
            raise InvalidQuantity(cantidad)
        precio = parse_decimal(precio_unitario)

        idx = self.indice_de(presentacion_id)
        if idx is not None:
            existente = self._lineas[idx]
            nueva = replace(
                existente,
                cantidad=existente.cantidad + cantidad_n,
                precio_unitario=precio,
            )
            self._lineas[idx] = nueva
            logger.debug("Línea %s: merge %s + %s",
                         presentacion_id, existente.cantidad, cantidad_n)
            return nueva

        nueva = LineaOrden(
            presentacion_id=presentacion_id,
            cantidad=cantidad_n,
            precio_unitario=precio,
            id=id,
        )
        self._lineas.append(nueva)
        return nueva

    def actualizar(self, indice: int, campo: str, valor: Any, *, estricto: bool = False) -> Optional[LineaOrden]:
        """
        Cambia `cantidad` o `precio_unitario` de la línea en `indice`.

        - Texto no numérico o negativo → ValidationError (sin mutar).
        - cantidad 0 → 1 (UI) / ValidationError (estricto).
        - Índice fuera de rango → None (UI) / IndexOutOfRange (estricto).
        """
        if campo not in CAMPOS_EDITABLES:
            raise ValidationError(f"Campo no editable: {campo}")
        if not self._en_rango(indice):
            if estricto:
                raise IndexOutOfRange(indice, len(self._lineas))
            return None

        actual = self._lineas[indice]
        if campo == CAMPO_CANTIDAD:
            cantidad = parse_cantidad(valor)
            if cantidad < 1:
                if estricto:
                    raise ValidationError(
                        "La cantidad debe ser un entero mayor o igual a 1.")
                cantidad = 1
            nueva = replace(actual, cantidad=cantidad)
        else:
            nueva = replace(actual, precio_unitario=parse_decimal(valor))

        self._lineas[indice] = nueva
        return nueva

    def quitar(self, indice: int, *, estricto: bool = False) -> Optional[LineaOrden]:
        """Quita la línea por posición."""
        if not self._en_rango(indice):
            if estricto:
                raise IndexOutOfRange(indice, len(self._lineas))
            return None
        return self._lineas.pop(indice)

    def limpiar(self) -> None:
        """Vacía el conjunto (p. ej. al cambiar de almacén)."""
        self._lineas.clear()

    def reemplazar(self, otro: "LineSet") -> None:
        """Copia las líneas de `otro` (restauración tras un submit fallido)."""
        self._lineas = list(otro._lineas)

    def copia(self) -> "LineSet":
        nuevo = LineSet()
        nuevo._lineas = list(self._lineas)
        return nuevo

    # ----------------------------
    # Borde con colaboradores
    # ----------------------------
    @classmethod
    def desde_detalles(cls, detalles: Iterable[Any], *, campo_precio: str = CAMPO_PRECIO) -> "LineSet":
        """
        Reconstruye el conjunto desde detalles persistidos (dicts u objetos),
        leyendo el precio de `campo_precio` (p. ej. "precio_estimado").
        """
        conjunto = cls()
        for det in detalles or []:
            if isinstance(det, dict):
                get = det.get
            else:
                def get(key, default=None, _o=det):
                    return getattr(_o, key, default)
            conjunto.agregar(
                get("presentacion_id"),
                get("cantidad"),
                get(campo_precio) or "0",
                id=get("id"),
            )
        return conjunto

    def cargar(self, detalles: Iterable[Any], *, campo_precio: str = CAMPO_PRECIO) -> None:
        """Reemplaza el contenido con los detalles persistidos (edición de una orden existente)."""
        self.reemplazar(self.desde_detalles(detalles, campo_precio=campo_precio))

    def a_payload(self, *, campo_precio: str = CAMPO_PRECIO) -> List[dict]:
        """Serializa las líneas con montos como strings decimales."""
        payload = []
        for linea in self._lineas:
            item = {
                "presentacion_id": linea.presentacion_id,
                "cantidad": linea.cantidad,
                campo_precio: str(linea.precio_unitario),
            }
            if linea.id is not None:
                item["id"] = linea.id
            payload.append(item)
        return payload

    def _en_rango(self, indice) -> bool:
        return isinstance(indice, int) and 0 <= indice < len(self._lineas)
