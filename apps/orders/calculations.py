# apps/orders/calculations.py
"""
Funciones puras para parseo y cálculo de montos de pedidos/ventas.
No acceden a la base de datos, operan sobre valores numéricos.

Convenciones:
- Los montos viajan como strings decimales (p. ej. "15.50") en el borde con
  los colaboradores externos y se convierten a Decimal solo para calcular.
- Internamente se conserva la precisión completa; el redondeo a 2 decimales
  es solo de presentación (`redondear`, `formatear_precio`).
- Se acepta coma o punto como separador decimal (a lo sumo uno).
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from django.core.exceptions import ValidationError


Q = Decimal

# Dígitos con a lo sumo un separador decimal: "12", "12.5", "12,50", ".5", "3."
_RE_DECIMAL = re.compile(r"^(?:\d+[.,]?\d*|[.,]\d+)$")
_RE_ENTERO = re.compile(r"^\d+$")


def _D(x) -> Decimal:
    """Cast seguro a Decimal, tratando None/False/'' como 0."""
    try:
        return Q(x or 0)
    except Exception:
        return Q("0")


def redondear(v) -> Decimal:
    """Redondeo estándar a 2 decimales (solo presentación)."""
    return _D(v).quantize(Q("0.01"), rounding=ROUND_HALF_UP)


def formatear_precio(v) -> str:
    """'54.5' -> '54.50'."""
    return f"{redondear(v):.2f}"


def parse_decimal(valor: Any, *, campo: str = "precio") -> Decimal:
    """
    Convierte `valor` a Decimal no negativo.
    Lanza ValidationError si está vacío, mal formado o es negativo.
    """
    if isinstance(valor, bool) or valor is None:
        raise ValidationError(f"El {campo} es requerido.")

    if isinstance(valor, Decimal):
        numero = valor
    elif isinstance(valor, int):
        numero = Q(valor)
    elif isinstance(valor, float):
        # floats llegan desde formularios/JSON; se pasan por str para no arrastrar binario
        numero = Q(str(valor))
    else:
        texto = str(valor).strip()
        if texto.startswith("-"):
            raise ValidationError(f"El {campo} no puede ser negativo.")
        if not _RE_DECIMAL.match(texto):
            raise ValidationError(f"El {campo} '{texto}' no es un número válido.")
        try:
            numero = Q(texto.replace(",", "."))
        except InvalidOperation:
            raise ValidationError(f"El {campo} '{texto}' no es un número válido.")

    if not numero.is_finite():
        raise ValidationError(f"El {campo} no es un número válido.")
    if numero < 0:
        raise ValidationError(f"El {campo} no puede ser negativo.")
    return numero


def parse_cantidad(valor: Any) -> int:
    """
    Convierte `valor` a entero >= 0.
    Rechaza texto no numérico, decimales y negativos (ValidationError).
    """
    if isinstance(valor, bool) or valor is None:
        raise ValidationError("La cantidad es requerida.")

    if isinstance(valor, int):
        cantidad = valor
    elif isinstance(valor, (float, Decimal)):
        if valor != int(valor):
            raise ValidationError("La cantidad debe ser un número entero.")
        cantidad = int(valor)
    else:
        texto = str(valor).strip()
        if texto.startswith("-"):
            raise ValidationError("La cantidad no puede ser negativa.")
        if not _RE_ENTERO.match(texto):
            raise ValidationError(f"La cantidad '{texto}' no es un entero válido.")
        cantidad = int(texto)

    if cantidad < 0:
        raise ValidationError("La cantidad no puede ser negativa.")
    return cantidad


def subtotal(cantidad, precio_unitario) -> Decimal:
    """cantidad × precio_unitario, sin redondear."""
    return Q(cantidad) * _D(precio_unitario)


def calcular_total(lineas: Iterable[Any]) -> Decimal:
    """
    Σ(cantidad × precio_unitario) con precisión completa.

    Acepta objetos con `.cantidad` y `.precio_unitario` (LineaOrden, detalles ORM)
    o dicts con esas claves.
    """
    total = Q("0")
    for linea in lineas or []:
        if isinstance(linea, dict):
            cantidad = linea.get("cantidad", 0)
            precio = linea.get("precio_unitario", 0)
        else:
            cantidad = getattr(linea, "cantidad", 0)
            precio = getattr(linea, "precio_unitario", 0)
        total += subtotal(cantidad or 0, precio)
    return total


def calcular_cantidad_total(lineas: Iterable[Any]) -> int:
    """Suma de cantidades (unidades totales del pedido)."""
    return sum(
        int(linea.get("cantidad", 0) if isinstance(linea, dict)
            else getattr(linea, "cantidad", 0) or 0)
        for linea in (lineas or [])
    )
