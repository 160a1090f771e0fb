# apps/orders/validators.py
"""
Reglas de validación de campos (fachada de validación).

Cada regla es una función pura `(valor) -> mensaje | None`: no accede a BD ni
a red. Los conjuntos REGLAS_* mapean campo → lista de reglas y se aplican con
`validar()`, que nunca lanza: devuelve {campo: primer_error}.

Los forms de cada app (`apps/*/forms`) reutilizan estas reglas a través de
`como_validador()` para exponerlas como validadores de Django.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from django.core.exceptions import ValidationError

from apps.orders.calculations import parse_cantidad, parse_decimal

Regla = Callable[[Any], Optional[str]]
ReglaCruzada = Callable[[Mapping[str, Any]], Optional[Dict[str, str]]]


# -----------------------------
# Reglas por campo
# -----------------------------

def requerido(mensaje: str) -> Regla:
    """Falla si el valor está vacío (None, '', solo espacios)."""
    def _regla(valor):
        if valor is None:
            return mensaje
        if isinstance(valor, str) and not valor.strip():
            return mensaje
        return None
    return _regla


def entero_positivo(valor) -> Optional[str]:
    if valor in (None, ""):
        return None
    try:
        cantidad = parse_cantidad(valor)
    except ValidationError as e:
        return e.messages[0]
    if cantidad < 1:
        return "La cantidad debe ser mayor a 0."
    return None


def decimal_no_negativo(valor) -> Optional[str]:
    if valor in (None, ""):
        return None
    try:
        parse_decimal(valor, campo="monto")
    except ValidationError as e:
        return e.messages[0]
    return None


def decimal_positivo(valor) -> Optional[str]:
    if valor in (None, ""):
        return None
    try:
        monto = parse_decimal(valor, campo="monto")
    except ValidationError as e:
        return e.messages[0]
    if monto <= 0:
        return "Ingrese un monto válido."
    return None


def al_menos_una_linea(valor) -> Optional[str]:
    if not valor:
        return "Debe agregar al menos un producto"
    return None


def opcion_valida(opciones: Sequence[str], mensaje: str) -> Regla:
    def _regla(valor):
        if valor in (None, ""):
            return None
        return None if str(valor) in opciones else mensaje
    return _regla


# -----------------------------
# Reglas cruzadas
# -----------------------------

def peso_seco_no_supera_humedo(datos: Mapping[str, Any]) -> Optional[Dict[str, str]]:
    """peso_seco_kg <= peso_humedo_kg cuando ambos están presentes."""
    seco = datos.get("peso_seco_kg")
    humedo = datos.get("peso_humedo_kg")
    if seco in (None, "") or humedo in (None, ""):
        return None
    try:
        if parse_decimal(seco, campo="peso seco") > parse_decimal(humedo, campo="peso húmedo"):
            return {"peso_seco_kg": "El peso seco no puede superar al peso húmedo."}
    except ValidationError:
        # el error de formato lo reporta la regla del campo
        return None
    return None


def referencia_para_transferencia(datos: Mapping[str, Any]) -> Optional[Dict[str, str]]:
    if datos.get("metodo_pago") == "transferencia":
        if not (datos.get("referencia") or "").strip():
            return {"referencia": "La referencia es requerida para transferencias"}
    return None


# -----------------------------
# Conjuntos de reglas
# -----------------------------

REGLAS_PEDIDO: Dict[str, List[Regla]] = {
    "cliente_id": [requerido("El cliente es requerido")],
    "almacen_id": [requerido("El almacén es requerido")],
    "fecha_entrega": [requerido("La fecha de entrega es requerida")],
    "detalles": [al_menos_una_linea],
}

REGLAS_VENTA: Dict[str, List[Regla]] = {
    "cliente_id": [requerido("El cliente es requerido")],
    "almacen_id": [requerido("El almacén es requerido")],
    "fecha": [requerido("La fecha es requerida")],
    "detalles": [al_menos_una_linea],
}

REGLAS_LINEA: Dict[str, List[Regla]] = {
    "presentacion_id": [requerido("La presentación es requerida")],
    "cantidad": [requerido("La cantidad es requerida"), entero_positivo],
    "precio_unitario": [requerido("El precio es requerido"), decimal_no_negativo],
}

METODOS_PAGO = ("efectivo", "transferencia", "deposito", "tarjeta", "yape_plin", "otro")

REGLAS_PAGO: Dict[str, List[Regla]] = {
    "venta_id": [requerido("La venta es requerida")],
    "monto": [requerido("El monto es requerido"), decimal_positivo],
    "fecha": [requerido("La fecha es requerida")],
    "metodo_pago": [
        requerido("El método de pago es requerido"),
        opcion_valida(METODOS_PAGO, "Método de pago inválido"),
    ],
}

REGLAS_LOTE: Dict[str, List[Regla]] = {
    "producto_id": [requerido("El producto es requerido")],
    "peso_humedo_kg": [requerido("El peso húmedo es requerido"), decimal_no_negativo],
    "peso_seco_kg": [decimal_no_negativo],
    "fecha_ingreso": [requerido("La fecha de ingreso es requerida")],
}

CRUZADAS_LOTE: List[ReglaCruzada] = [peso_seco_no_supera_humedo]
CRUZADAS_PAGO: List[ReglaCruzada] = [referencia_para_transferencia]


def validar(
    reglas: Mapping[str, Iterable[Regla]],
    datos: Mapping[str, Any],
    cruzadas: Iterable[ReglaCruzada] = (),
) -> Dict[str, str]:
    """
    Aplica `reglas` sobre `datos` y devuelve {campo: primer error}.
    Las reglas cruzadas solo corren si el campo afectado no tiene ya error.
    """
    errores: Dict[str, str] = {}
    for campo, reglas_campo in reglas.items():
        valor = datos.get(campo)
        for regla in reglas_campo:
            mensaje = regla(valor)
            if mensaje:
                errores[campo] = mensaje
                break

    for regla in cruzadas:
        for campo, mensaje in (regla(datos) or {}).items():
            errores.setdefault(campo, mensaje)
    return errores


def como_validador(regla: Regla) -> Callable[[Any], None]:
    """Adapta una regla pura al protocolo de validadores de Django."""
    def _validador(valor):
        mensaje = regla(valor)
        if mensaje:
            raise ValidationError(mensaje)
    return _validador
