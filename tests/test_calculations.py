from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.orders.calculations import (
    calcular_cantidad_total,
    calcular_total,
    formatear_precio,
    parse_cantidad,
    parse_decimal,
    redondear,
)


@pytest.mark.parametrize("valor, esperado", [
    ("15.50", Decimal("15.50")),
    ("15,50", Decimal("15.50")),
    (" 8 ", Decimal("8")),
    (".5", Decimal("0.5")),
    (3, Decimal("3")),
    (2.1, Decimal("2.1")),
])
def test_parse_decimal_acepta_coma_y_punto(valor, esperado):
    assert parse_decimal(valor) == esperado


@pytest.mark.parametrize("valor", ["", "abc", "1.2.3", "1,2.3", "-1", None, "1e5"])
def test_parse_decimal_rechaza(valor):
    with pytest.raises(ValidationError):
        parse_decimal(valor)


def test_parse_decimal_menciona_el_campo():
    with pytest.raises(ValidationError) as exc:
        parse_decimal("-5", campo="monto")
    assert "monto" in exc.value.messages[0]


@pytest.mark.parametrize("valor", ["2.5", "abc", "-1", "", True])
def test_parse_cantidad_solo_enteros_no_negativos(valor):
    with pytest.raises(ValidationError):
        parse_cantidad(valor)


def test_parse_cantidad():
    assert parse_cantidad("12") == 12
    assert parse_cantidad(Decimal("3")) == 3
    assert parse_cantidad(0) == 0


def test_redondeo_half_up_solo_para_mostrar():
    assert redondear("0.125") == Decimal("0.13")
    assert redondear("2.675") == Decimal("2.68")
    assert formatear_precio("54.5") == "54.50"


def test_total_con_precision_completa():
    lineas = [
        {"cantidad": 3, "precio_unitario": "0.333"},
        {"cantidad": 1, "precio_unitario": "0.001"},
    ]
    assert calcular_total(lineas) == Decimal("1.000")
    assert calcular_cantidad_total(lineas) == 4
