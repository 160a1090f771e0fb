import pytest

from apps.orders.exceptions import InsufficientStock
from apps.orders.stock import StockValidator


@pytest.fixture
def validador(cache):
    return StockValidator(cache)


def test_cantidad_dentro_del_stock(validador):
    resultado = validador.validar(7, 5, 1)
    assert resultado.ok
    assert resultado.mensaje == ""


def test_cantidad_mayor_al_stock(validador):
    resultado = validador.validar(9, 4, 1)
    assert not resultado.ok
    assert resultado.disponible == 3
    assert resultado.mensaje == "Stock insuficiente: disponible 3"


def test_presentacion_ausente_cuenta_como_cero(validador):
    resultado = validador.validar(9, 1, 2)
    assert not resultado.ok
    assert resultado.disponible == 0


def test_exigir_lanza_con_el_disponible(validador):
    with pytest.raises(InsufficientStock) as exc:
        validador.exigir(9, 4, 1)
    assert exc.value.disponible == 3
    assert exc.value.solicitado == 4
    assert str(exc.value) == "Stock insuficiente: disponible 3"


def test_stock_es_por_almacen(validador):
    assert not validador.validar(7, 50, 1).ok
    assert validador.validar(7, 50, 2).ok
