from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.orders.exceptions import IndexOutOfRange, InvalidQuantity
from apps.orders.lines import LineaOrden, LineSet


@pytest.fixture
def lineas():
    conjunto = LineSet()
    conjunto.agregar(7, 3, "15.50")
    conjunto.agregar(9, 1, "8.00")
    return conjunto


def test_total_de_ejemplo(lineas):
    assert lineas.total() == Decimal("54.50")
    assert lineas.total_redondeado() == Decimal("54.50")
    assert lineas.cantidad_total() == 4


def test_agregar_misma_presentacion_suma_cantidad(lineas):
    lineas.agregar(7, 2, "16.00")

    assert len(lineas) == 2
    assert lineas[0].cantidad == 5
    assert lineas[0].precio_unitario == Decimal("16.00")
    assert lineas.indice_de(7) == 0
    assert lineas.cantidad_de(7) == 5
    assert lineas.cantidad_de(99) == 0


@pytest.mark.parametrize("cantidad", [0, -1, "abc", "2.5", None])
def test_agregar_cantidad_invalida_no_modifica(lineas, cantidad):
    with pytest.raises(InvalidQuantity):
        lineas.agregar(11, cantidad, "1.00")
    assert len(lineas) == 2
    assert lineas.total() == Decimal("54.50")


def test_agregar_precio_negativo_no_modifica(lineas):
    with pytest.raises(ValidationError):
        lineas.agregar(11, 1, "-1")
    assert len(lineas) == 2


def test_actualizar_cantidad_cero_se_ajusta_a_uno(lineas):
    linea = lineas.actualizar(0, "cantidad", 0)
    assert linea.cantidad == 1
    assert lineas.total() == Decimal("23.50")


def test_actualizar_cantidad_cero_estricto(lineas):
    with pytest.raises(ValidationError):
        lineas.actualizar(0, "cantidad", 0, estricto=True)
    assert lineas[0].cantidad == 3


def test_actualizar_texto_no_numerico_no_modifica(lineas):
    with pytest.raises(ValidationError):
        lineas.actualizar(1, "precio_unitario", "ocho")
    with pytest.raises(ValidationError):
        lineas.actualizar(1, "cantidad", "dos")
    assert lineas[1] == LineaOrden(presentacion_id=9, cantidad=1, precio_unitario=Decimal("8.00"))


def test_actualizar_precio_con_coma(lineas):
    lineas.actualizar(1, "precio_unitario", "9,25")
    assert lineas.subtotal(1) == Decimal("9.25")


def test_actualizar_campo_no_editable(lineas):
    with pytest.raises(ValidationError):
        lineas.actualizar(0, "presentacion_id", 3)


def test_indice_fuera_de_rango(lineas):
    assert lineas.actualizar(5, "cantidad", 2) is None
    assert lineas.quitar(5) is None
    with pytest.raises(IndexOutOfRange):
        lineas.quitar(5, estricto=True)
    with pytest.raises(IndexOutOfRange):
        lineas.actualizar(-1, "cantidad", 2, estricto=True)
    assert len(lineas) == 2


def test_quitar(lineas):
    quitada = lineas.quitar(0)
    assert quitada.presentacion_id == 7
    assert [l.presentacion_id for l in lineas] == [9]
    assert lineas.total() == Decimal("8.00")


def test_copia_es_independiente(lineas):
    respaldo = lineas.copia()
    lineas.limpiar()
    assert len(lineas) == 0
    assert len(respaldo) == 2

    lineas.reemplazar(respaldo)
    assert lineas.total() == Decimal("54.50")


def test_desde_detalles_y_payload():
    detalles = [
        {"id": 1, "presentacion_id": 7, "cantidad": 3, "precio_estimado": "15.50"},
        {"id": 2, "presentacion_id": 9, "cantidad": "1", "precio_estimado": "8"},
    ]
    conjunto = LineSet.desde_detalles(detalles, campo_precio="precio_estimado")

    assert conjunto.total() == Decimal("54.50")
    assert conjunto.a_payload() == [
        {"presentacion_id": 7, "cantidad": 3, "precio_unitario": "15.50", "id": 1},
        {"presentacion_id": 9, "cantidad": 1, "precio_unitario": "8", "id": 2},
    ]


def test_cargar_reemplaza_contenido(lineas):
    lineas.cargar([{"presentacion_id": 3, "cantidad": 2, "precio_unitario": "1.25"}])
    assert len(lineas) == 1
    assert lineas.total() == Decimal("2.50")


def _total_esperado(modelo):
    return sum((cantidad * precio for _, cantidad, precio in modelo), Decimal("0"))


def _aplicar(lineas, modelo, operacion):
    tipo, *args = operacion
    if tipo == "agregar":
        presentacion_id, cantidad, precio = args
        lineas.agregar(presentacion_id, cantidad, precio)
        for item in modelo:
            if item[0] == presentacion_id:
                item[1] += cantidad
                item[2] = Decimal(precio)
                break
        else:
            modelo.append([presentacion_id, cantidad, Decimal(precio)])
    elif tipo == "cantidad":
        indice, cantidad = args
        lineas.actualizar(indice, "cantidad", cantidad)
        modelo[indice][1] = max(cantidad, 1)
    elif tipo == "precio":
        indice, precio = args
        lineas.actualizar(indice, "precio_unitario", precio)
        modelo[indice][2] = Decimal(precio)
    else:
        (indice,) = args
        lineas.quitar(indice)
        modelo.pop(indice)


@pytest.mark.parametrize("operaciones", [
    [
        ("agregar", 7, 3, "15.50"),
        ("agregar", 9, 1, "8.00"),
        ("agregar", 11, 7, "0.10"),
        ("agregar", 7, 2, "15.49"),
        ("precio", 2, "0.20"),
        ("cantidad", 1, 0),
        ("quitar", 0),
        ("agregar", 12, 3, "33.333"),
        ("cantidad", 0, 9),
    ],
    [
        ("agregar", 1, 10, "0.10"),
        ("agregar", 2, 10, "0.20"),
        ("agregar", 3, 10, "0.30"),
        ("quitar", 1),
        ("agregar", 1, 5, "0.10"),
        ("precio", 0, "19.99"),
        ("cantidad", 1, 1),
        ("agregar", 2, 1, "0.01"),
        ("quitar", 2),
        ("quitar", 0),
    ],
    [("agregar", pid, pid, f"{pid}.07") for pid in range(1, 21)]
    + [("precio", i, "0.33") for i in range(0, 20, 3)]
    + [("quitar", 0) for _ in range(10)],
])
def test_total_sin_desvios_tras_muchas_operaciones(operaciones):
    lineas = LineSet()
    modelo = []
    for operacion in operaciones:
        _aplicar(lineas, modelo, operacion)
        assert lineas.total() == _total_esperado(modelo)
        assert len(lineas) == len(modelo)
