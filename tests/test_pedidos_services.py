import datetime
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.orders.exceptions import InvalidTransition, OrderClosed
from apps.pedidos.models import Pedido
from apps.pedidos.selectors import pedidos_por_entregar
from apps.pedidos.services import (
    actualizar_pedido,
    cambiar_estado,
    cancelar_pedido,
    confirmar_pedido,
    crear_pedido,
    eliminar_pedido,
    marcar_entregado,
)

pytestmark = pytest.mark.django_db

ENTREGA = datetime.date(2026, 10, 25)


@pytest.fixture
def pedido(cliente, almacen, bolsa, briqueta):
    return crear_pedido(
        cliente_id=cliente.pk,
        almacen_id=almacen.pk,
        fecha_entrega=ENTREGA,
        detalles=[
            {"presentacion_id": bolsa.pk, "cantidad": 3, "precio_estimado": "15.50"},
            {"presentacion_id": briqueta.pk, "cantidad": 1, "precio_estimado": "8"},
        ],
        notas=" llamar antes ",
    )


def test_crear_pedido(pedido):
    assert pedido.estado == "programado"
    assert pedido.notas == "llamar antes"
    assert pedido.total_estimado == Decimal("54.50")


def test_crear_pedido_incompleto(cliente, almacen):
    with pytest.raises(ValidationError) as exc:
        crear_pedido(cliente_id=cliente.pk, almacen_id=almacen.pk, fecha_entrega=None, detalles=[])
    assert set(exc.value.message_dict) == {"fecha_entrega", "detalles"}
    assert Pedido.objects.count() == 0


def test_actualizar_reemplaza_lineas(pedido, bolsa):
    actualizar_pedido(pedido_id=pedido.pk, detalles=[
        {"presentacion_id": bolsa.pk, "cantidad": 2, "precio_estimado": "16"},
    ])
    assert pedido.total_estimado == Decimal("32.00")


def test_cambiar_almacen_sin_lineas(pedido, otro_almacen):
    with pytest.raises(ValidationError) as exc:
        actualizar_pedido(pedido_id=pedido.pk, almacen_id=otro_almacen.pk)
    assert "detalles" in exc.value.message_dict


def test_cambiar_almacen_con_lineas(pedido, otro_almacen, bolsa):
    actualizar_pedido(
        pedido_id=pedido.pk,
        almacen_id=otro_almacen.pk,
        detalles=[{"presentacion_id": bolsa.pk, "cantidad": 1, "precio_estimado": "14"}],
    )
    pedido.refresh_from_db()
    assert pedido.almacen_id == otro_almacen.pk
    assert pedido.detalles.count() == 1


def test_ciclo_de_vida(pedido):
    confirmar_pedido(pedido_id=pedido.pk)
    with pytest.raises(InvalidTransition):
        cambiar_estado(pedido_id=pedido.pk, nuevo_estado="programado")
    with pytest.raises(InvalidTransition):
        cambiar_estado(pedido_id=pedido.pk, nuevo_estado="entregado")

    marcar_entregado(pedido_id=pedido.pk)
    pedido.refresh_from_db()
    assert pedido.estado == "entregado"


@pytest.mark.parametrize("cerrar", [cancelar_pedido, marcar_entregado])
def test_pedido_cerrado_no_se_modifica(pedido, cerrar):
    cerrar(pedido_id=pedido.pk)

    with pytest.raises(OrderClosed):
        actualizar_pedido(pedido_id=pedido.pk, notas="otra cosa")
    with pytest.raises(OrderClosed):
        confirmar_pedido(pedido_id=pedido.pk)
    pedido.refresh_from_db()
    assert pedido.notas == "llamar antes"


def test_eliminar(pedido):
    eliminar_pedido(pedido_id=pedido.pk)
    assert Pedido.objects.count() == 0


def test_no_se_elimina_un_pedido_entregado(pedido):
    marcar_entregado(pedido_id=pedido.pk)
    with pytest.raises(OrderClosed):
        eliminar_pedido(pedido_id=pedido.pk)


def test_pedidos_por_entregar(pedido, cliente, almacen, bolsa):
    cancelado = crear_pedido(
        cliente_id=cliente.pk, almacen_id=almacen.pk, fecha_entrega=ENTREGA,
        detalles=[{"presentacion_id": bolsa.pk, "cantidad": 1, "precio_estimado": "1"}],
    )
    cancelar_pedido(pedido_id=cancelado.pk)

    assert list(pedidos_por_entregar(almacen_id=almacen.pk)) == [pedido]
