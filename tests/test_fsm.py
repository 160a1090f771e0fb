import pytest

from apps.orders.exceptions import InvalidTransition, OrderClosed
from apps.pedidos import fsm
from apps.pedidos.fsm import PedidoEstado


@pytest.mark.parametrize("desde, hacia", [
    ("programado", "confirmado"),
    ("programado", "cancelado"),
    ("confirmado", "cancelado"),
])
def test_transiciones_explicitas(desde, hacia):
    assert fsm.puede_transicionar(desde, hacia)
    assert fsm.exigir_transicion(desde, hacia) == PedidoEstado(hacia)


@pytest.mark.parametrize("desde", ["programado", "confirmado"])
def test_entregado_solo_por_conversion(desde):
    assert not fsm.puede_transicionar(desde, "entregado")
    assert fsm.puede_transicionar(desde, "entregado", via_conversion=True)
    with pytest.raises(InvalidTransition):
        fsm.exigir_transicion(desde, PedidoEstado.ENTREGADO)


def test_no_se_vuelve_atras():
    with pytest.raises(InvalidTransition) as exc:
        fsm.exigir_transicion("confirmado", "programado")
    assert str(exc.value) == "No se puede pasar de confirmado a programado"


@pytest.mark.parametrize("final", ["entregado", "cancelado"])
def test_estados_finales(final):
    assert fsm.es_final(final)
    assert not fsm.es_convertible(final)
    with pytest.raises(OrderClosed):
        fsm.exigir_editable(final)
    with pytest.raises(OrderClosed):
        fsm.exigir_transicion(final, "confirmado", via_conversion=True)


def test_estado_desconocido():
    assert not fsm.puede_transicionar("borrador", "confirmado")
    assert not fsm.es_final("borrador")
    assert not fsm.es_convertible("borrador")
