from decimal import Decimal

import pytest
from django.db import DatabaseError

from apps.catalog.gateways import ORMCatalogService, ORMInventoryService
from apps.catalog.selectors import stock_de
from apps.catalog.services.cache import CatalogCache
from apps.orders.exceptions import (
    AlreadyConverted,
    InsufficientStock,
    InvalidTransition,
    SourceNotFound,
    TransportError,
)
from apps.pedidos.gateways import ORMOrderService
from apps.pedidos.services.conversion import convertir_pedido_a_venta
from apps.pedidos.services.editor import PedidoEditor
from apps.sales.gateways import ORMSaleService
from apps.sales.models import Venta
from apps.sales.services.editor import VentaEditor

pytestmark = pytest.mark.django_db


@pytest.fixture
def cache_orm():
    return CatalogCache(ORMCatalogService())


def test_pedido_editado_y_convertido(cliente, almacen, bolsa, briqueta, stock, cache_orm, hoy):
    pedidos = ORMOrderService()
    ventas = ORMSaleService()

    editor = PedidoEditor(cache_orm, almacen_id=almacen.pk, cliente_id=cliente.pk, fecha="2026-10-25")
    editor.agregar_linea(bolsa.pk, 3)
    editor.agregar_linea(briqueta.pk, 1)
    guardado = editor.guardar(pedidos)
    assert guardado.ok, guardado.errores
    assert guardado.registro["total_estimado"] == "54.50"

    resultado = convertir_pedido_a_venta(editor.pedido_id, pedidos=pedidos, ventas=ventas, hoy=hoy)

    assert not resultado.con_advertencias
    assert resultado.venta["total"] == "54.50"
    assert resultado.venta["tipo_pago"] == "credito"
    assert resultado.venta["estado_pago"] == "pendiente"
    assert pedidos.get(editor.pedido_id)["estado"] == "entregado"
    assert stock_de(bolsa.pk, almacen.pk) == 7
    assert stock_de(briqueta.pk, almacen.pk) == 3

    with pytest.raises(AlreadyConverted):
        convertir_pedido_a_venta(editor.pedido_id, pedidos=pedidos, ventas=ventas, hoy=hoy)
    assert Venta.objects.count() == 1


def test_conversion_sin_stock(cliente, almacen, bolsa, stock, hoy):
    pedidos = ORMOrderService()
    pedido = pedidos.create({
        "cliente_id": cliente.pk,
        "almacen_id": almacen.pk,
        "fecha_entrega": "2026-10-25",
        "detalles": [{"presentacion_id": bolsa.pk, "cantidad": 50, "precio_estimado": "15.50"}],
    })

    with pytest.raises(InsufficientStock):
        convertir_pedido_a_venta(pedido["id"], pedidos=pedidos, ventas=ORMSaleService(), hoy=hoy)

    assert Venta.objects.count() == 0
    assert pedidos.get(pedido["id"])["estado"] == "programado"


def test_venta_editor_con_gateway(cliente, almacen, bolsa, stock, cache_orm):
    ventas = ORMSaleService()
    editor = VentaEditor(cache_orm, almacen_id=almacen.pk, cliente_id=cliente.pk, fecha="2026-10-19")
    editor.agregar_linea(bolsa.pk, 10)

    resultado = editor.guardar(ventas)
    assert resultado.ok
    assert resultado.registro["saldo_pendiente"] == "155.00"

    # la venta existente puede reeditar sus propias unidades
    cache_orm.invalidate(almacen.pk)
    editor.actualizar_linea(0, "cantidad", 8)
    assert editor.guardar(ventas).ok
    assert stock_de(bolsa.pk, almacen.pk) == 2


def test_estado_se_enruta_por_la_fsm(cliente, almacen, bolsa):
    pedidos = ORMOrderService()
    pedido = pedidos.create({
        "cliente_id": cliente.pk,
        "almacen_id": almacen.pk,
        "fecha_entrega": "2026-10-25",
        "detalles": [{"presentacion_id": bolsa.pk, "cantidad": 1, "precio_estimado": "1"}],
    })
    assert pedidos.update(pedido["id"], {"estado": "confirmado"})["estado"] == "confirmado"
    assert pedidos.update(pedido["id"], {"notas": "x"})["notas"] == "x"


def test_update_con_transicion_invalida_no_guarda_nada(cliente, almacen, bolsa):
    pedidos = ORMOrderService()
    pedido = pedidos.create({
        "cliente_id": cliente.pk,
        "almacen_id": almacen.pk,
        "fecha_entrega": "2026-10-25",
        "notas": "original",
        "detalles": [{"presentacion_id": bolsa.pk, "cantidad": 1, "precio_estimado": "1"}],
    })
    pedidos.update(pedido["id"], {"estado": "confirmado"})

    with pytest.raises(InvalidTransition):
        pedidos.update(pedido["id"], {"notas": "cambiada", "estado": "confirmado"})

    registro = pedidos.get(pedido["id"])
    assert registro["notas"] == "original"
    assert registro["estado"] == "confirmado"


def test_update_de_registro_inexistente():
    with pytest.raises(SourceNotFound):
        ORMOrderService().update(999, {"notas": "x"})
    with pytest.raises(SourceNotFound) as exc:
        ORMSaleService().update(999, {"notas": "x"})
    assert exc.value.recurso == "venta"


def test_inventario_gateway(almacen, bolsa, stock):
    ORMInventoryService().descontar(almacen.pk, [{"presentacion_id": bolsa.pk, "cantidad": 4}])
    assert stock_de(bolsa.pk, almacen.pk) == 6


def test_errores_de_bd_son_de_transporte(monkeypatch, almacen):
    from apps.catalog import selectors

    def romper(almacen_id):
        raise DatabaseError("database is locked")

    monkeypatch.setattr(selectors, "presentaciones_por_almacen", romper)
    cache = CatalogCache(ORMCatalogService())

    with pytest.raises(TransportError):
        cache.get(almacen.pk)
    assert not cache.esta_cargado(almacen.pk)


def test_venta_a_dict(venta):
    registro = ORMSaleService().get(venta.pk)
    assert registro["total"] == "54.50"
    assert registro["monto_pagado"] == "0"
    assert Decimal(registro["saldo_pendiente"]) == Decimal("54.50")
    assert ORMSaleService().get(999) is None
