from decimal import Decimal

import pytest

from apps.orders.exceptions import AlreadyConverted, ConversionFailed, SourceNotFound, TransportError
from apps.pedidos.services.conversion import construir_venta, convertir_pedido_a_venta


@pytest.fixture
def pedido(pedidos_fake):
    return pedidos_fake.agregar(
        cliente_id=4,
        almacen_id=1,
        fecha_entrega="2026-10-25",
        notas="Entregar por la mañana",
        detalles=[
            {"id": 1, "presentacion_id": 7, "cantidad": 3, "precio_estimado": "15.50"},
            {"id": 2, "presentacion_id": 9, "cantidad": 1, "precio_estimado": "8.00"},
        ],
    )


def convertir(pedido_id, pedidos, ventas, hoy, **kwargs):
    kwargs.setdefault("app_log", False)
    return convertir_pedido_a_venta(pedido_id, pedidos=pedidos, ventas=ventas, hoy=hoy, **kwargs)


def test_construir_venta_congela_precio_estimado(pedido, hoy):
    venta = construir_venta(pedido, hoy=hoy)

    assert venta == {
        "cliente_id": 4,
        "almacen_id": 1,
        "fecha": "2026-10-19",
        "tipo_pago": "credito",
        "notas": "Entregar por la mañana",
        "pedido_id": pedido["id"],
        "detalles": [
            {"presentacion_id": 7, "cantidad": 3, "precio_unitario": "15.50"},
            {"presentacion_id": 9, "cantidad": 1, "precio_unitario": "8.00"},
        ],
    }


def test_conversion_exitosa(pedido, pedidos_fake, ventas_fake, hoy):
    resultado = convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)

    assert not resultado.con_advertencias
    venta = ventas_fake.get(resultado.venta["id"])
    assert venta["pedido_id"] == pedido["id"]
    total = sum(Decimal(d["precio_unitario"]) * d["cantidad"] for d in venta["detalles"])
    assert total == Decimal("54.50")
    assert pedidos_fake.get(pedido["id"])["estado"] == "entregado"


def test_convertir_dos_veces(pedido, pedidos_fake, ventas_fake, hoy):
    convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)

    with pytest.raises(AlreadyConverted):
        convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)
    assert len(ventas_fake.registros) == 1


def test_pedido_inexistente(pedidos_fake, ventas_fake, hoy):
    with pytest.raises(SourceNotFound):
        convertir(404, pedidos_fake, ventas_fake, hoy)


def test_pedido_confirmado_se_convierte(pedido, pedidos_fake, ventas_fake, hoy):
    pedidos_fake.update(pedido["id"], {"estado": "confirmado"})
    resultado = convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)
    assert resultado.venta["id"] in ventas_fake.registros


def test_pedido_cancelado_no_se_convierte(pedido, pedidos_fake, ventas_fake, hoy):
    pedidos_fake.update(pedido["id"], {"estado": "cancelado"})

    with pytest.raises(ConversionFailed) as exc:
        convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)

    assert "estado" in exc.value.errores
    assert ventas_fake.registros == {}


def test_pedido_sin_lineas(pedidos_fake, ventas_fake, hoy):
    vacio = pedidos_fake.agregar(cliente_id=4, almacen_id=1, fecha_entrega="2026-10-25", detalles=[])

    with pytest.raises(ConversionFailed) as exc:
        convertir(vacio["id"], pedidos_fake, ventas_fake, hoy)

    assert exc.value.errores == {"detalles": "Debe agregar al menos un producto"}
    assert pedidos_fake.get(vacio["id"])["estado"] == "programado"


def test_pedido_con_linea_invalida(pedidos_fake, ventas_fake, hoy):
    roto = pedidos_fake.agregar(
        cliente_id=4, almacen_id=1, fecha_entrega="2026-10-25",
        detalles=[{"presentacion_id": 7, "cantidad": 0, "precio_estimado": "1"}],
    )
    with pytest.raises(ConversionFailed):
        convertir(roto["id"], pedidos_fake, ventas_fake, hoy)
    assert ventas_fake.registros == {}


def test_falla_al_crear_la_venta(pedido, pedidos_fake, ventas_fake, hoy):
    ventas_fake.fallar_create = True

    with pytest.raises(TransportError):
        convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)
    assert pedidos_fake.get(pedido["id"])["estado"] == "programado"


def test_colaborador_sin_venta(pedido, pedidos_fake, ventas_fake, hoy):
    ventas_fake.devolver_none = True
    with pytest.raises(ConversionFailed):
        convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)


def test_falla_al_marcar_entregado_deja_advertencia(pedido, pedidos_fake, ventas_fake, hoy):
    pedidos_fake.fallar_update = True

    resultado = convertir(pedido["id"], pedidos_fake, ventas_fake, hoy)

    assert resultado.con_advertencias
    assert "no se pudo marcar el pedido" in resultado.advertencias[0]
    assert resultado.venta["id"] in ventas_fake.registros
    assert pedidos_fake.get(pedido["id"])["estado"] == "programado"


@pytest.mark.django_db
def test_advertencia_queda_en_applog(pedido, pedidos_fake, ventas_fake, hoy):
    from apps.app_log.models import AppLog
    from apps.pedidos.services.conversion import EVENTO_ESTADO_PENDIENTE

    pedidos_fake.fallar_update = True
    resultado = convertir(pedido["id"], pedidos_fake, ventas_fake, hoy, app_log=True)

    log = AppLog.objects.get(evento=EVENTO_ESTADO_PENDIENTE)
    assert log.nivel == "warning"
    assert log.resource_id == str(pedido["id"])
    assert log.meta_json["venta_id"] == resultado.venta["id"]


def test_advertencia_sin_applog_disponible(monkeypatch, pedido, pedidos_fake, ventas_fake, hoy):
    from django.db import DatabaseError

    from apps.app_log.models import AppLog

    def romper(**kwargs):
        raise DatabaseError("server closed the connection")

    monkeypatch.setattr(AppLog.objects, "create", romper)
    pedidos_fake.fallar_update = True

    resultado = convertir(pedido["id"], pedidos_fake, ventas_fake, hoy, app_log=True)

    assert resultado.con_advertencias
    assert list(ventas_fake.registros) == [resultado.venta["id"]]
