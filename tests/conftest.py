import datetime
from decimal import Decimal

import pytest

from apps.catalog.services.cache import CatalogCache
from tests.fakes import (
    FakeCatalogService,
    FakeClock,
    FakeOrderService,
    FakeSaleService,
    presentacion,
)

HOY = datetime.date(2026, 10, 19)


@pytest.fixture
def hoy():
    return HOY


# -----------------------------
# Núcleo sin BD
# -----------------------------

@pytest.fixture
def catalogo_fake():
    return FakeCatalogService({
        1: [
            presentacion(7, stock=5, precio="15.50"),
            presentacion(9, stock=3, precio="8.00"),
        ],
        2: [
            presentacion(7, stock=100, precio="14.00"),
        ],
    })


@pytest.fixture
def reloj():
    return FakeClock()


@pytest.fixture
def cache(catalogo_fake, reloj):
    return CatalogCache(catalogo_fake, clock=reloj)


@pytest.fixture
def pedidos_fake():
    return FakeOrderService()


@pytest.fixture
def ventas_fake():
    return FakeSaleService()


# -----------------------------
# Datos en BD
# -----------------------------

@pytest.fixture
def almacen(db):
    from apps.catalog.models import Almacen
    return Almacen.objects.create(nombre="Central")


@pytest.fixture
def otro_almacen(db):
    from apps.catalog.models import Almacen
    return Almacen.objects.create(nombre="Sucursal Norte")


@pytest.fixture
def producto(db):
    from apps.catalog.models import Producto
    return Producto.objects.create(nombre="Carbón vegetal")


@pytest.fixture
def bolsa(producto):
    from apps.catalog.models import Presentacion
    return Presentacion.objects.create(
        producto=producto, nombre="Bolsa 25 kg",
        capacidad_kg=Decimal("25"), precio_venta=Decimal("15.50"))


@pytest.fixture
def briqueta(producto):
    from apps.catalog.models import Presentacion
    return Presentacion.objects.create(
        producto=producto, nombre="Briqueta 5 kg", tipo="briqueta",
        capacidad_kg=Decimal("5"), precio_venta=Decimal("8.00"))


@pytest.fixture
def stock(almacen, bolsa, briqueta):
    from apps.catalog.models import Inventario
    Inventario.objects.create(almacen=almacen, presentacion=bolsa, cantidad=10)
    Inventario.objects.create(almacen=almacen, presentacion=briqueta, cantidad=4)


@pytest.fixture
def cliente(db):
    from apps.customers.models import Cliente
    return Cliente.objects.create(nombre="ferretería don josé", telefono="(0381) 555-1234")


@pytest.fixture
def venta(cliente, almacen, bolsa, briqueta, stock, hoy):
    """Venta de 54.50: 3 x 15.50 + 1 x 8.00."""
    from apps.sales.services.ventas import crear_venta
    return crear_venta(
        cliente_id=cliente.pk,
        almacen_id=almacen.pk,
        fecha=hoy,
        detalles=[
            {"presentacion_id": bolsa.pk, "cantidad": 3, "precio_unitario": "15.50"},
            {"presentacion_id": briqueta.pk, "cantidad": 1, "precio_unitario": "8.00"},
        ],
        tipo_pago="credito",
    )
