"""
Colaboradores en memoria para probar el núcleo sin BD.
"""
from __future__ import annotations

import copy
import threading
from decimal import Decimal
from itertools import count
from typing import Any, Dict, List, Optional

from apps.orders.exceptions import TransportError
from apps.orders.ports import CatalogService, OrderService, PresentacionCatalogo, SaleService


def presentacion(id, *, stock=10, precio="15.50", nombre=None, producto_id=1):
    return PresentacionCatalogo(
        id=id,
        producto_id=producto_id,
        nombre=nombre or f"Presentación {id}",
        capacidad_kg=Decimal("25"),
        precio_venta=Decimal(precio) if precio is not None else None,
        stock_disponible=stock,
    )


class FakeCatalogService(CatalogService):
    """
    Catálogo por almacén. `fallar` hace que el próximo fetch lance
    TransportError; `bloquear` retiene los fetch hasta `liberar.set()`.
    """

    def __init__(self, catalogos: Dict[Any, List[PresentacionCatalogo]]):
        self.catalogos = catalogos
        self.llamadas: List[Any] = []
        self.fallar = 0
        self.bloquear = False
        self.en_fetch = threading.Event()
        self.liberar = threading.Event()

    def list_presentations(self, almacen_id):
        self.llamadas.append(almacen_id)
        if self.bloquear:
            self.en_fetch.set()
            self.liberar.wait(timeout=5)
        if self.fallar:
            self.fallar -= 1
            raise TransportError("catálogo no disponible")
        return list(self.catalogos.get(almacen_id, []))


class _Repo:
    def __init__(self):
        self.registros: Dict[Any, Dict[str, Any]] = {}
        self._ids = count(1)

    def get(self, id):
        registro = self.registros.get(id)
        return copy.deepcopy(registro) if registro is not None else None

    def delete(self, id):
        self.registros.pop(id, None)


class FakeOrderService(_Repo, OrderService):
    def __init__(self):
        super().__init__()
        self.fallar_update = False

    def agregar(self, **datos) -> Dict[str, Any]:
        registro = {"estado": "programado", "notas": "", **datos}
        registro["id"] = next(self._ids)
        self.registros[registro["id"]] = registro
        return copy.deepcopy(registro)

    def create(self, datos):
        return self.agregar(**copy.deepcopy(datos))

    def update(self, pedido_id, datos):
        if self.fallar_update:
            raise TransportError("sin conexión")
        self.registros[pedido_id].update(copy.deepcopy(datos))
        return self.get(pedido_id)


class FakeSaleService(_Repo, SaleService):
    def __init__(self):
        super().__init__()
        self.fallar_create = False
        self.devolver_none = False

    def create(self, datos):
        if self.fallar_create:
            raise TransportError("sin conexión")
        if self.devolver_none:
            return None
        registro = copy.deepcopy(datos)
        registro["id"] = next(self._ids)
        registro.setdefault("estado_pago", "pendiente")
        self.registros[registro["id"]] = registro
        return copy.deepcopy(registro)

    def update(self, venta_id, datos):
        self.registros[venta_id].update(copy.deepcopy(datos))
        return self.get(venta_id)


class FakeClock:
    def __init__(self, ahora: float = 1000.0):
        self.ahora = ahora

    def __call__(self) -> float:
        return self.ahora

    def avanzar(self, segundos: float) -> None:
        self.ahora += segundos
