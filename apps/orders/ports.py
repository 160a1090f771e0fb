# apps/orders/ports.py
"""
Puertos hacia los colaboradores externos del núcleo.

El núcleo no conoce el transporte (ORM, HTTP): consume estos contratos.
Los adaptadores ORM viven en `apps/<app>/gateways.py`; los tests usan fakes
en memoria.

Los registros viajan como dicts con montos en strings decimales
("15.50") para evitar deriva de punto flotante en el borde.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class PresentacionCatalogo:
    """Presentación vendible con el stock disponible en UN almacén."""
    id: int
    producto_id: Optional[int]
    nombre: str
    capacidad_kg: Decimal
    precio_venta: Optional[Decimal]
    stock_disponible: int


class CatalogService(ABC):
    """Puerto para el catálogo de presentaciones por almacén."""
    @abstractmethod
    def list_presentations(self, almacen_id: int) -> List[PresentacionCatalogo]:
        """Presentaciones activas con stock del almacén indicado."""
        pass


class OrderService(ABC):
    """Puerto para la persistencia de pedidos proyectados."""
    @abstractmethod
    def get(self, pedido_id) -> Optional[Dict[str, Any]]:
        """Devuelve el pedido completo (con detalles) o None si no existe."""
        pass

    @abstractmethod
    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update(self, pedido_id, datos: Dict[str, Any]) -> Dict[str, Any]:
        """Actualización parcial: solo las claves presentes en `datos`."""
        pass

    @abstractmethod
    def delete(self, pedido_id) -> None:
        pass


class SaleService(ABC):
    """
    Puerto para la persistencia de ventas confirmadas.
    `create` es responsable de descontar stock (vía InventoryService).
    """
    @abstractmethod
    def get(self, venta_id) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update(self, venta_id, datos: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def delete(self, venta_id) -> None:
        pass


class PaymentService(ABC):
    """Puerto para pagos (append-only desde el núcleo)."""
    @abstractmethod
    def list_by_sale(self, venta_id) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        pass


class InventoryService(ABC):
    """Puerto para el descuento de stock al registrar una venta."""
    @abstractmethod
    def descontar(self, almacen_id: int, lineas: Iterable[Dict[str, Any]]) -> None:
        """
        Descuenta `cantidad` de cada presentación en el almacén.
        Lanza InsufficientStock si algún renglón no alcanza.
        """
        pass
