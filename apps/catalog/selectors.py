# apps/catalog/selectors.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from django.db.models import F, OuterRef, QuerySet, Subquery, Value
from django.db.models.functions import Coalesce, Lower

from apps.catalog.models import Almacen, Inventario, Presentacion
from apps.orders.ports import PresentacionCatalogo


# ==============
# Query Builders
# ==============

def almacenes() -> QuerySet[Almacen]:
    return Almacen.objects.order_by(Lower("nombre"), "id")


def presentaciones_activas(q: Optional[str] = None) -> QuerySet[Presentacion]:
    """
    Presentaciones activas (opcionalmente filtradas por nombre de presentación o producto).
    """
    return (
        Presentacion.objects
        .activas()
        .buscar(q)
        .select_related("producto")
        .order_by(Lower("nombre"), "id")
    )


def presentaciones_con_stock(almacen_id: int) -> QuerySet[Presentacion]:
    """
    Presentaciones activas anotadas con `stock_disponible` del almacén.
    Sin fila de Inventario → stock 0.
    """
    stock = Inventario.objects.filter(
        presentacion=OuterRef("pk"), almacen_id=almacen_id,
    ).values("cantidad")[:1]
    return presentaciones_activas().annotate(
        stock_disponible=Coalesce(Subquery(stock), Value(0)),
    )


def inventario_bajo_minimo(almacen_id: int) -> QuerySet[Inventario]:
    """Filas del almacén con cantidad <= stock_minimo (alertas de reposición)."""
    return (
        Inventario.objects
        .filter(almacen_id=almacen_id, cantidad__lte=F("stock_minimo"))
        .select_related("presentacion")
        .order_by("cantidad", "id")
    )


# ==================
# Borde con el núcleo
# ==================

def presentaciones_por_almacen(almacen_id: int) -> List[PresentacionCatalogo]:
    """
    Catálogo del almacén como DTOs inmutables (fetch del CatalogCache).
    """
    return [
        PresentacionCatalogo(
            id=p.id,
            producto_id=p.producto_id,
            nombre=p.nombre,
            capacidad_kg=p.capacidad_kg or Decimal("0"),
            precio_venta=p.precio_venta,
            stock_disponible=max(0, int(p.stock_disponible or 0)),
        )
        for p in presentaciones_con_stock(almacen_id)
    ]


# ==================
# Stock puntual
# ==================

def stock_de(presentacion_id: int, almacen_id: int) -> int:
    """Stock actual de la presentación en el almacén (0 si no hay fila)."""
    fila = (
        Inventario.objects
        .filter(presentacion_id=presentacion_id, almacen_id=almacen_id)
        .values_list("cantidad", flat=True)
        .first()
    )
    return int(fila or 0)
