# apps/reports/services/estadisticas.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable

from apps.orders.calculations import parse_decimal, redondear
from apps.sales.payment_status import PAGADO, PARCIAL, PENDIENTE

# =============================================================================
# Estadísticas del tablero de ventas.
# -----------------------------------------------------------------------------
# Solo consolida datos ya calculados (total y estado_pago de cada venta).
# `cobrado_estimado` es una heurística de visualización: una venta parcial
# cuenta al 50 %. No se usa para derivar estado_pago ni saldos; para eso
# está apps.sales.payment_status.
# =============================================================================

FACTOR_PARCIAL = Decimal("0.5")


@dataclass(frozen=True)
class EstadisticasVentas:
    total: Decimal
    cantidad: int
    pagadas: int
    pendientes: int
    parciales: int
    cobrado_estimado: Decimal

    @property
    def por_cobrar_estimado(self) -> Decimal:
        return redondear(self.total - self.cobrado_estimado)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": f"{self.total:.2f}",
            "cantidad": self.cantidad,
            "pagadas": self.pagadas,
            "pendientes": self.pendientes,
            "parciales": self.parciales,
            "cobrado_estimado": f"{self.cobrado_estimado:.2f}",
            "por_cobrar_estimado": f"{self.por_cobrar_estimado:.2f}",
        }


def _leer(venta, clave: str):
    if isinstance(venta, dict):
        return venta.get(clave)
    return getattr(venta, clave, None)


def estadisticas_ventas(ventas: Iterable[Any]) -> EstadisticasVentas:
    """
    Resumen de un conjunto de ventas (modelos Venta o dicts de gateway).
    Ventas sin total informado suman 0.
    """
    total = Decimal("0")
    cobrado = Decimal("0")
    conteo = {PAGADO: 0, PENDIENTE: 0, PARCIAL: 0}
    cantidad = 0

    for venta in ventas:
        cantidad += 1
        monto = parse_decimal(_leer(venta, "total") or "0", campo="total")
        estado = _leer(venta, "estado_pago") or PENDIENTE
        total += monto
        if estado in conteo:
            conteo[estado] += 1
        if estado == PAGADO:
            cobrado += monto
        elif estado == PARCIAL:
            cobrado += monto * FACTOR_PARCIAL

    return EstadisticasVentas(
        total=redondear(total),
        cantidad=cantidad,
        pagadas=conteo[PAGADO],
        pendientes=conteo[PENDIENTE],
        parciales=conteo[PARCIAL],
        cobrado_estimado=redondear(cobrado),
    )
