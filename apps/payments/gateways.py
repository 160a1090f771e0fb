# apps/payments/gateways.py
"""
Adaptador ORM del puerto PaymentService (alta y consulta de pagos).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db import DatabaseError

from apps.orders.exceptions import TransportError
from apps.orders.ports import PaymentService
from apps.payments.models import Pago
from apps.payments.services.payments import registrar_pago

logger = logging.getLogger(__name__)


def pago_a_dict(pago: Pago) -> Dict[str, Any]:
    return {
        "id": str(pago.pk),
        "venta_id": pago.venta_id,
        "monto": str(pago.monto),
        "fecha": pago.fecha.isoformat() if hasattr(pago.fecha, "isoformat") else pago.fecha,
        "metodo_pago": pago.metodo_pago,
        "referencia": pago.referencia,
        "url_comprobante": pago.url_comprobante,
    }


class ORMPaymentService(PaymentService):
    def list_by_sale(self, venta_id) -> List[Dict[str, Any]]:
        try:
            pagos = list(Pago.objects.filter(venta_id=venta_id).order_by("fecha", "creado_en"))
        except DatabaseError as exc:
            raise TransportError(f"No se pudieron leer los pagos de la venta {venta_id}.") from exc
        return [pago_a_dict(p) for p in pagos]

    def create(self, datos: Dict[str, Any]) -> Dict[str, Any]:
        try:
            pago = registrar_pago(
                venta_id=datos.get("venta_id"),
                monto=datos.get("monto"),
                fecha=datos.get("fecha"),
                metodo_pago=datos.get("metodo_pago") or Pago.Metodo.EFECTIVO,
                referencia=datos.get("referencia"),
                url_comprobante=datos.get("url_comprobante") or "",
                idempotency_key=datos.get("idempotency_key"),
            )
            pago.refresh_from_db()
        except DatabaseError as exc:
            logger.exception("Error registrando pago venta=%s", datos.get("venta_id"))
            raise TransportError("No se pudo registrar el pago.") from exc
        return pago_a_dict(pago)
