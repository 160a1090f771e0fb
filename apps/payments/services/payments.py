# apps/payments/services/payments.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.orders import validators
from apps.orders.calculations import parse_decimal
from apps.payments.models import Pago
from apps.sales import payment_status
from apps.sales.models import Venta
from apps.sales.services.ventas import sincronizar_estado_pago

logger = logging.getLogger(__name__)


class OverpayNotAllowed(Exception):
    """Se intentó pagar más que el saldo pendiente de la venta."""

    def __init__(self, *, saldo: Decimal, monto: Decimal):
        self.saldo = saldo or Decimal("0.00")
        self.monto = monto or Decimal("0.00")
        self.diferencia = self.monto - self.saldo
        super().__init__(
            f"El monto ({self.monto}) supera el saldo pendiente ({self.saldo})."
        )


def saldo_de(venta: Venta) -> Decimal:
    return payment_status.saldo_pendiente(venta.total, venta.pagos.all())


@transaction.atomic
def registrar_pago(
    *,
    venta_id,
    monto,
    fecha,
    metodo_pago: str = Pago.Metodo.EFECTIVO,
    referencia: Optional[str] = None,
    url_comprobante: str = "",
    usuario=None,
    idempotency_key: Optional[str] = None,
) -> Pago:
    """
    Registra un pago para una venta y sincroniza su `estado_pago`.

    Reglas:
      - monto > 0 (acepta coma decimal: "10,50").
      - monto <= saldo pendiente (con tolerancia ORDERS_PAYMENT_EPSILON);
        si no → OverpayNotAllowed.
      - Transferencias requieren referencia.
      - Idempotencia opcional por (venta, idempotency_key): un reintento
        devuelve el pago existente sin duplicar.
      - Tras registrar, estado_pago se recalcula (pendiente → parcial → pagado).
    """
    datos: Mapping[str, Any] = {
        "venta_id": venta_id,
        "monto": monto,
        "fecha": fecha,
        "metodo_pago": metodo_pago,
        "referencia": referencia or "",
    }
    errores = validators.validar(validators.REGLAS_PAGO, datos, cruzadas=validators.CRUZADAS_PAGO)
    if errores:
        raise ValidationError(errores)

    # Lock sobre la venta para que dos pagos concurrentes no superen el saldo
    venta = Venta.objects.select_for_update().get(pk=venta_id)

    if idempotency_key:
        existente = Pago.objects.filter(venta=venta, idempotency_key=idempotency_key).first()
        if existente:
            sincronizar_estado_pago(venta=venta)
            return existente

    monto_d = parse_decimal(monto, campo="monto")
    saldo = saldo_de(venta)
    if monto_d > saldo + payment_status.epsilon():
        logger.info("Sobrepago rechazado venta=%s monto=%s saldo=%s", venta.pk, monto_d, saldo)
        raise OverpayNotAllowed(saldo=saldo, monto=monto_d)

    pago = Pago(
        venta=venta,
        monto=monto_d,
        fecha=fecha,
        metodo_pago=metodo_pago,
        referencia=(referencia or "").strip(),
        url_comprobante=url_comprobante or "",
        usuario=usuario,
        idempotency_key=idempotency_key,
    )
    pago.full_clean()
    pago.save()

    sincronizar_estado_pago(venta=venta)
    logger.info("Pago %s registrado venta=%s monto=%s estado_pago=%s",
                pago.pk, venta.pk, monto_d, venta.estado_pago)
    return pago


@transaction.atomic
def registrar_pagos_lote(
    *,
    pagos: Iterable[Mapping[str, Any]],
    fecha=None,
    metodo_pago: str = Pago.Metodo.EFECTIVO,
    referencia: Optional[str] = None,
    usuario=None,
) -> List[Pago]:
    """
    Cobra varias ventas pendientes de una vez.

    Cada ítem trae `venta_id` y `monto`; `fecha`, `metodo_pago` y
    `referencia` se toman del ítem o, si no vienen, de los valores comunes
    del lote. Cada monto se controla contra el saldo de su venta.

    Todo o nada: si un ítem no valida o supera su saldo no se registra
    ningún pago. Los errores de validación se informan como `pagos.<i>`.
    """
    items = list(pagos or [])
    if not items:
        raise ValidationError("El lote no tiene pagos.")

    registrados: List[Pago] = []
    for idx, item in enumerate(items):
        try:
            pago = registrar_pago(
                venta_id=item.get("venta_id"),
                monto=item.get("monto"),
                fecha=item.get("fecha") or fecha,
                metodo_pago=item.get("metodo_pago") or metodo_pago,
                referencia=item.get("referencia", referencia),
                url_comprobante=item.get("url_comprobante") or "",
                usuario=usuario,
                idempotency_key=item.get("idempotency_key"),
            )
        except ValidationError as exc:
            raise ValidationError({f"pagos.{idx}": exc.messages}) from exc
        except OverpayNotAllowed:
            logger.info("Lote de pagos rechazado: ítem %s (venta=%s) supera el saldo",
                        idx, item.get("venta_id"))
            raise
        registrados.append(pago)

    logger.info("Lote de %s pagos registrado (total %s)",
                len(registrados), sum((p.monto for p in registrados), Decimal("0")))
    return registrados
