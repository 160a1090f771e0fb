# apps/catalog/services/lotes.py
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.catalog.models import Lote
from apps.orders import validators
from apps.orders.calculations import parse_decimal

logger = logging.getLogger(__name__)


@transaction.atomic
def crear_lote(*, datos: Mapping[str, Any]) -> Lote:
    """
    Registra un lote. Aplica las reglas de la fachada (incluida
    peso seco <= peso húmedo) antes de tocar la BD.
    """
    errores = validators.validar(
        validators.REGLAS_LOTE, datos, cruzadas=validators.CRUZADAS_LOTE)
    if errores:
        raise ValidationError(errores)

    seco = datos.get("peso_seco_kg")
    disponible = datos.get("cantidad_disponible_kg")
    lote = Lote(
        producto_id=datos["producto_id"],
        proveedor=(datos.get("proveedor") or "").strip(),
        descripcion=(datos.get("descripcion") or "").strip(),
        peso_humedo_kg=parse_decimal(datos["peso_humedo_kg"], campo="peso húmedo"),
        peso_seco_kg=parse_decimal(seco, campo="peso seco") if seco not in (None, "") else None,
        fecha_ingreso=datos["fecha_ingreso"],
        cantidad_disponible_kg=(
            parse_decimal(disponible, campo="disponible") if disponible not in (None, "") else None
        ),
    )
    lote.full_clean()
    lote.save()
    logger.info("Lote creado id=%s producto=%s", lote.pk, lote.producto_id)
    return lote
