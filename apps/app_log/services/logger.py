# apps/app_log/services/logger.py
"""
Servicio central de logging a base de datos.

- log_event: registrar un evento técnico o de negocio.

Incluye sanitización de metadata para evitar volcar secretos y para que
Decimal/fechas lleguen serializables al JSONField.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from django.utils.timezone import now

from ..models import AppLog

# Claves que no deben guardarse sin redacción
SAFE_REDACT_KEYS = [
    "password", "token", "authorization",
    "cookie", "secret", "apikey", "api_key"
]


def _jsonable(v: Any) -> Any:
    if isinstance(v, Decimal):
        return str(v)
    if isinstance(v, (datetime.date, datetime.datetime)):
        return v.isoformat()
    if isinstance(v, dict):
        return {str(k): _jsonable(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_jsonable(x) for x in v]
    return v


def _sanitize_meta(meta: Dict[str, Any]) -> Dict[str, Any]:
    """
    Redacta valores sensibles y normaliza tipos no serializables.
    """
    redacted = {}
    for k, v in (meta or {}).items():
        key = str(k).lower()
        if any(s in key for s in SAFE_REDACT_KEYS):
            redacted[k] = "***redacted***"
        else:
            redacted[k] = _jsonable(v)
    return redacted


def log_event(
    nivel: str,
    origen: str,
    evento: str,
    mensaje: str,
    meta: Optional[Dict[str, Any]] = None,
    *,
    resource_type: Optional[str] = None,
    resource_id: Any = None,
) -> str:
    """
    Crea un registro AppLog en base de datos.

    Args:
        nivel: debug|info|warning|error|critical
        origen: módulo/origen del evento (ej. "apps.pedidos.services.conversion")
        evento: etiqueta corta del evento
        mensaje: mensaje breve
        meta: diccionario adicional (se sanitiza)
        resource_type / resource_id: recurso afectado (opcional)

    Returns:
        id del log creado (str)
    """
    obj = AppLog.objects.create(
        nivel=nivel,
        origen=origen[:120],
        evento=evento[:80],
        mensaje=mensaje,
        meta_json=_sanitize_meta(meta or {}),
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        creado_en=now(),
    )
    return str(obj.id)
