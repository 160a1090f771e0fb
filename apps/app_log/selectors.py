# apps/app_log/selectors.py
"""
Consultas de lectura comunes para AppLog.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.db.models import QuerySet

from .models import AppLog


def list_logs(
    *,
    nivel: Optional[str] = None,
    evento: Optional[str] = None,
    origen_icontains: Optional[str] = None,
    desde: Optional[datetime] = None,
    hasta: Optional[datetime] = None,
    limit: int = 1000,
) -> QuerySet[AppLog]:
    qs = AppLog.objects.all()
    if nivel:
        qs = qs.filter(nivel=nivel)
    if evento:
        qs = qs.filter(evento=evento)
    if origen_icontains:
        qs = qs.filter(origen__icontains=origen_icontains)
    if desde:
        qs = qs.filter(creado_en__gte=desde)
    if hasta:
        qs = qs.filter(creado_en__lte=hasta)
    return qs.order_by("-creado_en")[:limit]


def logs_de_recurso(resource_type: str, resource_id) -> QuerySet[AppLog]:
    """Eventos asociados a un recurso (p. ej. un pedido convertido)."""
    return AppLog.objects.filter(
        resource_type=resource_type, resource_id=str(resource_id),
    ).order_by("-creado_en")
