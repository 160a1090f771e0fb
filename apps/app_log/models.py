# apps/app_log/models.py
"""
AppLog: eventos técnicos y de negocio persistidos en BD.

- Nivel y origen (logger/módulo) más un evento corto para filtrar.
- Recurso opcional ("pedidos.Pedido" + id) para correlacionar, por ejemplo,
  advertencias de conversión con el pedido y la venta involucrados.
- meta_json con datos estructurados (se sanitiza en services.logger).

Ejemplos de consultas:
- Advertencias de conversión: AppLog.objects.filter(evento="conversion_estado_pendiente")
- Historial de un pedido: AppLog.objects.filter(resource_type="pedidos.Pedido", resource_id="12")
"""

from __future__ import annotations

import uuid
from django.db import models
from django.utils import timezone


class AppLog(models.Model):
    class Level(models.TextChoices):
        DEBUG = "debug", "Debug"
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    creado_en = models.DateTimeField(default=timezone.now, db_index=True)

    nivel = models.CharField(
        max_length=10, choices=Level.choices, db_index=True)
    origen = models.CharField(
        max_length=120, db_index=True, help_text='Logger/módulo: ej. "apps.pedidos.services.conversion".'
    )
    evento = models.CharField(
        max_length=80, db_index=True, help_text='Etiqueta corta: ej. "conversion_estado_pendiente", "python_log".'
    )
    mensaje = models.TextField(
        help_text="Mensaje breve/útil para lectura humana.")

    resource_type = models.CharField(
        max_length=120, null=True, blank=True, db_index=True,
        help_text='Etiqueta "<app_label>.<ModelName>": ej. "pedidos.Pedido".'
    )
    resource_id = models.CharField(
        max_length=120, null=True, blank=True, db_index=True)

    meta_json = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "app_log"
        verbose_name = "Log de aplicación"
        verbose_name_plural = "Logs de aplicación"
        ordering = ["-creado_en"]
        indexes = [
            models.Index(fields=["-creado_en", "nivel"]),
            models.Index(fields=["origen", "evento"]),
            models.Index(fields=["resource_type", "resource_id"]),
        ]

    def __str__(self) -> str:
        return f"[{self.nivel}] {self.origen} · {self.evento}"
