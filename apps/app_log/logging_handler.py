# apps/app_log/logging_handler.py
"""
Handler de logging que envía registros a AppLog.
Usa importación perezosa para evitar tocar models antes de que Django esté listo.
"""

import logging


class AppLogDBHandler(logging.Handler):
    """
    Handler que envía logs Python/Django a AppLog (BD).

    - Copia los atributos pasados por `extra` (pedido_id, venta_id, ...).
    - Los registros con `extra={"applog": False}` se omiten: el llamador ya
      los guardó con `log_event` (evita duplicados).
    - Antes de que las apps estén listas no hace nada.
    """

    EXTRA_ATTRS = ("pedido_id", "venta_id", "almacen_id", "pago_id", "evento")

    def emit(self, record: logging.LogRecord):
        if getattr(record, "applog", True) is False:
            return
        try:
            from django.apps import apps
            if not apps.ready:
                return
            from .services.logger import log_event

            level = (record.levelname or "INFO").lower()
            msg = self.format(
                record) if self.formatter else record.getMessage()

            meta = {
                "logger": record.name,
                "pathname": getattr(record, "pathname", None),
                "lineno": getattr(record, "lineno", None),
                "funcName": getattr(record, "funcName", None),
                "exc_text": getattr(record, "exc_text", None),
            }
            for attr in self.EXTRA_ATTRS:
                val = getattr(record, attr, None)
                if val not in (None, ""):
                    meta[attr] = val

            log_event(
                nivel=level,
                origen=record.name,
                evento=str(meta.get("evento") or "python_log"),
                mensaje=msg,
                meta=meta,
            )
        except Exception:
            # un log nunca rompe el flujo de negocio; se reporta por stderr
            self.handleError(record)
