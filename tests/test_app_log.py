import logging
from datetime import timedelta

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.app_log.logging_handler import AppLogDBHandler
from apps.app_log.models import AppLog
from apps.app_log.selectors import logs_de_recurso
from apps.app_log.services.logger import _sanitize_meta, log_event

pytestmark = pytest.mark.django_db


def test_meta_se_sanitiza():
    from decimal import Decimal
    import datetime

    meta = _sanitize_meta({
        "api_key": "123",
        "monto": Decimal("10.50"),
        "fecha": datetime.date(2026, 10, 19),
        "detalles": [{"precio": Decimal("1")}],
    })
    assert meta == {
        "api_key": "***redacted***",
        "monto": "10.50",
        "fecha": "2026-10-19",
        "detalles": [{"precio": "1"}],
    }


def test_log_event_por_recurso():
    log_event("info", "tests", "pedido_confirmado", "ok",
              resource_type="pedidos.Pedido", resource_id=12)
    assert [l.evento for l in logs_de_recurso("pedidos.Pedido", "12")] == ["pedido_confirmado"]


def _logger_con_handler():
    logger = logging.getLogger("apps.tests.applog")
    logger.handlers = [AppLogDBHandler()]
    logger.propagate = False
    logger.setLevel(logging.INFO)
    return logger


def test_handler_copia_extras():
    logger = _logger_con_handler()
    logger.warning("Stock bajo %s", 3, extra={"almacen_id": 1, "evento": "stock_bajo"})

    log = AppLog.objects.get(evento="stock_bajo")
    assert log.mensaje == "Stock bajo 3"
    assert log.nivel == "warning"
    assert log.meta_json["almacen_id"] == 1


def test_handler_omite_registros_ya_guardados():
    logger = _logger_con_handler()
    logger.warning("duplicado", extra={"applog": False})
    assert AppLog.objects.count() == 0


def test_prune_logs():
    viejo = log_event("info", "tests", "viejo", "x")
    log_event("warning", "tests", "nuevo", "y")
    AppLog.objects.filter(pk=viejo).update(creado_en=timezone.now() - timedelta(days=40))

    call_command("prune_logs", "--days", "30")

    assert list(AppLog.objects.values_list("evento", flat=True)) == ["nuevo"]
