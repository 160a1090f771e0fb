# apps/app_log/management/commands/prune_logs.py
"""
Comando de gestión para purgar logs antiguos y controlar retención.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.app_log.models import AppLog


class Command(BaseCommand):
    help = "Purga AppLog más antiguos que --days (opcionalmente solo un nivel)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            required=True,
            help="Cantidad de días a conservar",
        )
        parser.add_argument(
            "--nivel",
            choices=[c for c, _ in AppLog.Level.choices],
            default=None,
            help="Purgar solo este nivel",
        )

    def handle(self, *args, **opts):
        cutoff = timezone.now() - timedelta(days=opts["days"])
        qs = AppLog.objects.filter(creado_en__lt=cutoff)
        if opts["nivel"]:
            qs = qs.filter(nivel=opts["nivel"])
        n = qs.delete()[0]
        self.stdout.write(self.style.SUCCESS(f"AppLog purged: {n}"))
