# apps/payments/models.py
import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Pago(models.Model):
    """
    Pago realizado sobre una Venta.

    Reglas clave:
    - El monto debe ser > 0 (validado en servicio y por CheckConstraint).
    - Los pagos solo se agregan: no se editan ni se anulan desde el núcleo.
    - La suma de pagos determina el `estado_pago` de la venta.
    - Idempotencia opcional por (venta, idempotency_key) para reintentos.
    """

    class Metodo(models.TextChoices):
        EFECTIVO = "efectivo", _("Efectivo")
        TRANSFERENCIA = "transferencia", _("Transferencia")
        DEPOSITO = "deposito", _("Depósito")
        TARJETA = "tarjeta", _("Tarjeta")
        YAPE_PLIN = "yape_plin", _("Yape / Plin")
        OTRO = "otro", _("Otro")

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text=_("Identificador único del pago (UUID)."),
    )

    venta = models.ForeignKey(
        "sales.Venta",
        on_delete=models.PROTECT,
        related_name="pagos",
        help_text=_("Venta a la que se asocia este pago."),
    )

    monto = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text=_("Importe del pago."),
    )
    fecha = models.DateField(db_index=True)
    metodo_pago = models.CharField(
        max_length=20,
        choices=Metodo.choices,
        default=Metodo.EFECTIVO,
    )
    referencia = models.CharField(
        max_length=120,
        blank=True,
        default="",
        help_text=_("Nº de operación, voucher, etc. Obligatorio para transferencias."),
    )
    url_comprobante = models.URLField(blank=True, default="")

    idempotency_key = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text=_("Clave para evitar registrar dos veces el mismo pago."),
    )

    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pagos_registrados",
    )
    creado_en = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Pago")
        verbose_name_plural = _("Pagos")
        ordering = ["fecha", "creado_en"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(monto__gt=0), name="pago_monto_gt_0"),
            models.UniqueConstraint(
                fields=["venta", "idempotency_key"],
                condition=models.Q(idempotency_key__isnull=False),
                name="uniq_pago_venta_idempotency",
            ),
        ]
        indexes = [
            models.Index(fields=["venta", "fecha"]),
            models.Index(fields=["metodo_pago"]),
        ]

    def __str__(self) -> str:
        return f"Pago {self.monto} ({self.get_metodo_pago_display()}) venta {self.venta_id}"
