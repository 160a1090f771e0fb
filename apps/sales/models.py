# apps/sales/models.py
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import UniqueConstraint

from apps.orders.calculations import subtotal


class Venta(models.Model):
    """
    Venta confirmada.

    - `estado_pago` (pendiente | parcial | pagado) es el ÚLTIMO valor derivado
      de los pagos (ver payment_status.py). Se recalcula en cada pago; nunca
      se edita a mano.
    - `total` se calcula siempre desde los detalles (no se guarda).
    - Al crearse descuenta stock del almacén (services/ventas.py).
    - `pedido`: pedido proyectado de origen, si vino de una conversión.
    """

    class TipoPago(models.TextChoices):
        CONTADO = "contado", "Contado"
        CREDITO = "credito", "Crédito"

    class EstadoPago(models.TextChoices):
        PENDIENTE = "pendiente", "Pendiente"
        PARCIAL = "parcial", "Parcial"
        PAGADO = "pagado", "Pagado"

    cliente = models.ForeignKey(
        "customers.Cliente", on_delete=models.PROTECT, related_name="ventas"
    )
    almacen = models.ForeignKey(
        "catalog.Almacen", on_delete=models.PROTECT, related_name="ventas"
    )
    vendedor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ventas",
    )
    pedido = models.OneToOneField(
        "pedidos.Pedido",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="venta",
        help_text="Pedido proyectado que originó la venta (conversión).",
    )

    fecha = models.DateField(db_index=True)
    tipo_pago = models.CharField(
        max_length=10, choices=TipoPago.choices, default=TipoPago.CONTADO)
    estado_pago = models.CharField(
        max_length=10, choices=EstadoPago.choices, default=EstadoPago.PENDIENTE, db_index=True)
    fecha_vencimiento = models.DateField(
        null=True, blank=True, help_text="Vencimiento del crédito (solo tipo_pago=credito).")
    notas = models.TextField(blank=True, default="")

    creado = models.DateTimeField(auto_now_add=True)
    actualizado = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-fecha", "-id"]
        indexes = [
            models.Index(fields=["almacen", "fecha"]),
            models.Index(fields=["cliente", "estado_pago"]),
        ]

    def __str__(self):
        return f"Venta {self.pk} - {self.cliente} ({self.get_estado_pago_display()})"

    @property
    def total(self) -> Decimal:
        """Σ(cantidad × precio_unitario) con precisión completa."""
        return sum((d.subtotal for d in self.detalles.all()), Decimal("0"))


class VentaDetalle(models.Model):
    """
    Línea de una venta: una fila por presentación, con el precio real.
    """

    venta = models.ForeignKey(
        Venta, on_delete=models.CASCADE, related_name="detalles"
    )
    presentacion = models.ForeignKey(
        "catalog.Presentacion", on_delete=models.PROTECT, related_name="venta_detalles"
    )
    cantidad = models.PositiveIntegerField(default=1)
    precio_unitario = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["venta", "id"]
        constraints = [
            UniqueConstraint(fields=["venta", "presentacion"], name="uniq_venta_presentacion"),
            models.CheckConstraint(condition=models.Q(cantidad__gt=0), name="venta_detalle_cantidad_gt_0"),
        ]

    def __str__(self):
        return f"{self.presentacion} x {self.cantidad} (Venta {self.venta_id})"

    @property
    def subtotal(self) -> Decimal:
        return subtotal(self.cantidad, self.precio_unitario)
