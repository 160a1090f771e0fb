# apps/pedidos/models.py
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import UniqueConstraint

from apps.orders.calculations import subtotal
from apps.pedidos.fsm import PedidoEstado


class Pedido(models.Model):
    """
    Pedido proyectado (estimación de entrega futura).

    - Ciclo de vida (FSM) en `apps/pedidos/fsm.py`:
      programado → confirmado → entregado (solo vía conversión) | cancelado.
    - Las líneas llevan un precio ESTIMADO; al convertirse en venta ese
      precio pasa a ser el precio real (ver services/conversion.py).
    - `total_estimado` se calcula siempre desde las líneas (no se guarda).
    """

    ESTADOS = [(e.value, e.value.capitalize()) for e in PedidoEstado]

    cliente = models.ForeignKey(
        "customers.Cliente", on_delete=models.PROTECT, related_name="pedidos"
    )
    almacen = models.ForeignKey(
        "catalog.Almacen", on_delete=models.PROTECT, related_name="pedidos"
    )
    vendedor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pedidos",
    )

    fecha_entrega = models.DateField("Fecha de entrega", db_index=True)
    estado = models.CharField(
        max_length=20, choices=ESTADOS, default=PedidoEstado.PROGRAMADO.value, db_index=True)
    notas = models.TextField(blank=True, default="")

    creado = models.DateTimeField(auto_now_add=True)
    actualizado = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["fecha_entrega", "id"]
        indexes = [
            models.Index(fields=["almacen", "estado"]),
            models.Index(fields=["cliente"]),
        ]

    def __str__(self):
        return f"Pedido {self.pk} - {self.cliente} ({self.get_estado_display()})"

    @property
    def total_estimado(self) -> Decimal:
        """Σ(cantidad × precio_estimado) con precisión completa."""
        return sum((d.subtotal for d in self.detalles.all()), Decimal("0"))


class PedidoDetalle(models.Model):
    """
    Línea de un pedido: una fila por presentación (cantidad editable).
    """

    pedido = models.ForeignKey(
        Pedido, on_delete=models.CASCADE, related_name="detalles"
    )
    presentacion = models.ForeignKey(
        "catalog.Presentacion", on_delete=models.PROTECT, related_name="pedido_detalles"
    )
    cantidad = models.PositiveIntegerField(default=1)
    precio_estimado = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["pedido", "id"]
        constraints = [
            UniqueConstraint(fields=["pedido", "presentacion"], name="uniq_pedido_presentacion"),
            models.CheckConstraint(condition=models.Q(cantidad__gt=0), name="pedido_detalle_cantidad_gt_0"),
        ]

    def __str__(self):
        return f"{self.presentacion} x {self.cantidad} (Pedido {self.pedido_id})"

    @property
    def subtotal(self) -> Decimal:
        return subtotal(self.cantidad, self.precio_estimado)
