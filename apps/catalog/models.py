# apps/catalog/models.py
from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q, UniqueConstraint
from django.db.models.functions import Lower


class Almacen(models.Model):
    """
    Almacén (depósito) desde el que se despachan pedidos y ventas.
    El stock de cada presentación es por almacén (ver Inventario).
    """

    nombre = models.CharField("Nombre", max_length=120)
    direccion = models.CharField("Dirección", max_length=255, blank=True, default="")
    ciudad = models.CharField("Ciudad", max_length=120, blank=True, default="")

    creado = models.DateTimeField("Creado", auto_now_add=True)
    actualizado = models.DateTimeField("Actualizado", auto_now=True)

    class Meta:
        verbose_name = "Almacén"
        verbose_name_plural = "Almacenes"
        ordering = [Lower("nombre"), "id"]
        constraints = [
            UniqueConstraint(Lower("nombre"), name="uniq_almacen_nombre_ci"),
        ]

    def __str__(self) -> str:
        return self.nombre


class Producto(models.Model):
    nombre = models.CharField("Nombre", max_length=120)
    descripcion = models.TextField("Descripción", blank=True, default="")
    activo = models.BooleanField("Activo", default=True)

    class Meta:
        verbose_name = "Producto"
        verbose_name_plural = "Productos"
        ordering = [Lower("nombre"), "id"]

    def __str__(self) -> str:
        return self.nombre


class PresentacionQuerySet(models.QuerySet):
    def activas(self) -> "PresentacionQuerySet":
        return self.filter(activo=True)

    def buscar(self, q: str) -> "PresentacionQuerySet":
        q = (q or "").strip()
        if not q:
            return self
        return self.filter(Q(nombre__icontains=q) | Q(producto__nombre__icontains=q))


class Presentacion(models.Model):
    """
    Presentación vendible (SKU) de un producto: bolsa de 25 kg, briqueta, etc.

    - `precio_venta` es el precio de referencia; las líneas de pedido/venta
      guardan su propio precio (estimado o real).
    - El stock NO vive acá: se consulta por almacén en Inventario.
    """

    class Tipo(models.TextChoices):
        BRUTO = "bruto", "Bruto"
        PROCESADO = "procesado", "Procesado"
        MERMA = "merma", "Merma"
        BRIQUETA = "briqueta", "Briqueta"
        DETALLE = "detalle", "Detalle"

    producto = models.ForeignKey(
        Producto,
        on_delete=models.PROTECT,
        related_name="presentaciones",
        verbose_name="Producto",
    )
    nombre = models.CharField("Nombre", max_length=120)
    tipo = models.CharField(
        "Tipo", max_length=20, choices=Tipo.choices, default=Tipo.BRUTO)
    capacidad_kg = models.DecimalField(
        "Capacidad (kg)", max_digits=10, decimal_places=4, default=Decimal("0"))
    precio_venta = models.DecimalField(
        "Precio de venta", max_digits=12, decimal_places=2, null=True, blank=True)
    precio_compra = models.DecimalField(
        "Precio de compra", max_digits=12, decimal_places=2, null=True, blank=True)
    activo = models.BooleanField(
        "Activo",
        default=True,
        help_text="Si está desmarcada, la presentación no aparece para nuevos pedidos/ventas.",
    )

    objects = PresentacionQuerySet.as_manager()

    class Meta:
        verbose_name = "Presentación"
        verbose_name_plural = "Presentaciones"
        ordering = [Lower("nombre"), "id"]
        indexes = [
            models.Index(fields=["producto", "activo"], name="pres_producto_activo_idx"),
        ]

    def __str__(self) -> str:
        return self.nombre


class Lote(models.Model):
    """
    Lote de materia prima recibido de un proveedor.
    Regla: peso_seco_kg <= peso_humedo_kg (cuando ambos están cargados).
    """

    producto = models.ForeignKey(
        Producto, on_delete=models.PROTECT, related_name="lotes")
    proveedor = models.CharField("Proveedor", max_length=160, blank=True, default="")
    descripcion = models.TextField("Descripción", blank=True, default="")
    peso_humedo_kg = models.DecimalField(
        "Peso húmedo (kg)", max_digits=12, decimal_places=2)
    peso_seco_kg = models.DecimalField(
        "Peso seco (kg)", max_digits=12, decimal_places=2, null=True, blank=True)
    fecha_ingreso = models.DateField("Fecha de ingreso")
    cantidad_disponible_kg = models.DecimalField(
        "Disponible (kg)", max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        verbose_name = "Lote"
        verbose_name_plural = "Lotes"
        ordering = ["-fecha_ingreso", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(peso_seco_kg__isnull=True) | Q(
                    peso_seco_kg__lte=models.F("peso_humedo_kg")),
                name="lote_seco_lte_humedo",
            ),
        ]

    def __str__(self) -> str:
        return f"Lote {self.pk} - {self.producto}"

    @property
    def rendimiento(self):
        """peso_seco / peso_humedo en %, o None si falta algún peso."""
        if not self.peso_seco_kg or not self.peso_humedo_kg:
            return None
        return (self.peso_seco_kg / self.peso_humedo_kg) * 100


class Inventario(models.Model):
    """
    Stock de una presentación en un almacén.
    Una fila por (presentación, almacén); cantidad >= 0.
    """

    presentacion = models.ForeignKey(
        Presentacion, on_delete=models.CASCADE, related_name="inventarios")
    almacen = models.ForeignKey(
        Almacen, on_delete=models.CASCADE, related_name="inventarios")
    lote = models.ForeignKey(
        Lote, on_delete=models.SET_NULL, null=True, blank=True, related_name="inventarios")
    cantidad = models.PositiveIntegerField("Cantidad", default=0)
    stock_minimo = models.PositiveIntegerField("Stock mínimo", default=0)
    ultima_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Inventario"
        verbose_name_plural = "Inventarios"
        constraints = [
            UniqueConstraint(
                fields=["presentacion", "almacen"],
                name="uniq_inventario_presentacion_almacen",
            ),
        ]
        indexes = [
            models.Index(fields=["almacen", "presentacion"]),
        ]

    def __str__(self) -> str:
        return f"{self.presentacion} @ {self.almacen}: {self.cantidad}"

    @property
    def bajo_minimo(self) -> bool:
        return self.cantidad <= self.stock_minimo
