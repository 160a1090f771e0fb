# apps/customers/models.py
from __future__ import annotations

from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower


class ClienteQuerySet(models.QuerySet):
    def activos(self) -> "ClienteQuerySet":
        return self.filter(activo=True)

    def buscar(self, q: str) -> "ClienteQuerySet":
        q = (q or "").strip()
        if not q:
            return self
        return self.filter(Q(nombre__icontains=q) | Q(telefono__icontains=q))


class Cliente(models.Model):
    """
    Cliente de la distribuidora. Pedidos y ventas lo referencian; el saldo
    pendiente no se guarda, se calcula desde sus ventas (ver selectors).
    """

    nombre = models.CharField("Nombre", max_length=160)
    telefono = models.CharField("Teléfono", max_length=40, blank=True, default="")
    direccion = models.CharField("Dirección", max_length=255, blank=True, default="")
    activo = models.BooleanField("Activo", default=True)

    creado = models.DateTimeField(auto_now_add=True)
    actualizado = models.DateTimeField(auto_now=True)

    objects = ClienteQuerySet.as_manager()

    class Meta:
        verbose_name = "Cliente"
        verbose_name_plural = "Clientes"
        ordering = [Lower("nombre"), "id"]

    def __str__(self) -> str:
        return self.nombre

    def save(self, *args, **kwargs):
        from apps.customers.normalizers import capitalizar, clean_tel
        self.nombre = capitalizar(self.nombre)
        self.telefono = clean_tel(self.telefono)
        super().save(*args, **kwargs)
