# apps/catalog/forms/lote.py
from __future__ import annotations

from django import forms

from apps.catalog.models import Lote, Producto
from apps.orders import validators
from apps.orders.calculations import parse_decimal


class LoteForm(forms.ModelForm):
    """
    Alta/edición de Lote.

    - `peso_seco_kg` opcional; si viene, no puede superar a `peso_humedo_kg`.
    - Pesos con coma o punto decimal (se normalizan en clean_*).
    """

    peso_humedo_kg = forms.CharField(
        label="Peso húmedo (kg)",
        validators=[validators.como_validador(validators.decimal_no_negativo)],
    )
    peso_seco_kg = forms.CharField(
        label="Peso seco (kg)",
        required=False,
        validators=[validators.como_validador(validators.decimal_no_negativo)],
    )

    class Meta:
        model = Lote
        fields = [
            "producto",
            "proveedor",
            "descripcion",
            "peso_humedo_kg",
            "peso_seco_kg",
            "fecha_ingreso",
            "cantidad_disponible_kg",
        ]
        widgets = {
            "fecha_ingreso": forms.DateInput(attrs={"type": "date"}),
            "descripcion": forms.Textarea(attrs={"rows": 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["producto"].queryset = Producto.objects.filter(activo=True)
        for name, field in self.fields.items():
            base = field.widget.attrs.get("class", "").strip()
            field.widget.attrs["class"] = " ".join([base, "form-control"]).strip()

    def clean_peso_humedo_kg(self):
        valor = self.cleaned_data.get("peso_humedo_kg")
        return parse_decimal(valor, campo="peso húmedo")

    def clean_peso_seco_kg(self):
        valor = self.cleaned_data.get("peso_seco_kg")
        if valor in (None, ""):
            return None
        return parse_decimal(valor, campo="peso seco")

    def clean(self):
        cleaned = super().clean()
        for regla in validators.CRUZADAS_LOTE:
            for campo, mensaje in (regla(cleaned) or {}).items():
                self.add_error(campo, mensaje)
        return cleaned
