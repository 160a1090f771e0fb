# apps/orders/forms.py
"""
Piezas de formulario compartidas por pedidos y ventas.

Los campos numéricos se validan con las mismas reglas puras de
`apps.orders.validators` (fachada de validación) y se normalizan a
int/Decimal en los clean_*.
"""

from __future__ import annotations

from django import forms

from apps.orders import validators
from apps.orders.calculations import parse_cantidad, parse_decimal
from apps.orders.exceptions import InvalidQuantity
from apps.orders.lines import CAMPO_PRECIO, LineSet


def aplicar_bootstrap(form: forms.BaseForm) -> None:
    """Clases Bootstrap en widgets y `is-invalid` en campos con error."""
    for name, field in form.fields.items():
        widget = field.widget
        css = "form-select" if isinstance(widget, forms.Select) else "form-control"
        base = widget.attrs.get("class", "").strip()
        if css not in base.split():
            widget.attrs["class"] = " ".join([base, css]).strip()
        if form.is_bound and form.errors.get(name):
            widget.attrs["class"] = f"{widget.attrs['class']} is-invalid"


class DetalleForm(forms.Form):
    """Línea de venta: presentación, cantidad (entero > 0) y precio unitario."""

    campo_precio = CAMPO_PRECIO

    presentacion_id = forms.IntegerField(
        label="Presentación",
        error_messages={"required": "La presentación es requerida"},
    )
    cantidad = forms.CharField(
        label="Cantidad",
        error_messages={"required": "La cantidad es requerida"},
        validators=[validators.como_validador(validators.entero_positivo)],
    )
    precio_unitario = forms.CharField(
        label="Precio unitario",
        error_messages={"required": "El precio es requerido"},
        validators=[validators.como_validador(validators.decimal_no_negativo)],
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["cantidad"].widget.attrs.update({"min": 1, "inputmode": "numeric"})
        self.fields[self.campo_precio].widget.attrs.update({"inputmode": "decimal"})
        aplicar_bootstrap(self)

    def clean_cantidad(self):
        return parse_cantidad(self.cleaned_data.get("cantidad"))

    def clean_precio_unitario(self):
        return parse_decimal(self.cleaned_data.get("precio_unitario"))


class BaseDetalleFormSet(forms.BaseFormSet):
    """
    Conjunto de líneas: exige al menos una y expone el LineSet resultante
    (presentaciones repetidas se suman).
    """

    def clean(self):
        super().clean()
        if any(self.errors):
            return
        filas = [
            f for f in self.forms
            if f.cleaned_data and not f.cleaned_data.get("DELETE", False)
        ]
        if not filas:
            raise forms.ValidationError("Debe agregar al menos un producto")

    def lineas(self) -> LineSet:
        campo = self.form.campo_precio
        conjunto = LineSet()
        for f in self.forms:
            datos = f.cleaned_data
            if not datos or datos.get("DELETE", False):
                continue
            try:
                conjunto.agregar(datos["presentacion_id"], datos["cantidad"], datos[campo])
            except InvalidQuantity as exc:
                raise forms.ValidationError(str(exc))
        return conjunto


DetalleFormSet = forms.formset_factory(
    DetalleForm, formset=BaseDetalleFormSet, extra=0, can_delete=True)
