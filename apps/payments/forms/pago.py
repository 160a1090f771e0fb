# apps/payments/forms/pago.py
from __future__ import annotations

from django import forms

from apps.orders import validators
from apps.orders.calculations import parse_decimal
from apps.orders.forms import aplicar_bootstrap
from apps.payments.models import Pago
from apps.sales import payment_status


class PagoForm(forms.Form):
    """
    Registro de un pago sobre una venta.

    - `venta` se inyecta en __init__ para validar contra su saldo pendiente.
    - Monto: > 0, coma o punto decimal, no mayor al saldo.
    - Transferencias: referencia obligatoria.
    """

    monto = forms.CharField(
        label="Monto",
        error_messages={"required": "El monto es requerido"},
        validators=[validators.como_validador(validators.decimal_positivo)],
    )
    fecha = forms.DateField(
        label="Fecha",
        error_messages={"required": "La fecha es requerida"},
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    metodo_pago = forms.ChoiceField(
        label="Método de pago",
        choices=Pago.Metodo.choices,
        initial=Pago.Metodo.EFECTIVO,
    )
    referencia = forms.CharField(
        required=False,
        label="Referencia / N° de operación",
        help_text="Obligatoria para transferencias.",
    )

    def __init__(self, *args, venta=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.venta = venta
        self.fields["monto"].widget.attrs.update({"inputmode": "decimal"})
        if venta is not None:
            saldo = payment_status.saldo_pendiente(venta.total, venta.pagos.all())
            self.fields["monto"].help_text = f"Saldo pendiente: {saldo:.2f}"
        aplicar_bootstrap(self)

    def clean_monto(self):
        monto = parse_decimal(self.cleaned_data.get("monto"), campo="monto")
        if self.venta is not None:
            saldo = payment_status.saldo_pendiente(self.venta.total, self.venta.pagos.all())
            if monto > saldo + payment_status.epsilon():
                raise forms.ValidationError(
                    f"El monto no puede superar el saldo pendiente ({saldo:.2f}).")
        return monto

    def clean(self):
        cleaned = super().clean()
        for regla in validators.CRUZADAS_PAGO:
            for campo, mensaje in (regla(cleaned) or {}).items():
                self.add_error(campo, mensaje)
        return cleaned
