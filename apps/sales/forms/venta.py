# apps/sales/forms/venta.py
from django import forms

from apps.catalog.models import Almacen
from apps.customers.models import Cliente
from apps.sales.models import Venta
from apps.orders.forms import aplicar_bootstrap


class VentaForm(forms.ModelForm):
    """
    Cabecera de la venta (las líneas van en apps.orders.forms.DetalleFormSet).
    - fecha_vencimiento solo aplica a ventas a crédito.
    """
    class Meta:
        model = Venta
        fields = ["cliente", "almacen", "fecha", "tipo_pago", "fecha_vencimiento", "notas"]
        widgets = {
            "fecha": forms.DateInput(attrs={"type": "date"}),
            "fecha_vencimiento": forms.DateInput(attrs={"type": "date"}),
            "notas": forms.Textarea(attrs={"rows": 3}),
        }
        error_messages = {
            "cliente": {"required": "El cliente es requerido"},
            "almacen": {"required": "El almacén es requerido"},
            "fecha": {"required": "La fecha es requerida"},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["cliente"].queryset = Cliente.objects.activos()
        self.fields["almacen"].queryset = Almacen.objects.all()
        self.fields["notas"].required = False
        aplicar_bootstrap(self)

    def clean(self):
        cleaned = super().clean()
        tipo_pago = cleaned.get("tipo_pago")
        fecha = cleaned.get("fecha")
        vencimiento = cleaned.get("fecha_vencimiento")

        if tipo_pago != Venta.TipoPago.CREDITO and vencimiento:
            self.add_error("fecha_vencimiento", "Solo las ventas a crédito tienen vencimiento.")
        if fecha and vencimiento and vencimiento < fecha:
            self.add_error("fecha_vencimiento", "El vencimiento no puede ser anterior a la fecha de venta.")
        return cleaned
