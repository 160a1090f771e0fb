# apps/pedidos/forms/pedido.py
from django import forms

from apps.catalog.models import Almacen
from apps.customers.models import Cliente
from apps.orders import validators
from apps.orders.calculations import parse_decimal
from apps.orders.forms import BaseDetalleFormSet, DetalleForm, aplicar_bootstrap
from apps.pedidos.models import Pedido


class PedidoForm(forms.ModelForm):
    """
    Cabecera del pedido (las líneas van en DetallePedidoFormSet).
    Mensajes de requeridos alineados con la fachada de validación.
    """
    class Meta:
        model = Pedido
        fields = ["cliente", "almacen", "fecha_entrega", "notas"]
        widgets = {
            "fecha_entrega": forms.DateInput(attrs={"type": "date"}),
            "notas": forms.Textarea(attrs={"rows": 3}),
        }
        error_messages = {
            "cliente": {"required": "El cliente es requerido"},
            "almacen": {"required": "El almacén es requerido"},
            "fecha_entrega": {"required": "La fecha de entrega es requerida"},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["cliente"].queryset = Cliente.objects.activos()
        self.fields["almacen"].queryset = Almacen.objects.all()
        self.fields["notas"].required = False
        self.fields["notas"].widget.attrs.setdefault(
            "placeholder", "Observaciones (opcional)")
        aplicar_bootstrap(self)


class DetallePedidoForm(DetalleForm):
    """Línea de pedido: el precio es estimado."""

    campo_precio = "precio_estimado"

    precio_unitario = None
    precio_estimado = forms.CharField(
        label="Precio estimado",
        error_messages={"required": "El precio es requerido"},
        validators=[validators.como_validador(validators.decimal_no_negativo)],
    )

    def clean_precio_estimado(self):
        return parse_decimal(self.cleaned_data.get("precio_estimado"))


DetallePedidoFormSet = forms.formset_factory(
    DetallePedidoForm, formset=BaseDetalleFormSet, extra=0, can_delete=True)
