# apps/customers/selectors.py
from decimal import Decimal

from .models import Cliente


def clientes_qs(q: str | None = None, estado: str = "activos"):
    """
    Devuelve queryset de clientes filtrado por búsqueda + estado.
    """
    qs = Cliente.objects.all()
    if estado == "activos":
        qs = qs.activos()
    elif estado == "inactivos":
        qs = qs.filter(activo=False)
    return qs.buscar(q)


def saldo_pendiente(cliente_id: int) -> Decimal:
    """
    Deuda del cliente: Σ saldo pendiente de sus ventas no pagadas.
    Se calcula desde líneas y pagos (no hay saldo almacenado).
    """
    from apps.sales.models import Venta
    from apps.sales.payment_status import saldo_pendiente as saldo_venta

    ventas = (
        Venta.objects
        .filter(cliente_id=cliente_id)
        .exclude(estado_pago=Venta.EstadoPago.PAGADO)
        .prefetch_related("detalles", "pagos")
    )
    return sum((saldo_venta(v.total, v.pagos.all()) for v in ventas), Decimal("0"))
