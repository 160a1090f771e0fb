from .pago import PagoForm

__all__ = ["PagoForm"]
