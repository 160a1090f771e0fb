# apps/payments/services/__init__.py
from .payments import OverpayNotAllowed, registrar_pago, registrar_pagos_lote, saldo_de

__all__ = ["OverpayNotAllowed", "registrar_pago", "registrar_pagos_lote", "saldo_de"]
