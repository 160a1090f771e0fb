from .pedido import DetallePedidoForm, DetallePedidoFormSet, PedidoForm

__all__ = ["PedidoForm", "DetallePedidoForm", "DetallePedidoFormSet"]
