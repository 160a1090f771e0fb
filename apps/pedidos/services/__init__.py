# apps/pedidos/services/__init__.py
from .conversion import ResultadoConversion, convertir_pedido_a_venta
from .editor import PedidoEditor
from .pedidos import (
    actualizar_pedido,
    cambiar_estado,
    cancelar_pedido,
    confirmar_pedido,
    crear_pedido,
    eliminar_pedido,
    marcar_entregado,
)

__all__ = [
    "ResultadoConversion",
    "convertir_pedido_a_venta",
    "PedidoEditor",
    "actualizar_pedido",
    "cambiar_estado",
    "cancelar_pedido",
    "confirmar_pedido",
    "crear_pedido",
    "eliminar_pedido",
    "marcar_entregado",
]
