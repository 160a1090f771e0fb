from .estadisticas import EstadisticasVentas, estadisticas_ventas

__all__ = ["EstadisticasVentas", "estadisticas_ventas"]
