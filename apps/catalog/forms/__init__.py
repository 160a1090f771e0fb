from .lote import LoteForm

__all__ = ["LoteForm"]
