# apps/catalog/services/cache.py
"""
Caché de catálogo por almacén para una sesión de edición.

- `get(almacen_id)`: memoiza la lista de presentaciones (con stock del
  almacén). Hit → sin acceso al colaborador; miss → fetch y guarda.
- `invalidate(almacen_id)`: fuerza el refetch en el próximo `get`.
- Fetch concurrentes del mismo almacén se deduplican: el segundo espera el
  resultado del que está en vuelo. Los errores no se cachean.
- Sin política de expulsión (cantidad de almacenes acotada).

`fetch` y `clock` son inyectables (tests, adaptadores ORM/HTTP).
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, Dict, List, Optional

from apps.orders.ports import PresentacionCatalogo

logger = logging.getLogger(__name__)


class CatalogCache:
    def __init__(self, fetch, *, clock: Callable[[], float] = time.monotonic):
        # Acepta un CatalogService o un callable almacen_id -> [PresentacionCatalogo]
        self._fetch = getattr(fetch, "list_presentations", fetch)
        self._clock = clock
        self._lock = threading.Lock()
        self._slices: Dict[int, List[PresentacionCatalogo]] = {}
        self._indices: Dict[int, Dict[object, PresentacionCatalogo]] = {}
        self._cargado_en: Dict[int, float] = {}
        self._en_vuelo: Dict[int, Future] = {}
        self._generacion: Dict[int, int] = {}
        self.fetches = 0

    # ----------------------------
    # API pública
    # ----------------------------
    def get(self, almacen_id) -> List[PresentacionCatalogo]:
        with self._lock:
            if almacen_id in self._slices:
                logger.debug("Catálogo almacen=%s: hit", almacen_id)
                return list(self._slices[almacen_id])
            futuro = self._en_vuelo.get(almacen_id)
            propietario = futuro is None
            if propietario:
                futuro = Future()
                self._en_vuelo[almacen_id] = futuro
                generacion = self._generacion.get(almacen_id, 0)
                self.fetches += 1

        if not propietario:
            logger.debug("Catálogo almacen=%s: esperando fetch en vuelo", almacen_id)
            return list(futuro.result())

        try:
            presentaciones = list(self._fetch(almacen_id) or [])
        except Exception as exc:
            with self._lock:
                self._en_vuelo.pop(almacen_id, None)
            futuro.set_exception(exc)
            logger.warning("Catálogo almacen=%s: fetch fallido (%s)", almacen_id, exc)
            raise

        with self._lock:
            self._en_vuelo.pop(almacen_id, None)
            # Si se invalidó durante el fetch, el resultado no queda cacheado
            if self._generacion.get(almacen_id, 0) == generacion:
                self._slices[almacen_id] = presentaciones
                self._indices[almacen_id] = {p.id: p for p in presentaciones}
                self._cargado_en[almacen_id] = self._clock()
        futuro.set_result(presentaciones)
        logger.debug("Catálogo almacen=%s: %s presentaciones cargadas",
                     almacen_id, len(presentaciones))
        return list(presentaciones)

    def invalidate(self, almacen_id) -> None:
        with self._lock:
            self._slices.pop(almacen_id, None)
            self._indices.pop(almacen_id, None)
            self._cargado_en.pop(almacen_id, None)
            self._generacion[almacen_id] = self._generacion.get(almacen_id, 0) + 1
        logger.debug("Catálogo almacen=%s: invalidado", almacen_id)

    def invalidate_all(self) -> None:
        with self._lock:
            almacenes = set(self._slices) | set(self._en_vuelo)
        for almacen_id in almacenes:
            self.invalidate(almacen_id)

    def buscar(self, almacen_id, presentacion_id) -> Optional[PresentacionCatalogo]:
        """Presentación del catálogo del almacén, o None si no está."""
        presentaciones = self.get(almacen_id)
        with self._lock:
            indice = self._indices.get(almacen_id)
        if indice is None:
            # invalidado durante el fetch: se busca en la lista devuelta
            return next((p for p in presentaciones if p.id == presentacion_id), None)
        return indice.get(presentacion_id)

    def disponible(self, almacen_id, presentacion_id) -> int:
        """Stock disponible; 0 si la presentación no está en el almacén."""
        presentacion = self.buscar(almacen_id, presentacion_id)
        if presentacion is None:
            return 0
        return max(0, int(presentacion.stock_disponible or 0))

    def esta_cargado(self, almacen_id) -> bool:
        with self._lock:
            return almacen_id in self._slices

    def cargado_en(self, almacen_id) -> Optional[float]:
        with self._lock:
            return self._cargado_en.get(almacen_id)
