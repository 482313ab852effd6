from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

from pms.domain.models import Customer, Medicine, SaleWithItems
from pms.repositories.memory_repo import MemoryRepository, StoreSnapshot

log = logging.getLogger(__name__)


class UnitOfWork(Protocol):
    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def get_medicine(self, medicine_id: int) -> Optional[Medicine]: ...
    def get_customer(self, customer_id: int) -> Optional[Customer]: ...
    def create_sale(self, header: dict, items: Iterable[dict]) -> SaleWithItems: ...


@dataclass
class RepositoryUnitOfWork:
    """Unit of Work adapter for transactional write use-cases.

    Holds the store lock from ``__enter__`` to ``__exit__`` so reads and writes made
    through it see one consistent state. If the block raises, the store is restored
    to the snapshot taken on entry.
    """

    repo: MemoryRepository
    _snapshot: Optional[StoreSnapshot] = field(default=None, init=False, repr=False)

    def __enter__(self) -> "RepositoryUnitOfWork":
        self.repo.lock.acquire()
        self._snapshot = self.repo.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None and self._snapshot is not None:
                self.repo.restore(self._snapshot)
                log.warning("uow_rolled_back error=%s", exc_type.__name__)
        finally:
            self._snapshot = None
            self.repo.lock.release()
        return None

    def get_medicine(self, medicine_id: int) -> Optional[Medicine]:
        return self.repo.get_medicine(medicine_id)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self.repo.get_customer(customer_id)

    def create_sale(self, header: dict, items: Iterable[dict]) -> SaleWithItems:
        return self.repo.create_sale(header, items)
