from __future__ import annotations

from typing import Iterable, Optional, Protocol

from pms.domain.models import Customer, Medicine, Sale, SaleItem, SaleWithItems


class MedicineRepository(Protocol):
    def get_medicine(self, medicine_id: int) -> Optional[Medicine]: ...
    def list_medicines(self) -> list[Medicine]: ...


class SalesRepository(MedicineRepository, Protocol):
    def get_customer(self, customer_id: int) -> Optional[Customer]: ...
    def list_customers(self) -> list[Customer]: ...
    def create_sale(self, header: dict, items: Iterable[dict]) -> SaleWithItems: ...
    def list_sales(self) -> list[Sale]: ...
    def get_sale(self, sale_id: int) -> Optional[SaleWithItems]: ...
    def sale_items_for_sale(self, sale_id: int) -> list[SaleItem]: ...
