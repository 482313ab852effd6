from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from pms.domain.errors import InsufficientStockError, UnknownReferenceError
from pms.domain.models import Customer, Medicine, Sale, SaleItem, SaleWithItems, Supplier

_TABLES = ("medicines", "customers", "suppliers", "sales", "sale_items")
_IMMUTABLE_FIELDS = ("id", "created_at", "sale_id")


@dataclass(frozen=True)
class StoreSnapshot:
    tables: dict[str, dict[int, object]]
    next_ids: dict[str, int]


class MemoryRepository:
    """Process-local store for every entity collection.

    Records are frozen dataclasses; updates swap in a new record under the same id.
    Every public method takes ``lock`` so the store can be shared by the API worker threads.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or datetime.now
        self.lock = threading.RLock()
        self._tables: dict[str, dict[int, object]] = {name: {} for name in _TABLES}
        self._next_ids: dict[str, int] = {name: 1 for name in _TABLES}

    # ---------- Generic helpers ----------
    def _insert(self, table: str, factory, fields: dict, *, stamp: bool = True):
        with self.lock:
            new_id = self._next_ids[table]
            extra = {"created_at": self.clock()} if stamp else {}
            record = factory(id=new_id, **extra, **fields)
            self._tables[table][new_id] = record
            self._next_ids[table] = new_id + 1
            return record

    def _get(self, table: str, record_id: int):
        with self.lock:
            return self._tables[table].get(int(record_id))

    def _list(self, table: str) -> list:
        with self.lock:
            return list(self._tables[table].values())

    def _update(self, table: str, record_id: int, fields: dict):
        with self.lock:
            existing = self._tables[table].get(int(record_id))
            if existing is None:
                return None
            changes = {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}
            updated = replace(existing, **changes)
            self._tables[table][int(record_id)] = updated
            return updated

    def _delete(self, table: str, record_id: int) -> bool:
        with self.lock:
            return self._tables[table].pop(int(record_id), None) is not None

    # ---------- Snapshots ----------
    def snapshot(self) -> StoreSnapshot:
        with self.lock:
            return StoreSnapshot(
                tables={name: dict(rows) for name, rows in self._tables.items()},
                next_ids=dict(self._next_ids),
            )

    def restore(self, snapshot: StoreSnapshot) -> None:
        with self.lock:
            for name, rows in snapshot.tables.items():
                self._tables[name].clear()
                self._tables[name].update(rows)
            self._next_ids.update(snapshot.next_ids)

    def peek_next_id(self, table: str) -> int:
        with self.lock:
            return self._next_ids[table]

    # ---------- Medicines ----------
    def create_medicine(self, fields: dict) -> Medicine:
        return self._insert("medicines", Medicine, fields)

    def get_medicine(self, medicine_id: int) -> Optional[Medicine]:
        return self._get("medicines", medicine_id)

    def list_medicines(self) -> list[Medicine]:
        return self._list("medicines")

    def update_medicine(self, medicine_id: int, fields: dict) -> Optional[Medicine]:
        return self._update("medicines", medicine_id, fields)

    def delete_medicine(self, medicine_id: int) -> bool:
        return self._delete("medicines", medicine_id)

    # ---------- Customers ----------
    def create_customer(self, fields: dict) -> Customer:
        return self._insert("customers", Customer, fields)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self._get("customers", customer_id)

    def list_customers(self) -> list[Customer]:
        return self._list("customers")

    def update_customer(self, customer_id: int, fields: dict) -> Optional[Customer]:
        return self._update("customers", customer_id, fields)

    def delete_customer(self, customer_id: int) -> bool:
        return self._delete("customers", customer_id)

    # ---------- Suppliers ----------
    def create_supplier(self, fields: dict) -> Supplier:
        return self._insert("suppliers", Supplier, fields)

    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        return self._get("suppliers", supplier_id)

    def list_suppliers(self) -> list[Supplier]:
        return self._list("suppliers")

    def update_supplier(self, supplier_id: int, fields: dict) -> Optional[Supplier]:
        return self._update("suppliers", supplier_id, fields)

    def delete_supplier(self, supplier_id: int) -> bool:
        return self._delete("suppliers", supplier_id)

    # ---------- Sales ----------
    def create_sale(self, header: dict, items: Iterable[dict]) -> SaleWithItems:
        """
        header: {customer_id, customer_name, subtotal, tax, total, payment_method}
        items:  [{medicine_id, medicine_name, quantity, price, total}]

        Stock is checked for every line before anything is written.
        """
        items = list(items)
        with self.lock:
            qty_by_medicine: Counter[int] = Counter()
            for it in items:
                qty_by_medicine[int(it["medicine_id"])] += int(it["quantity"])
            for medicine_id, qty in qty_by_medicine.items():
                medicine = self.get_medicine(medicine_id)
                if medicine is None:
                    raise UnknownReferenceError(f"Medicine {medicine_id} not found.")
                if qty > medicine.quantity:
                    raise InsufficientStockError(
                        f"Not enough stock for {medicine.name}. Available: {medicine.quantity}"
                    )

            sale = self._insert("sales", Sale, header)
            lines: list[SaleItem] = []
            for it in items:
                line = self._insert("sale_items", SaleItem, {**it, "sale_id": sale.id}, stamp=False)
                lines.append(line)

                medicine = self.get_medicine(line.medicine_id)
                self._update("medicines", medicine.id, {"quantity": medicine.quantity - line.quantity})

            return SaleWithItems.compose(sale, lines)

    def list_sales(self) -> list[Sale]:
        return self._list("sales")

    def get_sale_header(self, sale_id: int) -> Optional[Sale]:
        return self._get("sales", sale_id)

    def sale_items_for_sale(self, sale_id: int) -> list[SaleItem]:
        with self.lock:
            return [it for it in self._tables["sale_items"].values() if it.sale_id == int(sale_id)]

    def get_sale(self, sale_id: int) -> Optional[SaleWithItems]:
        with self.lock:
            sale = self.get_sale_header(sale_id)
            if sale is None:
                return None
            return SaleWithItems.compose(sale, self.sale_items_for_sale(sale.id))

    # ---------- Sample data ----------
    def seed_sample_data(self) -> None:
        with self.lock:
            pharmacorp = self.create_supplier({
                "name": "PharmaCorp Ltd",
                "email": "info@pharmacorp.com",
                "phone": "+1-555-0101",
                "address": "123 Medical Drive, Health City, HC 12345",
                "contact_person": "Dr. Sarah Wilson",
            })
            medisupply = self.create_supplier({
                "name": "MediSupply Inc",
                "email": "orders@medisupply.com",
                "phone": "+1-555-0102",
                "address": "456 Pharma Street, Medicine Town, MT 67890",
                "contact_person": "James Chen",
            })

            self.create_medicine({
                "name": "Paracetamol 500mg",
                "generic_name": "Acetaminophen",
                "category": "Pain Relief",
                "manufacturer": "Generic Pharma",
                "batch_number": "PC2024001",
                "expiry_date": "2025-12-31",
                "quantity": 8,
                "purchase_price": Decimal("1.50"),
                "selling_price": Decimal("2.50"),
                "minimum_stock": 50,
                "supplier_id": pharmacorp.id,
                "description": "Pain relief and fever reducer",
            })
            self.create_medicine({
                "name": "Ibuprofen 400mg",
                "generic_name": "Ibuprofen",
                "category": "Pain Relief",
                "manufacturer": "MediCorp",
                "batch_number": "IB2024002",
                "expiry_date": "2025-08-15",
                "quantity": 15,
                "purchase_price": Decimal("2.00"),
                "selling_price": Decimal("3.25"),
                "minimum_stock": 30,
                "supplier_id": medisupply.id,
                "description": "Anti-inflammatory pain reliever",
            })

            self.create_customer({
                "name": "Sarah Johnson",
                "email": "sarah.johnson@email.com",
                "phone": "+1-555-0201",
                "address": "789 Oak Street, Anytown, AT 54321",
                "date_of_birth": "1985-03-15",
            })
