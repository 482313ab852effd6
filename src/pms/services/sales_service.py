from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional

import logging
from pms.domain.errors import (
    InsufficientStockError,
    NotFoundError,
    TotalsMismatchError,
    UnknownReferenceError,
    ValidationError,
)
from pms.domain.models import PAYMENT_METHODS, WALK_IN_CUSTOMER, Sale, SaleWithItems
from pms.repositories.contracts import SalesRepository
from pms.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork
from pms.services.pricing import check_amount, compute_totals, money, price_line, verify_submitted_totals

log = logging.getLogger("pms.sales")

DEFAULT_TAX_RATE = Decimal("0.05")
DEFAULT_RECENT_LIMIT = 10


class SalesService:
    def __init__(
        self,
        repo: SalesRepository,
        tax_rate: Decimal | float | str = DEFAULT_TAX_RATE,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.repo = repo
        self.tax_rate = Decimal(str(tax_rate))
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    def create_sale(
        self,
        items: Iterable[dict],
        payment_method: str = "cash",
        customer_id: Optional[int] = None,
        customer_name: Optional[str] = None,
        discount_type: str = "fixed",
        discount_value=0,
        submitted_totals: Optional[dict] = None,
    ) -> SaleWithItems:
        """
        items: [{medicine_id, quantity, price?, medicine_name?, total?}]

        Totals are computed here; any subtotal/tax/total sent by the client is only
        compared against them. Nothing is written unless every line is valid.
        """
        items = list(items)
        if not items:
            raise ValidationError("Cart is empty.")
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}.")
        for idx, it in enumerate(items):
            if int(it["quantity"]) <= 0:
                raise ValidationError("Qty must be >= 1.", details=[{"field": f"items[{idx}].quantity", "message": "Must be >= 1."}])
            if it.get("price") is not None and money(it["price"]) < 0:
                raise ValidationError("Unit price must be >= 0.", details=[{"field": f"items[{idx}].price", "message": "Must be >= 0."}])

        with self.uow_factory() as uow:
            name = self._resolve_customer_name(uow, customer_id, customer_name)

            qty_by_medicine: Counter[int] = Counter()
            lines = []
            for idx, it in enumerate(items):
                medicine_id = int(it["medicine_id"])
                medicine = uow.get_medicine(medicine_id)
                if not medicine:
                    raise UnknownReferenceError(
                        f"Medicine {medicine_id} not found.",
                        details=[{"field": f"items[{idx}].medicineId", "message": "Unknown medicine."}],
                    )

                qty_by_medicine[medicine_id] += int(it["quantity"])
                if qty_by_medicine[medicine_id] > int(medicine.quantity):
                    raise InsufficientStockError(f"Not enough stock for {medicine.name}. Available: {medicine.quantity}")

                unit_price = it.get("price")
                line = price_line(
                    medicine_id,
                    (it.get("medicine_name") or "").strip() or medicine.name,
                    int(it["quantity"]),
                    medicine.selling_price if unit_price is None else unit_price,
                )
                mismatch = check_amount(f"items[{idx}].total", it.get("total"), line.total)
                if mismatch:
                    raise TotalsMismatchError("Line total does not match price x quantity.", details=[mismatch])
                lines.append(line)

            totals = compute_totals((line.total for line in lines), self.tax_rate, discount_type, discount_value)
            verify_submitted_totals(totals, submitted_totals or {})

            sale = uow.create_sale(
                {
                    "customer_id": customer_id,
                    "customer_name": name,
                    "subtotal": totals.subtotal,
                    "tax": totals.tax,
                    "total": totals.total,
                    "payment_method": payment_method,
                },
                [line.as_dict() for line in lines],
            )

        log.info(
            "sale_created sale_id=%s items=%s total=%s discount=%s customer=%s",
            sale.id, len(sale.items), sale.total, totals.discount, name,
        )
        return sale

    def _resolve_customer_name(self, uow: UnitOfWork, customer_id: Optional[int], customer_name: Optional[str]) -> str:
        name = (customer_name or "").strip()
        if customer_id is None:
            return name or WALK_IN_CUSTOMER
        customer = uow.get_customer(int(customer_id))
        if not customer:
            raise UnknownReferenceError(
                f"Customer {customer_id} not found.",
                details=[{"field": "customerId", "message": "Unknown customer."}],
            )
        return name or customer.name

    def list_sales(self) -> list[Sale]:
        return self.repo.list_sales()

    def get_sale(self, sale_id: int) -> SaleWithItems:
        sale = self.repo.get_sale(int(sale_id))
        if not sale:
            raise NotFoundError("Sale not found.")
        return sale

    def recent_sales(self, limit=DEFAULT_RECENT_LIMIT) -> list[Sale]:
        """Newest first. A missing, unparsable or non-positive limit means the default."""
        try:
            count = int(limit)
        except (TypeError, ValueError):
            count = DEFAULT_RECENT_LIMIT
        if count < 1:
            count = DEFAULT_RECENT_LIMIT
        ordered = sorted(self.repo.list_sales(), key=lambda s: (s.created_at, s.id), reverse=True)
        return ordered[:count]

    def sales_between(self, start: datetime, end: datetime) -> list[Sale]:
        """Sales with ``start <= created_at < end``."""
        return [s for s in self.repo.list_sales() if start <= s.created_at < end]

    def sales_on(self, day: date) -> list[Sale]:
        start = datetime.combine(day, time.min)
        return self.sales_between(start, start + timedelta(days=1))
