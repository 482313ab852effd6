from __future__ import annotations

import logging

from pms.domain.errors import NotFoundError
from pms.domain.models import Customer
from pms.services.inventory_service import require_search_text
from pms.services.record_rules import CUSTOMER_RULES

log = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, repo):
        self.repo = repo

    def list_customers(self) -> list[Customer]:
        return self.repo.list_customers()

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.repo.get_customer(int(customer_id))
        if not customer:
            raise NotFoundError("Customer not found.")
        return customer

    def add_customer(self, fields: dict) -> Customer:
        customer = self.repo.create_customer(CUSTOMER_RULES.clean(fields))
        log.info("customer_created id=%s", customer.id)
        return customer

    def update_customer(self, customer_id: int, fields: dict) -> Customer:
        updated = self.repo.update_customer(int(customer_id), CUSTOMER_RULES.clean(fields, partial=True))
        if not updated:
            raise NotFoundError("Customer not found.")
        return updated

    def delete_customer(self, customer_id: int) -> None:
        # Past sales keep customer_name, so the reference may dangle.
        if not self.repo.delete_customer(int(customer_id)):
            raise NotFoundError("Customer not found.")
        log.info("customer_deleted id=%s", customer_id)

    def search_customers(self, text: str | None) -> list[Customer]:
        term = require_search_text(text)
        return [
            c
            for c in self.repo.list_customers()
            if term in c.name.lower()
            or term in (c.email or "").lower()
            or term in c.phone.lower()
        ]
