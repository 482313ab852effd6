from __future__ import annotations

import logging

from pms.domain.errors import NotFoundError
from pms.domain.models import Supplier
from pms.services.record_rules import SUPPLIER_RULES

log = logging.getLogger(__name__)


class SupplierService:
    def __init__(self, repo):
        self.repo = repo

    def list_suppliers(self) -> list[Supplier]:
        return self.repo.list_suppliers()

    def get_supplier(self, supplier_id: int) -> Supplier:
        supplier = self.repo.get_supplier(int(supplier_id))
        if not supplier:
            raise NotFoundError("Supplier not found.")
        return supplier

    def add_supplier(self, fields: dict) -> Supplier:
        supplier = self.repo.create_supplier(SUPPLIER_RULES.clean(fields))
        log.info("supplier_created id=%s", supplier.id)
        return supplier

    def update_supplier(self, supplier_id: int, fields: dict) -> Supplier:
        updated = self.repo.update_supplier(int(supplier_id), SUPPLIER_RULES.clean(fields, partial=True))
        if not updated:
            raise NotFoundError("Supplier not found.")
        return updated

    def delete_supplier(self, supplier_id: int) -> None:
        """Medicines that reference the supplier are left as they are."""
        if not self.repo.delete_supplier(int(supplier_id)):
            raise NotFoundError("Supplier not found.")
        log.info("supplier_deleted id=%s", supplier_id)
