from __future__ import annotations

import logging

from pms.domain.errors import NotFoundError, ValidationError
from pms.domain.models import Medicine
from pms.services.record_rules import MEDICINE_RULES

log = logging.getLogger("pms.inventory")

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
IN_STOCK = "in_stock"


def is_low_stock(medicine: Medicine) -> bool:
    return int(medicine.quantity) <= int(medicine.minimum_stock)


def stock_status(medicine: Medicine) -> str:
    if int(medicine.quantity) == 0:
        return OUT_OF_STOCK
    if is_low_stock(medicine):
        return LOW_STOCK
    return IN_STOCK


def require_search_text(text: str | None) -> str:
    term = (text or "").strip().lower()
    if not term:
        raise ValidationError("Search query is required.")
    return term


class InventoryService:
    def __init__(self, repo):
        self.repo = repo

    def list_medicines(self) -> list[Medicine]:
        return self.repo.list_medicines()

    def get_medicine(self, medicine_id: int) -> Medicine:
        medicine = self.repo.get_medicine(int(medicine_id))
        if not medicine:
            raise NotFoundError("Medicine not found.")
        return medicine

    def add_medicine(self, fields: dict) -> Medicine:
        data = MEDICINE_RULES.clean(fields)
        medicine = self.repo.create_medicine(data)
        log.info("medicine_created id=%s name=%s qty=%s", medicine.id, medicine.name, medicine.quantity)
        return medicine

    def update_medicine(self, medicine_id: int, fields: dict) -> Medicine:
        data = MEDICINE_RULES.clean(fields, partial=True)
        updated = self.repo.update_medicine(int(medicine_id), data)
        if not updated:
            raise NotFoundError("Medicine not found.")
        log.info("medicine_updated id=%s fields=%s", medicine_id, ",".join(sorted(data)))
        return updated

    def delete_medicine(self, medicine_id: int) -> None:
        if not self.repo.delete_medicine(int(medicine_id)):
            raise NotFoundError("Medicine not found.")
        log.info("medicine_deleted id=%s", medicine_id)

    def search_medicines(self, text: str | None) -> list[Medicine]:
        term = require_search_text(text)
        return [
            m
            for m in self.repo.list_medicines()
            if term in m.name.lower()
            or term in (m.generic_name or "").lower()
            or term in m.category.lower()
            or term in m.manufacturer.lower()
        ]

    def low_stock_medicines(self) -> list[Medicine]:
        return [m for m in self.repo.list_medicines() if is_low_stock(m)]

    def top_critical_stock(self, limit: int = 10) -> list[Medicine]:
        ranked = sorted(self.repo.list_medicines(), key=lambda m: (m.quantity - m.minimum_stock, m.name))
        return ranked[: int(limit)]
