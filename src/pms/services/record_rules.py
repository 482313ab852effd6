from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from pms.domain.errors import ValidationError
from pms.services.pricing import MAX_PRICE, money


@dataclass(frozen=True)
class RecordRules:
    """Field rules shared by the create and partial-update paths of an entity."""

    entity: str
    required_text: tuple[str, ...] = ()
    optional_text: tuple[str, ...] = ()
    amounts: tuple[str, ...] = ()
    counts: tuple[str, ...] = ()
    required_dates: tuple[str, ...] = ()
    optional_dates: tuple[str, ...] = ()
    optional_refs: tuple[str, ...] = ()
    defaults: dict = field(default_factory=dict)

    @property
    def known_fields(self) -> set[str]:
        return set(
            self.required_text
            + self.optional_text
            + self.amounts
            + self.counts
            + self.required_dates
            + self.optional_dates
            + self.optional_refs
        )

    def clean(self, fields: dict, partial: bool = False) -> dict:
        errors: list[dict] = []
        data: dict = {}

        for name in sorted(set(fields) - self.known_fields):
            errors.append({"field": name, "message": "Unknown field."})

        if not partial:
            required = self.required_text + self.amounts + self.required_dates
            for name in required:
                if fields.get(name) is None:
                    errors.append({"field": name, "message": "Field required."})
            fields = {**self.defaults, **fields}

        reported = {e["field"] for e in errors}
        for name, value in fields.items():
            if name not in self.known_fields or name in reported:
                continue
            try:
                data[name] = self._clean_value(name, value)
            except ValidationError as e:
                errors.append({"field": name, "message": e.message})

        if errors:
            raise ValidationError(f"Invalid {self.entity} data.", details=errors)
        return data

    def _clean_value(self, name: str, value):
        if name in self.required_text:
            if value is None or not str(value).strip():
                raise ValidationError("Must not be blank.")
            return str(value).strip()
        if name in self.optional_text:
            if value is None:
                return None
            return str(value).strip() or None
        if name in self.amounts:
            if value is None:
                raise ValidationError("Must not be null.")
            amount = money(value)
            if amount < Decimal(0):
                raise ValidationError("Must be >= 0.")
            if amount > MAX_PRICE:
                raise ValidationError(f"Must be <= {MAX_PRICE}.")
            return amount
        if name in self.counts:
            count = _whole(value)
            if count < 0:
                raise ValidationError("Must be >= 0.")
            return count
        if name in self.required_dates or name in self.optional_dates:
            if value is None:
                if name in self.required_dates:
                    raise ValidationError("Must not be null.")
                return None
            return _iso_date(value)
        if name in self.optional_refs:
            if value is None:
                return None
            ref = _whole(value)
            if ref < 1:
                raise ValidationError("Must be a positive id.")
            return ref
        return value


def _whole(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Must be a whole number.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValidationError("Must be a whole number.")


def _iso_date(value) -> str:
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError as e:
        raise ValidationError("Must be an ISO date (YYYY-MM-DD).") from e


MEDICINE_RULES = RecordRules(
    entity="medicine",
    required_text=("name", "category", "manufacturer", "batch_number"),
    optional_text=("generic_name", "description"),
    amounts=("purchase_price", "selling_price"),
    counts=("quantity", "minimum_stock"),
    required_dates=("expiry_date",),
    optional_refs=("supplier_id",),
    defaults={"quantity": 0, "minimum_stock": 10},
)

CUSTOMER_RULES = RecordRules(
    entity="customer",
    required_text=("name", "phone"),
    optional_text=("email", "address"),
    optional_dates=("date_of_birth",),
)

SUPPLIER_RULES = RecordRules(
    entity="supplier",
    required_text=("name", "phone"),
    optional_text=("email", "address", "contact_person"),
)
