from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional

from pms.domain.errors import TotalsMismatchError, ValidationError

CENT = Decimal("0.01")
TOLERANCE = Decimal("0.01")
DISCOUNT_TYPES = ("fixed", "percentage")
# stored prices are decimal(10,2)
PRICE_DIGITS = 10
MAX_PRICE = Decimal("99999999.99")


def money(value) -> Decimal:
    """Coerce ints, floats, strings or Decimals to a 2-place Decimal."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValidationError(f"Amount out of range: {value!r}") from e


@dataclass(frozen=True)
class PricedLine:
    medicine_id: int
    medicine_name: str
    quantity: int
    price: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def price_line(medicine_id: int, medicine_name: str, quantity: int, unit_price) -> PricedLine:
    price = money(unit_price)
    return PricedLine(
        medicine_id=int(medicine_id),
        medicine_name=medicine_name,
        quantity=int(quantity),
        price=price,
        total=money(price * int(quantity)),
    )


def discount_amount(subtotal: Decimal, discount_type: str, discount_value) -> Decimal:
    if discount_type not in DISCOUNT_TYPES:
        raise ValidationError(f"Discount type must be one of: {', '.join(DISCOUNT_TYPES)}.")
    value = money(discount_value)
    if value < 0:
        raise ValidationError("Discount must be >= 0.")
    if discount_type == "percentage":
        if value > 100:
            raise ValidationError("Percentage discount must be <= 100.")
        return money(subtotal * value / Decimal(100))
    return value


def compute_totals(
    line_totals: Iterable[Decimal],
    tax_rate: Decimal,
    discount_type: str = "fixed",
    discount_value=0,
) -> SaleTotals:
    """
    tax      = subtotal * tax_rate
    discount = fixed amount, or percentage of subtotal
    total    = subtotal + tax - discount, floored at 0
    """
    subtotal = money(sum((money(t) for t in line_totals), Decimal(0)))
    tax = money(subtotal * Decimal(tax_rate))
    discount = discount_amount(subtotal, discount_type, discount_value)
    total = max(money(subtotal + tax - discount), Decimal("0.00"))
    return SaleTotals(subtotal=subtotal, tax=tax, discount=discount, total=total)


def check_amount(field_name: str, submitted, computed: Decimal) -> Optional[dict]:
    if submitted is None:
        return None
    if abs(money(submitted) - computed) > TOLERANCE:
        return {"field": field_name, "message": f"expected {computed}, got {money(submitted)}"}
    return None


def verify_submitted_totals(totals: SaleTotals, submitted: dict) -> None:
    mismatches = [
        m
        for m in (
            check_amount("subtotal", submitted.get("subtotal"), totals.subtotal),
            check_amount("tax", submitted.get("tax"), totals.tax),
            check_amount("total", submitted.get("total"), totals.total),
        )
        if m
    ]
    if mismatches:
        raise TotalsMismatchError("Submitted totals do not match the computed sale totals.", details=mismatches)
