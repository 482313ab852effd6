import sys
from datetime import datetime, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FixedClock:
    def __init__(self, now: datetime = datetime(2026, 10, 18, 10, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def medicine_fields(**overrides) -> dict:
    fields = {
        "name": "Paracetamol 500mg",
        "generic_name": "Acetaminophen",
        "category": "Pain Relief",
        "manufacturer": "Generic Pharma",
        "batch_number": "PC2024001",
        "expiry_date": "2027-12-31",
        "quantity": 8,
        "purchase_price": "1.50",
        "selling_price": "2.50",
        "minimum_stock": 50,
    }
    fields.update(overrides)
    return fields
