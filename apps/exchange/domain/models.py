"""
The Exchange value object: one conversion of an amount at a given rate.
No dependency on Django or the ORM.
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext

# Enough significant digits for any amount (20 digits) times any rate (18 digits).
PRODUCT_PRECISION = 38


@dataclass(frozen=True)
class Exchange:

    source_currency: str
    target_currency: str
    amount: Decimal
    rate: Decimal

    def __post_init__(self):
        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")
        if self.rate <= 0:
            raise ValueError(f"rate must be positive, got {self.rate}")

    @property
    def result_amount(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = PRODUCT_PRECISION
            return self.amount * self.rate
