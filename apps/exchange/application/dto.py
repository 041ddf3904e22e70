"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class ExchangeRequestDTO:
    """Request DTO for an exchange. Rate is optional: the rate provider fills it in."""
    source_currency: str
    target_currency: str
    amount: Decimal
    rate: Optional[Decimal] = None


@dataclass
class HistoryFilterDTO:
    """Filter for exchange history queries. Unset fields do not filter."""
    currency: Optional[str] = None
    source_currency: Optional[str] = None
    target_currency: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


@dataclass
class RateDTO:
    """Current rate from a base currency to one target."""
    base_currency: str
    target_currency: str
    rate: Decimal
