"""
Domain services - Core business logic.
Every mutation is staged on the shared unit of work and becomes durable only
when the unit of work completes.
"""

import logging
from typing import List, Optional

from apps.exchange.application.dto import HistoryFilterDTO
from apps.exchange.domain.exceptions import CurrencyNotFound
from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory
from apps.exchange.infrastructure.persistence.repositories import (
    CurrencyRepository,
    ExchangeHistoryRepository,
)

logger = logging.getLogger(__name__)


class CurrencyService:
    """
    Business operations over currencies.

    Currencies are never removed: deleting one flips its active flag, and
    adding a name that already exists reactivates the stored row instead of
    inserting a second one.
    """

    def __init__(self, context):
        self.repository = CurrencyRepository(context)

    def add(self, currency: Currency) -> None:
        """
        Add a currency, or reactivate the stored one with the same name.

        The match on name is exact and case sensitive. When a stored currency
        matches, only its active flag changes; the incoming symbol is dropped.

        Note: two concurrent calls with the same new name both miss the lookup
        and both insert.
        """
        existing = self.repository.find_by_name(currency.name)

        if existing is not None:
            if not existing.is_active:
                existing.is_active = True
                self.repository.update(existing)
                logger.debug("Reactivating currency %s (id=%s)", existing.name, existing.pk)
            return

        currency.pk = None
        currency.is_active = True
        self.repository.insert(currency)
        logger.debug("Adding currency %s", currency.name)

    def list_active(self) -> List[Currency]:
        return self.repository.list_active()

    def find_by_name(self, name: str) -> Optional[Currency]:
        return self.repository.find_by_name(name)

    def get_by_id(self, currency_id: int) -> Currency:
        currency = self.repository.get_by_id(currency_id)
        if currency is None:
            raise CurrencyNotFound(currency_id)
        return currency

    def update(
        self,
        currency_id: int,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Currency:
        """Stage changes to the given fields of an existing currency."""
        currency = self.get_by_id(currency_id)

        if name is not None:
            currency.name = name
        if symbol is not None:
            currency.symbol = symbol
        if is_active is not None:
            currency.is_active = is_active

        self.repository.update(currency)
        logger.debug("Updating currency %s (id=%s)", currency.name, currency.pk)
        return currency

    def deactivate(self, currency_id: int) -> Currency:
        """Soft delete."""
        currency = self.get_by_id(currency_id)
        currency.is_active = False
        self.repository.update(currency)
        logger.debug("Deactivating currency %s (id=%s)", currency.name, currency.pk)
        return currency


class ExchangeHistoryService:
    """Records and queries exchange history. History is append-only."""

    def __init__(self, context):
        self.repository = ExchangeHistoryRepository(context)

    def record(self, entry: ExchangeHistory) -> None:
        self.repository.insert(entry)
        logger.debug(
            "Recording exchange %s -> %s",
            entry.source_currency.name,
            entry.target_currency.name,
        )

    def query(self, history_filter: HistoryFilterDTO) -> List[ExchangeHistory]:
        return self.repository.filter(
            currency=history_filter.currency,
            source_currency=history_filter.source_currency,
            target_currency=history_filter.target_currency,
            date_from=history_filter.date_from,
            date_to=history_filter.date_to,
        )
