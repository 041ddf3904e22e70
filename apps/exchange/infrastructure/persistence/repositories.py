"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.

Repositories are bound to a unit of work: reads go straight to the database
the unit of work points at, writes are staged on it and only reach the
database when the unit of work completes.
"""

from datetime import date
from typing import List, Optional

from django.db.models import Q

from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory


class CurrencyRepository:
    """Repository for Currency aggregate."""

    def __init__(self, context):
        self.context = context

    @property
    def _objects(self):
        return Currency.objects.using(self.context.using)

    def list_active(self) -> List[Currency]:
        """Get all active currencies."""
        return list(self._objects.filter(is_active=True))

    def find_by_name(self, name: str) -> Optional[Currency]:
        """Get the first currency with exactly this name."""
        return self._objects.filter(name=name).order_by("id").first()

    def get_by_id(self, currency_id: int) -> Optional[Currency]:
        """Get currency by id."""
        return self._objects.filter(pk=currency_id).first()

    def insert(self, currency: Currency) -> None:
        self.context.stage(currency)

    def update(self, currency: Currency) -> None:
        self.context.stage(currency)


class ExchangeHistoryRepository:
    """Repository for ExchangeHistory aggregate. Insert only."""

    def __init__(self, context):
        self.context = context

    def insert(self, entry: ExchangeHistory) -> None:
        self.context.stage(entry)

    def filter(
        self,
        currency: Optional[str] = None,
        source_currency: Optional[str] = None,
        target_currency: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[ExchangeHistory]:
        """Get history rows matching every supplied criterion, newest first."""
        queryset = ExchangeHistory.objects.using(self.context.using).select_related(
            "source_currency",
            "target_currency",
        )

        if currency:
            queryset = queryset.filter(
                Q(source_currency__name=currency) | Q(target_currency__name=currency)
            )
        if source_currency:
            queryset = queryset.filter(source_currency__name=source_currency)
        if target_currency:
            queryset = queryset.filter(target_currency__name=target_currency)
        if date_from:
            queryset = queryset.filter(exchanged_at__date__gte=date_from)
        if date_to:
            queryset = queryset.filter(exchanged_at__date__lte=date_to)

        return list(queryset)
