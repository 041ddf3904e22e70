"""
Static rate table provider.
Rates come from settings, not from any market feed.
"""

import logging
from decimal import Decimal

from django.conf import settings

from apps.exchange.domain.interfaces import BaseExchangeRateProvider

logger = logging.getLogger(__name__)


class StaticRateProvider(BaseExchangeRateProvider):
    """
    Serves rates from a fixed table of values relative to one base currency.

    The table maps currency name to units per one unit of the base currency,
    e.g. {"USD": "1.0", "EUR": "0.92"} with base USD. Any pair of listed
    currencies is served as a cross rate.
    """

    QUANTUM = Decimal("0.000001")

    def __init__(self, rates: dict | None = None):
        if rates is None:
            rates = settings.EXCHANGE_RATES
        self.rates = {name: Decimal(str(value)) for name, value in rates.items()}

    def get_rate(self, source_currency: str, target_currency: str) -> Decimal | None:
        """
        Cross rate from source to target.

        Returns:
            Rate as Decimal rounded to 6 places, or None if either currency is
            missing from the table
        """
        source_rate = self.rates.get(source_currency)
        target_rate = self.rates.get(target_currency)

        if not source_rate or not target_rate:
            logger.warning("No static rate for %s/%s", source_currency, target_currency)
            return None

        return (target_rate / source_rate).quantize(self.QUANTUM)
