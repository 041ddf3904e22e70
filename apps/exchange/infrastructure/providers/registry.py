"""
Provider lookup - resolves the configured rate provider class.
To plug in another rate source:
1. Implement the BaseExchangeRateProvider interface
2. Point the EXCHANGE_RATE_PROVIDER setting at its dotted path
"""

from typing import Iterable, List

from django.conf import settings
from django.utils.module_loading import import_string

from apps.exchange.application.dto import RateDTO
from apps.exchange.domain.interfaces import BaseExchangeRateProvider


def get_rate_provider() -> BaseExchangeRateProvider:
    """Instantiate the provider named by settings.EXCHANGE_RATE_PROVIDER."""
    provider_class = import_string(settings.EXCHANGE_RATE_PROVIDER)
    return provider_class()


def current_rates(
    base_currency: str,
    currency_names: Iterable[str],
    provider: BaseExchangeRateProvider | None = None,
) -> List[RateDTO]:
    """
    Rates from base_currency to each listed currency the provider can price.
    Currencies without a rate are left out.
    """
    provider = provider or get_rate_provider()

    rates = []
    for name in currency_names:
        rate = provider.get_rate(base_currency, name)
        if rate is not None:
            rates.append(RateDTO(base_currency=base_currency, target_currency=name, rate=rate))

    return rates
