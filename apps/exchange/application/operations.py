"""
Application operations that span both services of a unit of work.
"""

import logging
from decimal import Decimal

from apps.exchange.application.dto import ExchangeRequestDTO
from apps.exchange.domain.exceptions import ExchangeValidationError
from apps.exchange.domain.interfaces import BaseExchangeRateProvider
from apps.exchange.domain.models import Exchange
from apps.exchange.infrastructure.persistence.models import ExchangeHistory
from apps.exchange.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.exchange.infrastructure.providers.registry import get_rate_provider

logger = logging.getLogger(__name__)


def perform_exchange(
    request: ExchangeRequestDTO,
    uow: UnitOfWork,
    provider: BaseExchangeRateProvider | None = None,
) -> ExchangeHistory:
    """
    Validate an exchange, compute its result and record it.

    Steps:
    1. Both currencies must exist and be active
    2. Amount must be positive
    3. Rate is the one supplied, or the provider's rate when none is given,
       and must be positive
    4. Stage one history row and complete the unit of work

    Args:
        request: Source and target currency names, amount and optional rate
        uow: Open unit of work; completed by this call
        provider: Rate source used when the request carries no rate

    Returns:
        The persisted ExchangeHistory row

    Raises:
        ExchangeValidationError: any check failed; nothing was staged
        django.db.DatabaseError: the commit failed; nothing was written
    """
    errors = {}

    source = uow.currencies.find_by_name(request.source_currency)
    if source is None:
        errors["source_currency"] = f"Currency {request.source_currency} not found"
    elif not source.is_active:
        errors["source_currency"] = f"Currency {request.source_currency} is inactive"

    target = uow.currencies.find_by_name(request.target_currency)
    if target is None:
        errors["target_currency"] = f"Currency {request.target_currency} not found"
    elif not target.is_active:
        errors["target_currency"] = f"Currency {request.target_currency} is inactive"

    if request.amount is None or request.amount <= 0:
        errors["amount"] = "Amount must be positive"

    rate = request.rate
    if rate is None and "source_currency" not in errors and "target_currency" not in errors:
        provider = provider or get_rate_provider()
        rate = provider.get_rate(request.source_currency, request.target_currency)
        if rate is None:
            errors["rate"] = (
                f"No rate available for {request.source_currency}/{request.target_currency}"
            )
    elif rate is not None and rate <= 0:
        errors["rate"] = "Rate must be positive"

    if errors:
        logger.warning(
            "Rejected exchange %s -> %s: %s",
            request.source_currency,
            request.target_currency,
            errors,
        )
        raise ExchangeValidationError(errors)

    exchange = Exchange(
        source_currency=source.name,
        target_currency=target.name,
        amount=Decimal(request.amount),
        rate=Decimal(rate),
    )

    entry = ExchangeHistory(
        source_currency=source,
        target_currency=target,
        rate=exchange.rate,
        amount=exchange.amount,
        result_amount=exchange.result_amount,
    )
    uow.history.record(entry)
    uow.complete()

    logger.info(
        "Exchanged %s %s -> %s %s at %s",
        exchange.amount,
        exchange.source_currency,
        exchange.result_amount,
        exchange.target_currency,
        exchange.rate,
    )
    return entry
