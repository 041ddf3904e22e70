"""
Unit of work: one commit boundary shared by the currency and history services.

Usage:
    with UnitOfWork() as uow:
        uow.currencies.add(currency)
        uow.history.record(entry)
        uow.complete()

Leaving the block disposes the unit of work; anything staged but not
completed is discarded.
"""

import logging

from django.db import DEFAULT_DB_ALIAS, transaction

from apps.exchange.domain.exceptions import UnitOfWorkDisposed
from apps.exchange.domain.services import CurrencyService, ExchangeHistoryService

logger = logging.getLogger(__name__)


class UnitOfWork:

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self._staged = []
        self._disposed = False
        self.currencies = CurrencyService(self)
        self.history = ExchangeHistoryService(self)

    def __enter__(self):
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False

    @property
    def pending(self) -> int:
        return len(self._staged)

    def stage(self, instance) -> None:
        """Track a model instance to be written on complete()."""
        self._check_open()
        if not any(staged is instance for staged in self._staged):
            self._staged.append(instance)

    def complete(self) -> int:
        """
        Write every staged instance in one transaction.

        Returns:
            Number of rows written.

        Raises:
            django.db.DatabaseError: the transaction failed and was rolled
            back. Staged instances stay staged.
        """
        self._check_open()
        if not self._staged:
            return 0

        # Remember which rows were new so a rollback can make them new again.
        inserts = [instance for instance in self._staged if instance._state.adding]

        try:
            with transaction.atomic(using=self.using):
                for instance in self._staged:
                    instance.save(using=self.using)
        except Exception:
            for instance in inserts:
                instance.pk = None
                instance._state.adding = True
            logger.exception("Commit of %d staged change(s) failed, rolled back", len(self._staged))
            raise

        written = len(self._staged)
        self._staged.clear()
        logger.info("Committed %d change(s)", written)
        return written

    def dispose(self) -> None:
        self._check_open()
        if self._staged:
            logger.debug("Discarding %d uncommitted change(s)", len(self._staged))
        self._staged.clear()
        self._disposed = True

    def _check_open(self) -> None:
        if self._disposed:
            raise UnitOfWorkDisposed("Unit of work has already been disposed")
