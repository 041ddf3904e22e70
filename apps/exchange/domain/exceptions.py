class ExchangeError(Exception):
    """Base class for errors raised by the exchange domain."""


class ExchangeValidationError(ExchangeError):
    """Raised when an exchange request fails validation. Nothing is written."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


class CurrencyNotFound(ExchangeError):
    """Raised when a currency lookup by id or name has no match."""

    def __init__(self, lookup):
        self.lookup = lookup
        super().__init__(f"Currency {lookup} not found")


class ImmutableRecordError(ExchangeError):
    """Raised on any attempt to change or delete an exchange history row."""


class UnitOfWorkDisposed(ExchangeError):
    """Raised when a disposed unit of work is used again."""
