# ORM models live in the infrastructure layer; Django discovers them here.
from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory  # noqa: F401
