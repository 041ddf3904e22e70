from abc import ABC, abstractmethod
from decimal import Decimal


class BaseExchangeRateProvider(ABC):
    @abstractmethod
    def get_rate(self, source_currency: str, target_currency: str) -> Decimal | None:
        pass
