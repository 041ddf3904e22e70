"""
Django ORM models for persistence.
Infrastructure layer: technical storage detail.
"""

from django.db import models
from django.utils import timezone

from apps.exchange.domain.exceptions import ImmutableRecordError
from apps.exchange.infrastructure.persistence.fields import ExactDecimalField


class BaseModel(models.Model):

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Currency(BaseModel):

    # Unique by convention only, see DESIGN.md.
    name = models.CharField(max_length=50, db_index=True)
    symbol = models.CharField(max_length=10)
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive currencies are hidden from listings and rejected by exchanges.",
    )

    class Meta:
        verbose_name_plural = "currencies"

    def __str__(self):
        return f"{self.name} ({self.symbol})"


class ExchangeHistory(models.Model):
    """Audit record of one completed exchange. Written once, never changed."""

    source_currency = models.ForeignKey(
        Currency,
        related_name="source_exchanges",
        on_delete=models.PROTECT,
    )
    target_currency = models.ForeignKey(
        Currency,
        related_name="target_exchanges",
        on_delete=models.PROTECT,
    )
    rate = ExactDecimalField(max_digits=18, decimal_places=6)
    amount = ExactDecimalField(max_digits=20, decimal_places=6)
    result_amount = ExactDecimalField(max_digits=38, decimal_places=12)
    exchanged_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name_plural = "exchange history"
        ordering = ["-exchanged_at", "-id"]

    def __str__(self):
        return (
            f"{self.amount} {self.source_currency.name} -> "
            f"{self.result_amount} {self.target_currency.name} @ {self.rate}"
        )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(f"Exchange history #{self.pk} cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f"Exchange history #{self.pk} cannot be deleted")
