"""
Serializers for the exchange bounded context.
Handles validation and transformation between API and ORM layers.
"""

from rest_framework import serializers

from apps.exchange.application.dto import ExchangeRequestDTO, HistoryFilterDTO
from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory


class CurrencySerializer(serializers.ModelSerializer):
    class Meta:
        model = Currency
        fields = ["id", "name", "symbol", "is_active", "created_at", "updated_at"]
        # New currencies always start active; PUT changes the flag.
        read_only_fields = ["id", "is_active", "created_at", "updated_at"]


class CurrencyUpdateSerializer(serializers.Serializer):
    """PUT payload. Omitted fields keep their stored value."""

    name = serializers.CharField(max_length=50, required=False)
    symbol = serializers.CharField(max_length=10, required=False)
    is_active = serializers.BooleanField(required=False)


class ExchangeHistorySerializer(serializers.ModelSerializer):
    source_currency = serializers.CharField(source="source_currency.name", read_only=True)
    target_currency = serializers.CharField(source="target_currency.name", read_only=True)

    class Meta:
        model = ExchangeHistory
        fields = [
            "id",
            "source_currency",
            "target_currency",
            "rate",
            "amount",
            "result_amount",
            "exchanged_at",
        ]
        read_only_fields = fields


class ExchangeRequestSerializer(serializers.Serializer):
    """
    POST /api/exchange/ payload.
    Only shape is checked here; currency state and positivity are checked by
    the exchange operation so every rejection is reported the same way.
    """

    source_currency = serializers.CharField(max_length=50)
    target_currency = serializers.CharField(max_length=50)
    amount = serializers.DecimalField(max_digits=20, decimal_places=6)
    rate = serializers.DecimalField(max_digits=18, decimal_places=6, required=False, allow_null=True)

    def to_dto(self) -> ExchangeRequestDTO:
        return ExchangeRequestDTO(**self.validated_data)


class HistoryFilterSerializer(serializers.Serializer):
    currency = serializers.CharField(required=False)
    source_currency = serializers.CharField(required=False)
    target_currency = serializers.CharField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get("date_from")
        date_to = attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError("date_from must be before or equal to date_to")
        return attrs

    def to_dto(self) -> HistoryFilterDTO:
        return HistoryFilterDTO(**self.validated_data)


class RateSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    target_currency = serializers.CharField()
    rate = serializers.DecimalField(max_digits=18, decimal_places=6)
