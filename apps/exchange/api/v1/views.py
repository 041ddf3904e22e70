"""
ViewSets for the exchange API v1.
Every request gets its own unit of work; writes go through it and nothing
else.
"""

from django.conf import settings
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.exchange.api.permissions import IsStaffOrReadOnly
from apps.exchange.api.v1.serializers import (
    CurrencySerializer,
    CurrencyUpdateSerializer,
    ExchangeHistorySerializer,
    ExchangeRequestSerializer,
    HistoryFilterSerializer,
    RateSerializer,
)
from apps.exchange.application.operations import perform_exchange
from apps.exchange.domain.exceptions import CurrencyNotFound
from apps.exchange.infrastructure.persistence.models import Currency
from apps.exchange.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.exchange.infrastructure.providers.registry import current_rates


def parse_currency_id(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CurrencyNotFound(value)


@extend_schema(tags=['Currencies'])
class CurrencyViewSet(viewsets.ViewSet):
    """
    GET takes a currency name; PUT and DELETE take a currency id.
    """

    permission_classes = [IsStaffOrReadOnly]
    lookup_field = 'lookup'
    lookup_value_regex = '[^/]+'

    @extend_schema(responses=CurrencySerializer(many=True), description="List active currencies")
    def list(self, request):
        with UnitOfWork() as uow:
            currencies = uow.currencies.list_active()
        return Response(CurrencySerializer(currencies, many=True).data)

    @extend_schema(responses=CurrencySerializer, description="Get a currency by exact name")
    def retrieve(self, request, lookup=None):
        with UnitOfWork() as uow:
            currency = uow.currencies.find_by_name(lookup)
        if currency is None:
            raise CurrencyNotFound(lookup)
        return Response(CurrencySerializer(currency).data)

    @extend_schema(
        request=CurrencySerializer,
        responses={201: CurrencySerializer},
        description="Add a currency, or reactivate the stored one with the same name",
    )
    def create(self, request):
        serializer = CurrencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with UnitOfWork() as uow:
            uow.currencies.add(Currency(**serializer.validated_data))
            uow.complete()
            currency = uow.currencies.find_by_name(serializer.validated_data['name'])

        return Response(CurrencySerializer(currency).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CurrencyUpdateSerializer, responses=CurrencySerializer)
    def update(self, request, lookup=None):
        currency_id = parse_currency_id(lookup)
        serializer = CurrencyUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with UnitOfWork() as uow:
            currency = uow.currencies.update(currency_id, **serializer.validated_data)
            uow.complete()

        return Response(CurrencySerializer(currency).data)

    @extend_schema(responses={204: None}, description="Deactivate a currency (soft delete)")
    def destroy(self, request, lookup=None):
        currency_id = parse_currency_id(lookup)

        with UnitOfWork() as uow:
            uow.currencies.deactivate(currency_id)
            uow.complete()

        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['Exchange'])
class ExchangeViewSet(viewsets.ViewSet):

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated()]
        return [AllowAny()]

    @extend_schema(
        request=ExchangeRequestSerializer,
        responses={201: ExchangeHistorySerializer},
        description=(
            "Exchange an amount between two active currencies and record it. "
            "When no rate is supplied the configured rate table is used."
        ),
    )
    def create(self, request):
        serializer = ExchangeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with UnitOfWork() as uow:
            entry = perform_exchange(serializer.to_dto(), uow)

        return Response(ExchangeHistorySerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter("currency", OpenApiTypes.STR, description="Currency name on either side"),
            OpenApiParameter("source_currency", OpenApiTypes.STR, description="Source currency name"),
            OpenApiParameter("target_currency", OpenApiTypes.STR, description="Target currency name"),
            OpenApiParameter("date_from", OpenApiTypes.DATE, description="Start date (YYYY-MM-DD), inclusive"),
            OpenApiParameter("date_to", OpenApiTypes.DATE, description="End date (YYYY-MM-DD), inclusive"),
        ],
        responses=ExchangeHistorySerializer(many=True),
        description="Query exchange history, newest first",
    )
    @action(detail=False, methods=['get'], url_path='history')
    def history(self, request):
        filter_serializer = HistoryFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        with UnitOfWork() as uow:
            entries = uow.history.query(filter_serializer.to_dto())

        return Response(ExchangeHistorySerializer(entries, many=True).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("base", OpenApiTypes.STR, description="Base currency name (defaults to EXCHANGE_BASE_CURRENCY)"),
        ],
        responses=RateSerializer(many=True),
        description="Current rates from the base currency to every active currency",
    )
    @action(detail=False, methods=['get'], url_path='rates')
    def rates(self, request):
        base = request.query_params.get('base') or settings.EXCHANGE_BASE_CURRENCY

        with UnitOfWork() as uow:
            base_currency = uow.currencies.find_by_name(base)
            if base_currency is None or not base_currency.is_active:
                raise CurrencyNotFound(base)
            names = [currency.name for currency in uow.currencies.list_active()]

        rates = current_rates(base, names)
        return Response({
            "base_currency": base,
            "rates": RateSerializer(rates, many=True).data,
        })
