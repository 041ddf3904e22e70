import pytest
from decimal import Decimal, localcontext
from datetime import datetime, timezone
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from rest_framework.test import APIClient
from rest_framework import status

from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def user_client(db):
    """Client authenticated as a regular user."""
    user = get_user_model().objects.create_user(username="trader", password="secret-pass-123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def staff_client(db):
    """Client authenticated as a staff user."""
    user = get_user_model().objects.create_user(
        username="admin",
        password="secret-pass-123",
        is_staff=True,
    )
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def currencies(db):
    """Create test currencies."""
    Currency.objects.all().delete()
    usd = Currency.objects.create(name="USD", symbol="$")
    eur = Currency.objects.create(name="EUR", symbol="€")
    gbp = Currency.objects.create(name="GBP", symbol="£")
    return {"USD": usd, "EUR": eur, "GBP": gbp}


@pytest.mark.django_db(transaction=True)
class TestCurrencyViewSet:
    """Tests for CurrencyViewSet endpoints."""

    def test_list_currencies(self, api_client, currencies):
        """
        Test GET /api/currencies/ lists active currencies only.
        """
        Currency.objects.filter(name="GBP").update(is_active=False)

        response = api_client.get("/api/currencies/")

        assert response.status_code == status.HTTP_200_OK
        assert sorted(c["name"] for c in response.data) == ["EUR", "USD"]

    def test_retrieve_currency_by_name(self, api_client, currencies):
        """
        Test GET /api/currencies/{name}/ retrieves a single currency.
        """
        response = api_client.get("/api/currencies/USD/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == currencies["USD"].pk
        assert response.data["symbol"] == "$"

    def test_retrieve_currency_not_found(self, api_client, currencies):
        response = api_client.get("/api/currencies/XXX/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "XXX" in response.data["error"]

    def test_create_currency(self, staff_client, currencies):
        """
        Test POST /api/currencies/ creates a new currency.
        """
        response = staff_client.post("/api/currencies/", {"name": "CHF", "symbol": "CHF"})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["name"] == "CHF"
        assert response.data["is_active"] is True
        assert Currency.objects.filter(name="CHF").count() == 1

    def test_create_currency_starts_active(self, staff_client, currencies):
        response = staff_client.post(
            "/api/currencies/", {"name": "JPY", "symbol": "Y", "is_active": False}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["is_active"] is True
        assert Currency.objects.get(name="JPY").is_active is True

    def test_create_existing_inactive_currency_reactivates(self, staff_client, currencies):
        Currency.objects.filter(name="GBP").update(is_active=False)

        response = staff_client.post("/api/currencies/", {"name": "GBP", "symbol": "GB£"})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["id"] == currencies["GBP"].pk
        assert response.data["is_active"] is True
        assert response.data["symbol"] == "£"
        assert Currency.objects.filter(name="GBP").count() == 1

    def test_create_requires_staff(self, api_client, user_client, currencies):
        data = {"name": "CHF", "symbol": "CHF"}

        assert api_client.post("/api/currencies/", data).status_code == status.HTTP_401_UNAUTHORIZED
        assert user_client.post("/api/currencies/", data).status_code == status.HTTP_403_FORBIDDEN
        assert not Currency.objects.filter(name="CHF").exists()

    def test_create_invalid_payload(self, staff_client, db):
        response = staff_client.post("/api/currencies/", {"symbol": "CHF"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "name" in response.data

    def test_update_currency(self, staff_client, currencies):
        """
        Test PUT /api/currencies/{id}/ updates a currency.
        """
        currency_id = currencies["USD"].pk
        response = staff_client.put(
            f"/api/currencies/{currency_id}/",
            {"name": "USD", "symbol": "US$"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["symbol"] == "US$"
        assert Currency.objects.get(pk=currency_id).symbol == "US$"

    def test_update_currency_not_found(self, staff_client, currencies):
        response = staff_client.put("/api/currencies/999999/", {"symbol": "X"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_currency_non_numeric_id(self, staff_client, currencies):
        response = staff_client.put("/api/currencies/USD/", {"symbol": "X"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_currency_is_soft(self, staff_client, currencies):
        """
        Test DELETE /api/currencies/{id}/ deactivates instead of deleting.
        """
        currency_id = currencies["GBP"].pk
        response = staff_client.delete(f"/api/currencies/{currency_id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Currency.objects.filter(pk=currency_id).exists()
        assert Currency.objects.get(pk=currency_id).is_active is False

    def test_delete_currency_not_found(self, staff_client, currencies):
        response = staff_client.delete("/api/currencies/999999/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_requires_staff(self, user_client, currencies):
        response = user_client.delete(f"/api/currencies/{currencies['GBP'].pk}/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Currency.objects.get(name="GBP").is_active is True


@pytest.mark.django_db(transaction=True)
class TestExchangeViewSet:
    """Tests for ExchangeViewSet endpoints."""

    def test_exchange(self, user_client, currencies):
        """
        Test POST /api/exchange/ with USD->EUR 100 at 0.92 records 92.
        """
        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "100", "rate": "0.92"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["source_currency"] == "USD"
        assert response.data["target_currency"] == "EUR"
        assert Decimal(response.data["amount"]) == Decimal("100")
        assert Decimal(response.data["rate"]) == Decimal("0.92")
        assert Decimal(response.data["result_amount"]) == Decimal("92")
        assert ExchangeHistory.objects.count() == 1

    @pytest.mark.parametrize("amount, rate", [
        ("123456789.123456", "1.234567"),
        ("12345678901234.123456", "123456789012.123456"),
    ])
    def test_exchange_response_matches_history(self, user_client, currencies, amount, rate):
        """
        Test that the stored row carries the same exact product the POST returned.
        """
        with localcontext() as ctx:
            ctx.prec = 60
            exact = Decimal(amount) * Decimal(rate)

        created = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": amount, "rate": rate},
        )
        history = user_client.get("/api/exchange/history/")

        assert created.status_code == status.HTTP_201_CREATED
        assert Decimal(created.data["result_amount"]) == exact
        assert len(history.data) == 1
        assert history.data[0]["amount"] == created.data["amount"]
        assert history.data[0]["rate"] == created.data["rate"]
        assert history.data[0]["result_amount"] == created.data["result_amount"]
        assert ExchangeHistory.objects.get().result_amount == exact

    def test_exchange_small_amount_exact_result(self, user_client, currencies):
        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "123456789.123456", "rate": "1.234567"},
        )

        assert response.data["result_amount"] == "152415677.777777703552"
        assert ExchangeHistory.objects.get().result_amount == Decimal("152415677.777777703552")

    def test_exchange_with_deactivated_currency(self, user_client, staff_client, currencies):
        """
        Test that the same exchange fails once EUR has been deactivated.
        """
        staff_client.delete(f"/api/currencies/{currencies['EUR'].pk}/")

        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "100", "rate": "0.92"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "target_currency" in response.data["details"]
        assert ExchangeHistory.objects.count() == 0

    def test_exchange_without_rate_uses_rate_table(self, user_client, currencies, settings):
        settings.EXCHANGE_RATES = {"USD": "1", "EUR": "0.5"}

        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "10"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data["rate"]) == Decimal("0.5")
        assert Decimal(response.data["result_amount"]) == Decimal("5")

    def test_exchange_negative_amount(self, user_client, currencies):
        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "-1", "rate": "0.92"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.data["details"]

    def test_exchange_malformed_amount(self, user_client, currencies):
        response = user_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "lots"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.data

    def test_exchange_requires_authentication(self, api_client, currencies):
        response = api_client.post(
            "/api/exchange/",
            {"source_currency": "USD", "target_currency": "EUR", "amount": "100", "rate": "0.92"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert ExchangeHistory.objects.count() == 0

    def test_exchange_persistence_failure(self, user_client, currencies):
        with patch.object(ExchangeHistory, "save", side_effect=DatabaseError("connection lost")):
            response = user_client.post(
                "/api/exchange/",
                {"source_currency": "USD", "target_currency": "EUR", "amount": "100", "rate": "0.92"},
                format="json",
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"error": "Could not persist changes"}
        assert ExchangeHistory.objects.count() == 0

    def test_history(self, api_client, currencies):
        """
        Test GET /api/exchange/history/ filters by currency and date.
        """
        for source, target, day in [("USD", "EUR", 20), ("EUR", "GBP", 21), ("GBP", "USD", 22)]:
            ExchangeHistory.objects.create(
                source_currency=currencies[source],
                target_currency=currencies[target],
                rate=Decimal("2"),
                amount=Decimal("1"),
                result_amount=Decimal("2"),
                exchanged_at=datetime(2024, 5, day, 9, 30, tzinfo=timezone.utc),
            )

        response = api_client.get("/api/exchange/history/")
        assert response.status_code == status.HTTP_200_OK
        assert [e["source_currency"] for e in response.data] == ["GBP", "EUR", "USD"]

        response = api_client.get("/api/exchange/history/", {"currency": "USD"})
        assert len(response.data) == 2

        response = api_client.get(
            "/api/exchange/history/",
            {"source_currency": "EUR", "date_from": "2024-05-21", "date_to": "2024-05-21"},
        )
        assert len(response.data) == 1
        assert response.data[0]["target_currency"] == "GBP"

    def test_history_invalid_dates(self, api_client, db):
        response = api_client.get("/api/exchange/history/", {"date_from": "2024-05-22", "date_to": "2024-05-21"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = api_client.get("/api/exchange/history/", {"date_from": "yesterday"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rates(self, api_client, currencies, settings):
        """
        Test GET /api/exchange/rates/ prices every active currency from the base.
        """
        settings.EXCHANGE_RATES = {"USD": "1", "EUR": "0.92"}

        response = api_client.get("/api/exchange/rates/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["base_currency"] == "USD"
        rates = {r["target_currency"]: Decimal(r["rate"]) for r in response.data["rates"]}
        assert rates == {"USD": Decimal("1"), "EUR": Decimal("0.92")}

    def test_rates_other_base(self, api_client, currencies, settings):
        settings.EXCHANGE_RATES = {"USD": "1", "EUR": "0.5"}

        response = api_client.get("/api/exchange/rates/", {"base": "EUR"})

        rates = {r["target_currency"]: Decimal(r["rate"]) for r in response.data["rates"]}
        assert rates["USD"] == Decimal("2")

    def test_rates_unknown_base(self, api_client, currencies):
        response = api_client.get("/api/exchange/rates/", {"base": "XXX"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rates_inactive_base(self, api_client, currencies):
        Currency.objects.filter(name="EUR").update(is_active=False)

        response = api_client.get("/api/exchange/rates/", {"base": "EUR"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"error": "Currency EUR not found"}


@pytest.mark.django_db(transaction=True)
def test_jwt_token_grants_exchange_access(api_client, currencies):
    get_user_model().objects.create_user(username="trader", password="secret-pass-123")

    token = api_client.post(
        "/api/auth/token/",
        {"username": "trader", "password": "secret-pass-123"},
        format="json",
    ).data["access"]
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    response = api_client.post(
        "/api/exchange/",
        {"source_currency": "USD", "target_currency": "EUR", "amount": "1", "rate": "1"},
        format="json",
    )

    assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.django_db
def test_health_check(api_client):
    response = api_client.get("/health/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
