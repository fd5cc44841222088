"""Tests for the settings API."""

from conftest import data


class TestExchangeRates:
    def test_unset_rates_are_null(self, client):
        assert data(client.get("/api/settings/exchange-rates")) == {
            "exchange_rate_dzd_usdt": None,
            "exchange_rate_usdt_krw": None,
        }

    def test_save_and_read_back(self, client):
        saved = data(
            client.put("/api/settings/exchange-rates", json={"exchange_rate_dzd_usdt": 245.5})
        )
        assert saved == {"exchange_rate_dzd_usdt": 245.5, "exchange_rate_usdt_krw": None}

        client.put("/api/settings/exchange-rates", json={"exchange_rate_usdt_krw": 1380})
        rates = data(client.get("/api/settings/exchange-rates"))
        assert rates == {"exchange_rate_dzd_usdt": 245.5, "exchange_rate_usdt_krw": 1380.0}

    def test_rates_must_be_positive(self, client):
        response = client.put("/api/settings/exchange-rates", json={"exchange_rate_dzd_usdt": 0})
        assert response.status_code == 422

    def test_employees_cannot_save_rates(self, client, login_as):
        login_as("EMPLOYEE", user_id=2, username="clerk")
        response = client.put("/api/settings/exchange-rates", json={"exchange_rate_dzd_usdt": 200})
        assert response.status_code == 403

        assert client.get("/api/settings/exchange-rates").status_code == 200


class TestKeys:
    def test_missing_key(self, client):
        response = client.get("/api/settings/unknown_key")
        assert response.status_code == 404

    def test_put_then_get(self, client):
        created = data(client.put("/api/settings/signature", json={"value": "Oussama Auto"}))
        assert created["key"] == "signature"

        data(client.put("/api/settings/signature", json={"value": "Oussama Motors"}))
        assert data(client.get("/api/settings/signature"))["value"] == "Oussama Motors"

        keys = [setting["key"] for setting in data(client.get("/api/settings"))]
        assert keys == ["signature"]

    def test_listing_is_admin_only(self, client, login_as):
        login_as("EMPLOYEE", user_id=2, username="clerk")
        assert client.get("/api/settings").status_code == 403
