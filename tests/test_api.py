"""
Tests for the API endpoints.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from autoquote.api.app import create_app
from autoquote.core.pricing import utc_now
from autoquote.repositories.db_pool import StorageUnavailableError
from autoquote.services.earnings_service import EarningsService

from conftest import NOW, insert_quote


@pytest.fixture
def client(app_config):
    """Create a test client with storage opened by the lifespan."""
    with TestClient(create_app(app_config)) as test_client:
        yield test_client


def _birth_date_for_age(age: int) -> str:
    return (utc_now() - timedelta(days=365 * age + 30)).date().isoformat()


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check_structure(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ok"
        assert data["database_connected"] is True
        assert "version" in data
        assert "timestamp" in data


class TestQuoteEndpoints:
    """Tests for quote creation and search."""

    def test_create_then_fetch_quote(self, client):
        response = client.post(
            "/quote",
            data={"name": "Ada Lovelace", "zip_code": "12561", "date_of_birth": _birth_date_for_age(35)},
        )
        assert response.status_code == 200
        created = response.json()
        assert created["six_month_premium"] == "3704.58"

        response = client.get("/quote/search", params={"id": created["quote_id"]})
        assert response.status_code == 200
        quotes = response.json()
        assert len(quotes) == 1
        assert quotes[0]["monthly_premium"] == 617.43
        assert quotes[0]["zip_code"] == "12561"

        response = client.get(f"/quote/{created['quote_id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Ada Lovelace"

    def test_get_unknown_quote(self, client):
        response = client.get("/quote/9999")
        assert response.status_code == 404

    def test_create_quote_requires_fields(self, client):
        response = client.post("/quote", data={"name": "Ada Lovelace", "zip_code": "12561"})
        assert response.status_code == 422

    def test_create_quote_rejects_blank_and_bad_values(self, client):
        response = client.post(
            "/quote",
            data={"name": "   ", "zip_code": "12561", "date_of_birth": "1983-08-04"},
        )
        assert response.status_code == 400

        response = client.post(
            "/quote",
            data={"name": "Ada", "zip_code": "12561", "date_of_birth": "August 4th"},
        )
        assert response.status_code == 400

    def test_search_rejects_unknown_fields(self, client):
        response = client.get("/quote/search", params={"evil": "1"})
        assert response.status_code == 400
        assert "Unsupported quote search field" in response.json()["detail"]

    def test_search_most_recent_only(self, client):
        for name in ("First", "Second"):
            client.post(
                "/quote",
                data={"name": name, "zip_code": "11803", "date_of_birth": "1983-08-04"},
            )

        response = client.get("/quote/search", params={"zip_code": "11803", "most_recent": "true"})
        assert [quote["name"] for quote in response.json()] == ["Second"]

    def test_search_in_past_hours(self, client):
        client.post(
            "/quote",
            data={"name": "Ada Lovelace", "zip_code": "12561", "date_of_birth": _birth_date_for_age(35)},
        )

        response = client.get("/quote/search/1", params={"zip_code": "12561", "less_than": "4000"})
        assert response.status_code == 200
        assert [quote["name"] for quote in response.json()] == ["Ada Lovelace"]

        response = client.get("/quote/search/1", params={"greater_than": "4000"})
        assert response.json() == []

        response = client.get("/quote/search/-2")
        assert response.status_code == 400

    def test_search_with_out_of_range_values(self, client):
        client.post(
            "/quote",
            data={"name": "Ada Lovelace", "zip_code": "12561", "date_of_birth": _birth_date_for_age(35)},
        )

        for hours in ("100000000", "1e300"):
            response = client.get(f"/quote/search/{hours}")
            assert response.status_code == 200
            assert [quote["name"] for quote in response.json()] == ["Ada Lovelace"]

        for hours in ("inf", "nan"):
            assert client.get(f"/quote/search/{hours}").status_code == 400

        response = client.get("/quote/search/1", params={"greater_than": "1E+999999999"})
        assert response.status_code == 400

        response = client.get("/quote/search", params={"monthly_premium": "1E+50"})
        assert response.status_code == 400


class TestPremiumsEndpoint:
    """Tests for month-to-date earnings."""

    def test_premiums_shape(self, client):
        client.post(
            "/quote",
            data={"name": "Ada Lovelace", "zip_code": "12561", "date_of_birth": "1983-08-04"},
        )

        response = client.get("/premiums")
        assert response.status_code == 200
        # a policy sold today has not earned anything yet
        assert response.json() == {"premiums this month so far": 0.0}

    def test_storage_failure_is_server_error(self, client, monkeypatch):
        def unavailable():
            raise StorageUnavailableError("database is locked")

        earnings_service = client.app.state.container.earnings_service
        monkeypatch.setattr(earnings_service, "premiums_this_month_so_far", unavailable)

        response = client.get("/premiums")
        assert response.status_code == 503

    def test_premiums_sum_back_dated_policies(self, client, monkeypatch):
        container = client.app.state.container
        insert_quote(container.pool, "Ada Lovelace", "12561", "600.00", "2022-06-10 09:00:00")
        insert_quote(container.pool, "Alan Turing", "11803", "617.43", "2022-06-15 08:30:00")
        monkeypatch.setattr(
            container, "earnings_service", EarningsService(container.quote_repo, clock=lambda: NOW)
        )

        response = client.get("/premiums")
        assert response.status_code == 200
        # 20.00 * 9 days + 20.581 * 4 days
        assert response.json() == {"premiums this month so far": 262.32}
