"""Tests for the /holdings API."""

import time
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.exc import OperationalError

from stock_service.core.portfolio import HoldingRepository

from conftest import ACCESS_SECRET

AAPL = {"ticker": "AAPL", "quantity": 10.5, "totalCost": 1523.75, "account": "Fidelity IRA"}
MSFT = {"ticker": "MSFT", "quantity": 3, "totalCost": 10.005, "account": "Schwab Brokerage"}
MSFT_IRA = {"ticker": "MSFT", "quantity": 1, "totalCost": 10.005, "account": "Schwab Roth IRA"}
NVDA_IRA = {"ticker": "NVDA", "quantity": 2, "totalCost": 26.25, "account": "Schwab Roth IRA"}


@pytest.fixture
def add(client, auth_headers):
    def _add(payload):
        response = client.post("/holdings/", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["_id"]

    return _add


class TestAuthGate:
    """Protected holdings routes reject bad credentials with 401."""

    def test_missing_header(self, client):
        response = client.get("/holdings/")

        assert response.status_code == 401
        assert response.json() == {"error": "No Authorization header provided"}

    def test_wrong_scheme(self, client, registered):
        token = registered["auth"]["accessToken"]

        response = client.get("/holdings/", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header must use the Bearer scheme"}

    def test_mismatched_secret(self, client):
        token = jwt.encode({"_id": "u1", "exp": int(time.time()) + 60}, "not-the-secret")

        response = client.get("/holdings/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token signature"}

    def test_expired_token(self, client):
        token = jwt.encode({"_id": "u1", "exp": int(time.time()) - 60}, ACCESS_SECRET)

        response = client.get("/holdings/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Token has expired"}

    def test_refresh_token_is_not_an_access_token(self, client, registered):
        token = registered["auth"]["refreshToken"]

        response = client.get("/holdings/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_www_authenticate_header(self, client):
        response = client.get("/holdings/")
        assert response.headers["www-authenticate"] == "Bearer"


class TestCreateAndRead:
    """Tests for creating and reading holdings."""

    def test_round_trip(self, client, auth_headers, add):
        """Reading a created holding returns the submitted fields."""
        holding_id = add(AAPL)

        response = client.get(f"/holdings/id/{holding_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"_id": holding_id, **AAPL}

    def test_create_message(self, client, auth_headers):
        response = client.post("/holdings/", json=AAPL, headers=auth_headers)

        body = response.json()
        assert response.status_code == 201
        assert body["message"] == f"Successfully added holdings for ticker AAPL with ID {body['_id']}"

    @pytest.mark.parametrize("key", ["_id", "id"])
    def test_rejects_identity(self, client, auth_headers, key):
        response = client.post("/holdings/", json={key: "abc", **AAPL}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "ID should not be provided for a new holding"}

    def test_rejects_unknown_field(self, client, auth_headers):
        response = client.post("/holdings/", json={**AAPL, "price": 145.1}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Unknown field: price"}

    def test_rejects_missing_field(self, client, auth_headers):
        response = client.post("/holdings/", json={"ticker": "AAPL", "totalCost": 1.0}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required field: quantity"}

    def test_rejects_malformed_json(self, client, auth_headers):
        response = client.post(
            "/holdings/",
            content="{ticker: AAPL",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_rejects_non_finite_numbers(self, client, auth_headers):
        response = client.post(
            "/holdings/",
            content='{"ticker": "Y", "quantity": 1, "totalCost": NaN}',
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid value for field 'totalCost'")

    def test_rejects_quoted_numbers(self, client, auth_headers):
        response = client.post("/holdings/", json={**AAPL, "quantity": "5"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid value for field 'quantity'")

    def test_unknown_id(self, client, auth_headers):
        response = client.get("/holdings/id/missing", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Holding ID: missing not found"}


class TestListings:
    """Tests for listings and their summaries."""

    def test_empty_listing(self, client, auth_headers):
        response = client.get("/holdings/", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"summary": {"found": 0, "totalCost": 0.0}, "holdings": []}

    def test_listing_summary_rounds_half_cents_up(self, client, auth_headers, add):
        add(MSFT)
        add(MSFT_IRA)

        body = client.get("/holdings/", headers=auth_headers).json()

        assert body["summary"] == {"found": 2, "totalCost": 20.01}
        assert len(body["holdings"]) == 2

    def test_filter_by_ticker(self, client, auth_headers, add):
        add(AAPL)
        add(MSFT)
        add(MSFT_IRA)

        response = client.get("/holdings/ticker/MSFT", headers=auth_headers)

        assert response.status_code == 200
        assert sorted(h["account"] for h in response.json()) == ["Schwab Brokerage", "Schwab Roth IRA"]

    def test_ticker_match_is_exact(self, client, auth_headers, add):
        add(AAPL)

        response = client.get("/holdings/ticker/AAP", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "No holdings found for the given ticker"}

    def test_filter_by_account_substring(self, client, auth_headers, add):
        """Account filter is a case-insensitive substring match."""
        add(AAPL)
        add(MSFT)
        add(NVDA_IRA)

        response = client.get("/holdings/account/ira", headers=auth_headers)

        body = response.json()
        assert response.status_code == 200
        assert body["summary"] == {"found": 2, "totalCost": 1550.0}
        assert {h["ticker"] for h in body["holdings"]} == {"AAPL", "NVDA"}

    def test_account_wildcards_are_literal(self, client, auth_headers, add):
        add(AAPL)

        response = client.get("/holdings/account/%25", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "No holdings found for the given account pattern"}

    @pytest.mark.parametrize("path", ["/holdings/", "/holdings/account/IRA"])
    def test_overflowing_total_is_a_server_error(self, client, auth_headers, add, path):
        huge = {"ticker": "X", "quantity": 1, "totalCost": 1e308, "account": "IRA"}
        add(huge)
        add(huge)

        response = client.get(path, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to summarize holdings"}

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get_by_ticker", "/holdings/ticker/AAPL"),
            ("get_by_account", "/holdings/account/IRA"),
            ("get_all", "/holdings/"),
        ],
    )
    def test_query_failure_is_a_server_error(self, client, auth_headers, add, method, path):
        """A failing query is reported as 500, never as not found."""
        add(AAPL)
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        with patch.object(HoldingRepository, method, side_effect=error):
            response = client.get(path, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to retrieve holdings"}


class TestUpdateAndDelete:
    """Tests for replacing and deleting holdings."""

    def test_replace(self, client, auth_headers, add):
        holding_id = add(AAPL)
        replacement = {"ticker": "AAPL", "quantity": 12, "totalCost": 1800.0, "account": "Fidelity Brokerage"}

        response = client.put(f"/holdings/id/{holding_id}", json=replacement, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Holdings for AAPL updated successfully!"}
        fetched = client.get(f"/holdings/id/{holding_id}", headers=auth_headers).json()
        assert fetched == {"_id": holding_id, **replacement}

    def test_replace_is_full(self, client, auth_headers, add):
        """Omitted optional fields are reset, not kept."""
        holding_id = add(AAPL)

        client.put(
            f"/holdings/id/{holding_id}",
            json={"ticker": "AAPL", "quantity": 1, "totalCost": 1},
            headers=auth_headers,
        )

        fetched = client.get(f"/holdings/id/{holding_id}", headers=auth_headers).json()
        assert fetched["account"] == ""

    def test_replace_rejects_other_identity(self, client, auth_headers, add):
        holding_id = add(AAPL)

        response = client.put(
            f"/holdings/id/{holding_id}",
            json={"_id": "other", **AAPL},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_replace_unknown(self, client, auth_headers):
        response = client.put("/holdings/id/missing", json=AAPL, headers=auth_headers)

        assert response.status_code == 404

    def test_delete(self, client, auth_headers, add):
        holding_id = add(AAPL)

        response = client.delete(f"/holdings/id/{holding_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Holdings for AAPL deleted successfully!"}
        assert client.get(f"/holdings/id/{holding_id}", headers=auth_headers).status_code == 404

    def test_delete_unknown(self, client, auth_headers):
        response = client.delete("/holdings/id/missing", headers=auth_headers)

        assert response.status_code == 404


def test_unexpected_error_renders_as_json(app, auth_headers):
    """Errors nothing else handles still produce an {"error"} body."""
    client = TestClient(app, raise_server_exceptions=False)

    with patch.object(HoldingRepository, "get_by_id", side_effect=RuntimeError("boom")):
        response = client.get("/holdings/id/h1", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
