"""Tests for the token security HTTP API."""

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.registry import registry
from src.security.metrics import ValidationMetrics
from src.security.models import ContractSecurity
from src.security.security_lists import SecurityLists
from src.security.validator import TokenSecurityValidator
from tests.fakes import BLACKLISTED, TETHER, UNKNOWN, FakeContractProvider

OFFLINE = {
    "enable_contract_analysis": False,
    "enable_external_validation": False,
    "enable_caching": False,
}


@pytest.fixture
def client(security_lists: SecurityLists, metrics: ValidationMetrics):
    validator = TokenSecurityValidator(
        lists=security_lists,
        metrics=metrics,
        contract_provider=FakeContractProvider(ContractSecurity(is_verified=True, is_honeypot=True)),
    )
    with TestClient(create_app(validator=validator)) as c:
        yield c
    registry.validator = None


class TestQuickCheckEndpoint:
    def test_verified(self, client: TestClient) -> None:
        resp = client.get(f"/api/v1/tokens/1/{TETHER}/quick")
        assert resp.status_code == 200
        data = resp.json()
        assert data["risk_level"] == "verified"
        assert data["trusted"] is True
        assert data["description"] == "Verified and safe to interact with"

    def test_spam_metadata(self, client: TestClient) -> None:
        resp = client.get(
            f"/api/v1/tokens/1/{UNKNOWN}/quick",
            params={"name": "Free USDT Claim Token", "symbol": "1000"},
        )
        assert resp.status_code == 200
        assert resp.json()["risk_level"] == "high"

    def test_only_matched_fields_are_accepted(self, client: TestClient) -> None:
        route = client.app.openapi()["paths"]["/api/v1/tokens/{chain_id}/{address}/quick"]["get"]
        assert {p["name"] for p in route["parameters"]} == {"chain_id", "address", "name", "symbol"}

    def test_overlong_name_rejected(self, client: TestClient) -> None:
        resp = client.get(f"/api/v1/tokens/1/{UNKNOWN}/quick", params={"name": "x" * 201})
        assert resp.status_code == 422

    def test_invalid_address(self, client: TestClient) -> None:
        resp = client.get("/api/v1/tokens/1/not-an-address/quick")
        assert resp.status_code == 422
        assert "Invalid token address" in resp.json()["detail"]

    def test_security_headers(self, client: TestClient) -> None:
        resp = client.get(f"/api/v1/tokens/1/{TETHER}/quick")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["Cache-Control"] == "no-store"


class TestValidateEndpoint:
    def test_verified_token(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate", json={
            "address": TETHER,
            "chain_id": 1,
            "metadata": {"name": "Tether USD", "symbol": "USDT", "decimals": 18},
            "config": OFFLINE,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["validation"]["risk_level"] == "verified"
        assert data["validation"]["security_score"] > 80
        assert data["filtered"] is False
        assert data["recommendation"] == "Safe to interact with normal precautions"

    def test_spam_token_with_tolerance(self, client: TestClient) -> None:
        body = {
            "address": UNKNOWN,
            "chain_id": 1,
            "metadata": {"name": "Free USDT Claim Token", "symbol": "1000", "decimals": 0},
            "config": OFFLINE,
        }
        lenient = client.post("/api/v1/tokens/validate", json=body).json()
        strict = client.post("/api/v1/tokens/validate", json={**body, "tolerance": "low"}).json()

        assert lenient["validation"]["security_score"] <= 60
        assert lenient["filtered"] is False
        assert strict["filtered"] is True

    def test_contract_analysis_honeypot(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate", json={
            "address": TETHER,
            "chain_id": 1,
            "config": {**OFFLINE, "enable_contract_analysis": True},
        })
        data = resp.json()
        assert data["validation"]["risk_level"] == "critical"
        assert data["validation"]["is_verified"] is False
        assert data["description"] == "Dangerous - do not interact"

    def test_invalid_address(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate", json={"address": "0x123", "chain_id": 1})
        assert resp.status_code == 422

    def test_overlong_metadata_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate", json={
            "address": UNKNOWN,
            "chain_id": 1,
            "metadata": {"name": "visit to " * 2000, "symbol": "X"},
            "config": OFFLINE,
        })
        assert resp.status_code == 422

    def test_bad_config(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate", json={
            "address": TETHER, "chain_id": 1, "config": {"validation_timeout": 0},
        })
        assert resp.status_code == 422


class TestBatchEndpoint:
    def test_mixed_batch(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate/batch", json={
            "tokens": [
                {"address": TETHER, "chain_id": 1},
                {"address": BLACKLISTED, "chain_id": 1},
                {"address": "garbage", "chain_id": 1},
            ],
            "config": OFFLINE,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["kept"] == 1
        assert data["filtered"] == 1
        assert data["failed"] == 1
        assert [r["address"] for r in data["results"]] == [TETHER, BLACKLISTED, "garbage"]
        assert data["results"][2]["error"]

    def test_empty_batch_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/v1/tokens/validate/batch", json={"tokens": []})
        assert resp.status_code == 422


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        client.get(f"/api/v1/tokens/1/{TETHER}/quick")
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["validator_ready"] is True
        assert data["cache_backend"] == "injected"
        assert data["redis_ok"] is None
        assert "stages" in data["metrics"]


def test_validator_not_ready():
    registry.validator = None
    app = create_app(validator=None)
    # Lifespan not entered: no validator has been built
    client = TestClient(app)
    resp = client.post("/api/v1/tokens/validate", json={"address": TETHER, "chain_id": 1})
    assert resp.status_code == 503
