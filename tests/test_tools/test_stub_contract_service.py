from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from composer.models import GenerationRequest
from tools.stub_contract_service import DISCLAIMER, compose_stub_contract, create_stub_app

AUTH = {"Authorization": "Bearer dev-token"}

GENERATE_BODY = {
    "contractType": "Independent Contractor Agreement",
    "jurisdiction": "New York",
    "parameters": {
        "clientName": "Acme Inc.",
        "otherPartyName": "Jane Roe",
        "scope_of_services": "Web design",
        "hourly_rate": "150",
        "payment_terms": "Net 30",
    },
    "options": {"ip_ownership": "work_for_hire", "termination": "for_cause_only"},
}


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_stub_app())


def test_compose_stub_contract_is_deterministic() -> None:
    request = GenerationRequest.model_validate(GENERATE_BODY)
    text = compose_stub_contract(request)

    assert text == compose_stub_contract(request)
    assert text.startswith("# Independent Contractor Agreement")
    assert "**Acme Inc.**" in text
    assert "- **Hourly Rate**: 150" in text
    assert "## 2. Termination" in text
    assert text.endswith(DISCLAIMER)


def test_generate_contract(client: TestClient) -> None:
    response = client.post("/api/generate-contract", json=GENERATE_BODY, headers=AUTH)

    assert response.status_code == 200
    data = response.json()
    assert data["contractType"] == "Independent Contractor Agreement"
    assert data["clientName"] == "Acme Inc."
    assert data["otherPartyName"] == "Jane Roe"
    assert data["jurisdiction"] == "New York"


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer nope"}, {"Authorization": "dev-token"}])
def test_requires_bearer_token(client: TestClient, headers: dict[str, str]) -> None:
    for method, path in (
        ("POST", "/api/generate-contract"),
        ("POST", "/api/save-contract"),
        ("GET", "/api/user-contracts"),
    ):
        response = client.request(method, path, json=GENERATE_BODY, headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing token"}


def test_generate_rejects_missing_parties(client: TestClient) -> None:
    body = {**GENERATE_BODY, "parameters": {"scope_of_services": "Web design"}}
    response = client.post("/api/generate-contract", json=body, headers=AUTH)
    assert response.status_code == 400
    assert "error" in response.json()


def test_generate_rejects_malformed_body(client: TestClient) -> None:
    response = client.post(
        "/api/generate-contract",
        content=b"not json",
        headers={**AUTH, "Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_save_and_list(client: TestClient) -> None:
    saved = client.post(
        "/api/save-contract",
        json={"title": "Web design", "contractType": "Independent Contractor Agreement", "content": "# IC"},
        headers=AUTH,
    )
    assert saved.status_code == 201
    assert saved.json() == {"message": "Contract saved successfully", "contractId": 1}

    listing = client.get("/api/user-contracts", headers=AUTH)
    contracts = listing.json()["contracts"]
    assert len(contracts) == 1
    assert contracts[0]["title"] == "Web design"
    assert set(contracts[0]) == {"id", "title", "contract_type", "created_at"}
    assert client.app.state.saved_contracts[0]["content"] == "# IC"


def test_save_rejects_blank_title(client: TestClient) -> None:
    response = client.post(
        "/api/save-contract",
        json={"title": "  ", "contractType": "NDA", "content": "# NDA"},
        headers=AUTH,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}
