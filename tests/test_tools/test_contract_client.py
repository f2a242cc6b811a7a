"""Tests for the contract service client."""

from __future__ import annotations

import json

import httpx
import pytest

from composer.exceptions import AuthenticationError, NetworkError, ServiceError
from composer.models import GenerationRequest, SaveContractRequest
from composer.session import SessionContext
from tools.contract_client import GENERATE_PATH, LIST_PATH, ContractServiceClient
from tools.stub_contract_service import create_stub_app

BASE_URL = "http://testserver"


def make_request() -> GenerationRequest:
    return GenerationRequest(
        contract_type="Mutual Non-Disclosure Agreement",
        jurisdiction="Delaware",
        parameters={
            "clientName": "Acme Inc.",
            "otherPartyName": "Globex LLC",
            "purpose": "Evaluating a partnership",
            "term_years": "2",
        },
        options={"residuals": "none", "non_solicitation": "twelve_months"},
    )


def stub_client(token: str | None = "dev-token", **kwargs) -> ContractServiceClient:
    return ContractServiceClient(
        SessionContext(token=token, api_url=BASE_URL),
        transport=httpx.ASGITransport(app=create_stub_app()),
        **kwargs,
    )


def mock_client(handler, token: str | None = "dev-token", **kwargs) -> ContractServiceClient:
    return ContractServiceClient(
        SessionContext(token=token, api_url=BASE_URL),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestGenerateContract:
    """Generation against the in-process stub service."""

    @pytest.mark.asyncio
    async def test_generate_contract(self) -> None:
        async with stub_client() as client:
            response = await client.generate_contract(make_request())

        assert response.contract_type == "Mutual Non-Disclosure Agreement"
        assert response.client_name == "Acme Inc."
        assert response.other_party_name == "Globex LLC"
        assert response.jurisdiction == "Delaware"
        assert response.contract.startswith("# Mutual Non-Disclosure Agreement")

    @pytest.mark.asyncio
    async def test_sends_wire_payload_and_bearer_token(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "contract": "# NDA",
                    "contractType": body["contractType"],
                    "clientName": body["parameters"]["clientName"],
                    "otherPartyName": body["parameters"]["otherPartyName"],
                    "jurisdiction": body["jurisdiction"],
                },
            )

        async with mock_client(handler) as client:
            await client.generate_contract(make_request())

        request = seen[0]
        assert request.url.path == GENERATE_PATH
        assert request.headers["Authorization"] == "Bearer dev-token"
        body = json.loads(request.content)
        assert body["contractType"] == "Mutual Non-Disclosure Agreement"
        assert body["options"] == {"residuals": "none", "non_solicitation": "twelve_months"}

    @pytest.mark.asyncio
    async def test_missing_token_makes_no_call(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        async with mock_client(handler, token=None) as client:
            with pytest.raises(AuthenticationError):
                await client.generate_contract(make_request())
        assert calls == []

    @pytest.mark.asyncio
    async def test_rejected_token(self) -> None:
        async with stub_client(token="expired") as client:
            with pytest.raises(AuthenticationError) as exc_info:
                await client.generate_contract(make_request())
        assert exc_info.value.message == "Invalid or missing token"

    @pytest.mark.asyncio
    async def test_connection_failure_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(NetworkError) as exc_info:
                await client.generate_contract(make_request())
        assert exc_info.value.message == "Network error. Please try again."

    @pytest.mark.asyncio
    async def test_service_error_text_is_passed_through(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "Monthly contract limit reached"})

        async with mock_client(handler) as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.generate_contract(make_request())
        assert exc_info.value.message == "Monthly contract limit reached"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_error_without_body_gets_generic_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with mock_client(handler) as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.generate_contract(make_request())
        assert exc_info.value.message == "Failed to generate contract"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>not json</html>"),
            httpx.Response(200, json={"unexpected": True}),
        ],
    )
    async def test_malformed_success_is_service_error(self, response: httpx.Response) -> None:
        async with mock_client(lambda request: response) as client:
            with pytest.raises(ServiceError):
                await client.generate_contract(make_request())

    @pytest.mark.asyncio
    async def test_generation_is_not_retried(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        async with mock_client(handler, list_retry_wait_seconds=0) as client:
            with pytest.raises(NetworkError):
                await client.generate_contract(make_request())
        assert len(calls) == 1


class TestSaveAndList:
    @pytest.mark.asyncio
    async def test_save_then_list(self) -> None:
        async with stub_client() as client:
            first = await client.save_contract(
                SaveContractRequest(title="First", contract_type="NDA", content="# One")
            )
            await client.save_contract(
                SaveContractRequest(title="Second", contract_type="NDA", content="# Two")
            )
            contracts = await client.list_user_contracts()

        assert first.contract_id == 1
        assert first.message == "Contract saved successfully"
        assert [c.title for c in contracts] == ["Second", "First"]
        assert contracts[0].contract_type == "NDA"

    @pytest.mark.asyncio
    async def test_empty_list(self) -> None:
        async with stub_client() as client:
            assert await client.list_user_contracts() == []

    @pytest.mark.asyncio
    async def test_save_failure_message(self) -> None:
        async with stub_client() as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.save_contract(
                    SaveContractRequest(title=" ", contract_type="NDA", content="# One")
                )
        assert exc_info.value.message == "Title is required"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_list_retries_transport_faults(self) -> None:
        """The listing call is idempotent and retried on connection failures."""
        attempts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(
                200,
                json={
                    "contracts": [
                        {
                            "id": 7,
                            "title": "Offer Letter",
                            "contract_type": "California Employment Agreement",
                            "created_at": "2024-03-01T12:00:00+00:00",
                        }
                    ]
                },
            )

        async with mock_client(handler, list_retry_attempts=3, list_retry_wait_seconds=0) as client:
            contracts = await client.list_user_contracts()

        assert len(attempts) == 3
        assert attempts[0].url.path == LIST_PATH
        assert contracts[0].id == 7
        assert contracts[0].created_at.year == 2024

    @pytest.mark.asyncio
    async def test_list_gives_up_after_attempts(self) -> None:
        attempts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler, list_retry_attempts=2, list_retry_wait_seconds=0) as client:
            with pytest.raises(NetworkError):
                await client.list_user_contracts()
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_list_does_not_retry_service_errors(self) -> None:
        attempts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(500, json={"error": "Database unavailable"})

        async with mock_client(handler, list_retry_wait_seconds=0) as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.list_user_contracts()
        assert exc_info.value.message == "Database unavailable"
        assert len(attempts) == 1
