"""Stub contract service for local development and tests.

A FastAPI app that speaks the same HTTP contract as the real generation and
persistence services. Contracts are assembled deterministically from the
request (no model is called) and saved contracts live in memory.

Run it locally with:
    uvicorn tools.stub_contract_service:app --port 5000
"""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from composer.models import GenerationRequest, SaveContractRequest

logger = logging.getLogger("vibelegal.stub_service")

DEFAULT_TOKENS = frozenset({"dev-token"})

DISCLAIMER = (
    "*This contract was generated automatically and should be reviewed by a "
    "qualified attorney before use. It does not constitute legal advice.*"
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _humanize(key: str) -> str:
    return key.replace("_", " ").title()


def compose_stub_contract(request: GenerationRequest) -> str:
    """Assemble a markdown contract from a generation request."""
    parameters = dict(request.parameters)
    client = parameters.pop("clientName", "")
    other_party = parameters.pop("otherPartyName", "")

    lines = [
        f"# {request.contract_type}",
        "",
        f"This {request.contract_type} is entered into by **{client}** "
        f"and **{other_party}** under the laws of the State of {request.jurisdiction}.",
        "",
        "## Terms",
        "",
    ]
    lines.extend(f"- **{_humanize(key)}**: {value}" for key, value in parameters.items())
    lines.append("")
    for number, (key, value) in enumerate(request.options.items(), 1):
        lines.append(f"## {number}. {_humanize(key)}")
        lines.append("")
        lines.append(f"Clause variation: `{value}`.")
        lines.append("")
    lines.append("---")
    lines.append("")
    lines.append(DISCLAIMER)
    return "\n".join(lines)


def create_stub_app(tokens: Iterable[str] = DEFAULT_TOKENS) -> FastAPI:
    """Build a stub service that accepts the given bearer tokens."""
    accepted = frozenset(tokens)
    saved: list[dict[str, Any]] = []
    ids = itertools.count(1)

    app = FastAPI(
        title="VibeLegal Stub Contract Service",
        description="Deterministic stand-in for the contract generation and persistence services.",
        version="0.1.0",
    )
    app.state.saved_contracts = saved

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "%s %s | status=%d | duration=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    def authorized(request: Request) -> bool:
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        return scheme == "Bearer" and token in accepted

    async def read_json(request: Request) -> Any:
        try:
            return await request.json()
        except ValueError:
            return None

    @app.post("/api/generate-contract")
    async def generate_contract(request: Request) -> JSONResponse:
        if not authorized(request):
            return _error(401, "Invalid or missing token")
        try:
            payload = GenerationRequest.model_validate(await read_json(request))
        except PydanticValidationError:
            return _error(400, "contractType, jurisdiction, parameters and options are required")
        if not payload.parameters.get("clientName") or not payload.parameters.get("otherPartyName"):
            return _error(400, "Client name and other party name are required")

        logger.info("Composing stub %s", payload.contract_type)
        return JSONResponse(
            content={
                "contract": compose_stub_contract(payload),
                "contractType": payload.contract_type,
                "clientName": payload.parameters["clientName"],
                "otherPartyName": payload.parameters["otherPartyName"],
                "jurisdiction": payload.jurisdiction,
            }
        )

    @app.post("/api/save-contract")
    async def save_contract(request: Request) -> JSONResponse:
        if not authorized(request):
            return _error(401, "Invalid or missing token")
        try:
            payload = SaveContractRequest.model_validate(await read_json(request))
        except PydanticValidationError:
            return _error(400, "title, contractType and content are required")
        if not payload.title.strip():
            return _error(400, "Title is required")

        contract_id = next(ids)
        saved.append(
            {
                "id": contract_id,
                "title": payload.title,
                "contract_type": payload.contract_type,
                "content": payload.content,
                "created_at": datetime.now(UTC).isoformat(),
            }
        )
        return JSONResponse(
            status_code=201,
            content={"message": "Contract saved successfully", "contractId": contract_id},
        )

    @app.get("/api/user-contracts")
    async def user_contracts(request: Request) -> JSONResponse:
        if not authorized(request):
            return _error(401, "Invalid or missing token")
        contracts = [
            {key: item[key] for key in ("id", "title", "contract_type", "created_at")}
            for item in reversed(saved)
        ]
        return JSONResponse(content={"contracts": contracts})

    return app


app = create_stub_app()
