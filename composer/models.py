"""Models for generated drafts and the service calls around them.

Wire models use snake_case in Python and camelCase on the wire, matching
the JSON the services exchange.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class GenerationRequest(_WireModel):
    """A validated request for the generation service. Built fresh per submit."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contract_type: str = Field(alias="contractType")
    jurisdiction: str
    parameters: dict[str, str]
    options: dict[str, str]


class GenerationResponse(_WireModel):
    """Successful generation result."""

    contract: str
    contract_type: str = Field(alias="contractType")
    client_name: str = Field(default="", alias="clientName")
    other_party_name: str = Field(default="", alias="otherPartyName")
    jurisdiction: str = ""

    @property
    def default_title(self) -> str:
        return f"{self.contract_type} - {self.client_name} & {self.other_party_name}"


class SaveContractRequest(_WireModel):
    """Body of a save call."""

    title: str
    contract_type: str = Field(alias="contractType")
    content: str


class SaveAck(_WireModel):
    """Acknowledgement of a save. The service may add fields of its own."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message: str | None = None
    contract_id: int | str | None = Field(default=None, alias="contractId")


class SavedContractSummary(BaseModel):
    """One entry of the user's saved contracts."""

    id: int | str
    title: str
    contract_type: str
    created_at: datetime


@dataclass
class DraftDocument:
    """A generated contract as the user reviews it. Title and content are editable."""

    title: str
    content: str
    contract_type: str
    jurisdiction: str

    @classmethod
    def from_response(cls, response: GenerationResponse) -> DraftDocument:
        return cls(
            title=response.default_title,
            content=response.contract,
            contract_type=response.contract_type,
            jurisdiction=response.jurisdiction,
        )

    def save_request(self) -> SaveContractRequest:
        return SaveContractRequest(
            title=self.title,
            contract_type=self.contract_type,
            content=self.content,
        )
