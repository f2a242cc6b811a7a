"""Draft lifecycle.

One DraftLifecycle owns one draft from type selection through generation,
editing, saving and export. The awaited service calls are the only
suspension points; their outcomes are folded back in as transitions.

Phases:
    EMPTY -> CONFIGURING -> SUBMITTING -> GENERATED -> EDITING <-> PREVIEWING
    GENERATED/EDITING/PREVIEWING -> SAVING -> SAVED
    SUBMITTING/SAVING -> FAILED (resumes the phase the call started from)

Usage:
    draft = DraftLifecycle(session)
    draft.select_type("California Employment Agreement")
    draft.edit_parties(client_name="Acme Inc.", other_party_name="John Doe")
    draft.edit_parameter("annual_salary", "120000")
    ...
    document = await draft.submit()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from catalog.registry import DEFAULT_CATALOG, ContractTypeCatalog, ContractTypeDefinition
from composer.binder import Parties, bind, default_options
from composer.exceptions import (
    ComposerError,
    InvalidTransitionError,
    MissingTitleError,
    UnknownFieldError,
    ValidationError,
)
from composer.fields import FormSection, build_form
from composer.models import DraftDocument, SaveAck
from composer.session import SessionContext
from export.adapter import ContractExporter, ExportedFile
from rendering.renderer import render
from tools.contract_client import ContractServiceClient

logger = logging.getLogger("vibelegal.composer.lifecycle")

SAVED_NOTICE_SECONDS = 3.0


class DraftPhase(Enum):
    """Where a draft is in its lifecycle."""

    EMPTY = "empty"
    CONFIGURING = "configuring"
    SUBMITTING = "submitting"  # Generation request in flight
    GENERATED = "generated"
    EDITING = "editing"  # Raw text editor
    PREVIEWING = "previewing"  # Rendered view
    SAVING = "saving"  # Save request in flight
    SAVED = "saved"
    FAILED = "failed"


_REVIEW_PHASES = (DraftPhase.GENERATED, DraftPhase.EDITING, DraftPhase.PREVIEWING)


@dataclass
class DraftState:
    """Everything the user has entered or received for one draft.

    Attributes:
        selected_type: The chosen contract type, if any.
        parties: Client and other party names.
        parameter_values: Entered parameter values; unset keys are absent.
        option_values: Selected clause variations, total over the type's options.
        phase: Current lifecycle phase.
        document: The generated contract once generation succeeded.
        last_error: The most recent validation or service error.
    """

    selected_type: ContractTypeDefinition | None = None
    parties: Parties = field(default_factory=Parties)
    parameter_values: dict[str, str] = field(default_factory=dict)
    option_values: dict[str, str] = field(default_factory=dict)
    phase: DraftPhase = DraftPhase.EMPTY
    document: DraftDocument | None = None
    last_error: ComposerError | None = None


class DraftLifecycle:
    """State machine for composing a single contract."""

    def __init__(
        self,
        session: SessionContext,
        *,
        catalog: ContractTypeCatalog | None = None,
        client: ContractServiceClient | None = None,
        exporter: ContractExporter | None = None,
        clock: Callable[[], float] = time.monotonic,
        saved_notice_seconds: float = SAVED_NOTICE_SECONDS,
    ) -> None:
        self.session = session
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        # Close only a client this draft created itself
        self._owns_client = client is None and exporter is None
        if client is None:
            client = exporter.client if exporter is not None else ContractServiceClient(session)
        self.client = client
        self.exporter = exporter if exporter is not None else ContractExporter(session, client)
        self.saved_notice_seconds = saved_notice_seconds
        self._clock = clock
        self.state = DraftState()
        self._resume_phase: DraftPhase | None = None
        self._epoch = 0  # Bumped when the draft is discarded
        self._saved_until = 0.0

    async def __aenter__(self) -> DraftLifecycle:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client if this draft created it."""
        if self._owns_client:
            await self.client.aclose()

    # ------------------------------------------------------------------
    # Phase bookkeeping
    # ------------------------------------------------------------------

    @property
    def phase(self) -> DraftPhase:
        return self.state.phase

    @property
    def document(self) -> DraftDocument | None:
        return self.state.document

    @property
    def last_error(self) -> ComposerError | None:
        return self.state.last_error

    @property
    def saved_notice(self) -> bool:
        """True for a short window after a successful save."""
        return self._clock() < self._saved_until

    def _interactive_phase(self) -> DraftPhase:
        # FAILED and SAVED behave like the phase they came from
        if self.state.phase in (DraftPhase.FAILED, DraftPhase.SAVED) and self._resume_phase:
            return self._resume_phase
        return self.state.phase

    def _require(self, action: str, *phases: DraftPhase) -> DraftPhase:
        current = self._interactive_phase()
        if current not in phases:
            raise InvalidTransitionError(action, self.state.phase.value)
        return current

    def _enter(self, phase: DraftPhase, resume: DraftPhase | None = None) -> None:
        if phase is not self.state.phase:
            logger.debug("Draft %s -> %s", self.state.phase.value, phase.value)
        self.state.phase = phase
        self._resume_phase = resume

    def _resume(self) -> None:
        if self.state.phase in (DraftPhase.FAILED, DraftPhase.SAVED) and self._resume_phase:
            self._enter(self._resume_phase)

    def _is_stale(self, epoch: int, expected: DraftPhase) -> bool:
        return epoch != self._epoch or self.state.phase is not expected

    def _require_document(self, action: str) -> DraftDocument:
        if self.state.document is None:
            raise InvalidTransitionError(action, self.state.phase.value)
        return self.state.document

    # ------------------------------------------------------------------
    # Configuring
    # ------------------------------------------------------------------

    def select_type(self, type_id: str) -> ContractTypeDefinition:
        """Select a contract type.

        Prior parameter values and clause selections are discarded without
        confirmation; clause options are reset to their defaults.

        Raises:
            ContractTypeNotFoundError: If the type is not in the catalog.
        """
        self._require("select a contract type", DraftPhase.EMPTY, DraftPhase.CONFIGURING)
        definition = self.catalog.lookup(type_id)

        self.state.selected_type = definition
        self.state.parameter_values = {}
        self.state.option_values = default_options(definition)
        self.state.last_error = None
        self._enter(DraftPhase.CONFIGURING)
        logger.info("Selected contract type %s", definition.id)
        return definition

    def edit_parties(
        self,
        *,
        client_name: str | None = None,
        other_party_name: str | None = None,
    ) -> None:
        """Update one or both party names."""
        self._require("edit the parties", DraftPhase.EMPTY, DraftPhase.CONFIGURING)
        self._resume()
        if client_name is not None:
            self.state.parties.client_name = client_name
        if other_party_name is not None:
            self.state.parties.other_party_name = other_party_name

    def edit_parameter(self, key: str, value: str) -> None:
        self._require("edit parameters", DraftPhase.CONFIGURING)
        definition = self.state.selected_type
        if definition is None or definition.parameter(key) is None:
            raise UnknownFieldError(key, definition.id if definition else "")
        self._resume()
        self.state.parameter_values[key] = value

    def edit_option(self, key: str, value: str) -> None:
        self._require("edit clause options", DraftPhase.CONFIGURING)
        definition = self.state.selected_type
        if definition is None or definition.clause_option(key) is None:
            raise UnknownFieldError(key, definition.id if definition else "")
        self._resume()
        self.state.option_values[key] = value

    def form(self) -> list[FormSection]:
        """Fields for the selected contract type, filled with current values."""
        if self.state.selected_type is None:
            return []
        return build_form(
            self.state.selected_type,
            self.state.parameter_values,
            self.state.option_values,
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def submit(self) -> DraftDocument | None:
        """Validate the draft and request generation.

        A call made while a submission is in flight is ignored. Validation,
        network and service failures are recorded in ``last_error``.

        Returns:
            The generated document, or None if nothing was generated.
        """
        if self.state.phase is DraftPhase.SUBMITTING:
            logger.info("Generation already in flight, ignoring submit")
            return None

        self._require("submit", DraftPhase.CONFIGURING)
        self._resume()

        try:
            request = bind(
                self.state.selected_type,
                self.state.parties,
                self.state.parameter_values,
                self.state.option_values,
            )
        except ValidationError as exc:
            logger.info("Draft not submitted: %s", exc.message)
            self.state.last_error = exc
            return None

        self.state.last_error = None
        epoch = self._epoch
        self._enter(DraftPhase.SUBMITTING)

        try:
            response = await self.client.generate_contract(request)
        except ComposerError as exc:
            if self._is_stale(epoch, DraftPhase.SUBMITTING):
                logger.warning("Discarding generation failure for an abandoned draft")
                return None
            logger.warning("Generation failed: %s", exc.to_dict())
            self.state.last_error = exc
            self._enter(DraftPhase.FAILED, resume=DraftPhase.CONFIGURING)
            return None
        except BaseException:
            # Cancellation included: never leave the draft stuck in flight
            if not self._is_stale(epoch, DraftPhase.SUBMITTING):
                self._enter(DraftPhase.CONFIGURING)
            raise

        if self._is_stale(epoch, DraftPhase.SUBMITTING):
            logger.warning("Discarding generated %s for an abandoned draft", response.contract_type)
            return None

        self.state.document = DraftDocument.from_response(response)
        self._enter(DraftPhase.GENERATED)
        return self.state.document

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def toggle_edit(self) -> DraftPhase:
        """Switch between the raw editor and the rendered preview."""
        current = self._require("toggle the editor", *_REVIEW_PHASES)
        target = DraftPhase.PREVIEWING if current is DraftPhase.EDITING else DraftPhase.EDITING
        self._enter(target)
        return target

    def edit_content(self, content: str) -> None:
        """Replace the document text. Any text is accepted."""
        self._require("edit the contract", DraftPhase.EDITING)
        self._resume()
        self._require_document("edit the contract").content = content

    def set_title(self, title: str) -> None:
        self._require("rename the contract", *_REVIEW_PHASES)
        self._resume()
        self._require_document("rename the contract").title = title

    def display(self) -> str:
        """The raw text while editing, rendered HTML otherwise."""
        document = self._require_document("display the contract")
        if self._interactive_phase() is DraftPhase.EDITING:
            return document.content
        return render(document.content)

    # ------------------------------------------------------------------
    # Saving and export
    # ------------------------------------------------------------------

    async def save(self) -> SaveAck | None:
        """Persist the document through the exporter.

        Requires a non-empty title. A call made while a save is in flight
        is ignored. On failure the draft is left unchanged.

        Returns:
            The service acknowledgement, or None if nothing was saved.
        """
        if self.state.phase is DraftPhase.SAVING:
            logger.info("Save already in flight, ignoring")
            return None

        current = self._require("save", *_REVIEW_PHASES)
        document = self._require_document("save")

        if not document.title.strip():
            self.state.last_error = MissingTitleError()
            return None

        self.state.last_error = None
        epoch = self._epoch
        self._enter(DraftPhase.SAVING, resume=current)

        try:
            ack = await self.exporter.save(document)
        except ComposerError as exc:
            if self._is_stale(epoch, DraftPhase.SAVING):
                logger.warning("Discarding save failure for an abandoned draft")
                return None
            logger.warning("Save failed: %s", exc.to_dict())
            self.state.last_error = exc
            self._enter(DraftPhase.FAILED, resume=current)
            return None
        except BaseException:
            if not self._is_stale(epoch, DraftPhase.SAVING):
                self._enter(current)
            raise

        if self._is_stale(epoch, DraftPhase.SAVING):
            logger.warning("Discarding save acknowledgement for an abandoned draft")
            return None

        self._saved_until = self._clock() + self.saved_notice_seconds
        self._enter(DraftPhase.SAVED, resume=current)
        return ack

    def export_file(self) -> ExportedFile:
        return self.exporter.to_file(self._require_document("export the contract"))

    def download(self, directory: str | Path) -> Path:
        """Write the document as markdown. Does not change the phase."""
        return self.exporter.download(self._require_document("download the contract"), directory)

    def compose_another(self) -> None:
        """Discard the whole draft and start over."""
        self._epoch += 1
        self.state = DraftState()
        self._resume_phase = None
        self._saved_until = 0.0
        logger.info("Draft discarded")
