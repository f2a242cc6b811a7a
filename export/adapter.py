"""Export and persistence of generated contracts.

Exports are markdown files named after the contract title; saving goes to
the persistence service through the contract client. Neither touches the
draft document itself.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from composer.models import DraftDocument, SaveAck, SavedContractSummary
from composer.session import SessionContext
from tools.contract_client import ContractServiceClient

logger = logging.getLogger("vibelegal.export")

MARKDOWN_MIME_TYPE = "text/markdown;charset=utf-8"
EXPORT_SUFFIX = ".md"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class ExportedFile:
    """A downloadable rendition of a contract."""

    filename: str
    mime_type: str
    content: bytes


def sanitize_filename(title: str) -> str:
    """Replace every non-alphanumeric character with ``_`` and lower-case."""
    return _UNSAFE_FILENAME_CHARS.sub("_", title).lower()


class ContractExporter:
    """Turns a draft document into a file or a saved record."""

    def __init__(
        self,
        session: SessionContext,
        client: ContractServiceClient | None = None,
    ) -> None:
        self.session = session
        self._owns_client = client is None
        self.client = client if client is not None else ContractServiceClient(session)

    async def aclose(self) -> None:
        """Release the HTTP client if this exporter created it."""
        if self._owns_client:
            await self.client.aclose()

    def to_file(self, document: DraftDocument) -> ExportedFile:
        return ExportedFile(
            filename=f"{sanitize_filename(document.title)}{EXPORT_SUFFIX}",
            mime_type=MARKDOWN_MIME_TYPE,
            content=document.content.encode("utf-8"),
        )

    @contextmanager
    def _download_handle(self, exported: ExportedFile, directory: Path) -> Iterator[Path]:
        """Stage the export in a temporary file, removed on every exit path."""
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".download-", suffix=".part")
        handle = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as stream:
                stream.write(exported.content)
            yield handle
        finally:
            if handle.exists():
                handle.unlink()
            logger.debug("Released download handle %s", handle.name)

    def download(self, document: DraftDocument, directory: str | Path) -> Path:
        """Write the contract as ``<sanitized-title>.md`` into ``directory``.

        Returns:
            Path of the written file.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        exported = self.to_file(document)
        target = directory / exported.filename

        with self._download_handle(exported, directory) as handle:
            os.replace(handle, target)

        logger.info("Downloaded %s (%d bytes)", target, len(exported.content))
        return target

    async def save(self, document: DraftDocument) -> SaveAck:
        """Persist the document. The document is sent as-is and not modified."""
        ack = await self.client.save_contract(document.save_request())
        logger.info("Saved contract '%s'", document.title)
        return ack

    async def list_saved(self) -> list[SavedContractSummary]:
        return await self.client.list_user_contracts()
