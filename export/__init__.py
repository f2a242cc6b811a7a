"""Export and persistence adapter for generated contracts."""

from export.adapter import (
    MARKDOWN_MIME_TYPE,
    ContractExporter,
    ExportedFile,
    sanitize_filename,
)

__all__ = [
    "MARKDOWN_MIME_TYPE",
    "ContractExporter",
    "ExportedFile",
    "sanitize_filename",
]
