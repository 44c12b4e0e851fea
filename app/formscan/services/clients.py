"""
Interfaces of the external collaborators used by the upload pipeline.

The pipeline and the listing service only depend on these protocols, so
tests can hand in in-memory implementations.
"""

from typing import Any, Protocol


class ObjectStore(Protocol):
    """Binary blob storage for the uploaded form images."""

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return a retrieval URL."""
        ...


class ExtractionClient(Protocol):
    """Vision model that turns a form image into JSON text."""

    def extract(self, image_base64: str, mime_type: str) -> str:
        """Return the raw model response, expected to be a JSON object."""
        ...


class DocumentStore(Protocol):
    """Per-key JSON persistence (system of record)."""

    def collection_exists(self) -> bool:
        ...

    def ensure_collection(self) -> bool:
        """Create the collection if missing. Returns True if it was created."""
        ...

    def put(self, key: str, document: dict[str, Any]) -> None:
        ...

    def get(self, key: str) -> dict[str, Any] | None:
        ...

    def list_documents(self) -> list[tuple[str, dict[str, Any]]]:
        """All ``(key, document)`` pairs, newest ``uploadedAt`` first."""
        ...


class SpreadsheetClient(Protocol):
    """Worksheet receiving one summary row per record."""

    def append_row(self, fields: dict[str, str]) -> None:
        """Append ``fields`` as one row, matched to the header by name."""
        ...
