"""Pytest configuration and fixtures."""

import io
import json
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.formscan.database import build_engine
from app.formscan.main import create_app
from app.formscan.services.container import ServiceContainer
from app.formscan.services.document_store import SqlDocumentStore
from app.formscan.services.pipeline import UploadPipeline


class FakeObjectStore:
    """In-memory object store returning predictable signed URLs."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.objects: dict[str, tuple[bytes, str]] = {}

    @staticmethod
    def url_for(key: str) -> str:
        return f"https://storage.googleapis.com/test-bucket/{key}?Signature=fake"

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        if self.error:
            raise self.error
        self.objects[key] = (data, content_type)
        return self.url_for(key)


class FakeExtractionClient:
    """Extraction client answering with a canned response."""

    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def extract(self, image_base64: str, mime_type: str) -> str:
        self.calls.append((image_base64, mime_type))
        if self.error:
            raise self.error
        return self.response


class FakeSpreadsheet:
    """Spreadsheet collecting appended rows."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.rows: list[dict[str, str]] = []

    def append_row(self, fields: dict[str, str]) -> None:
        if self.error:
            raise self.error
        self.rows.append(dict(fields))


@pytest.fixture
def full_extraction() -> dict[str, Any]:
    """A complete extraction response as the model would return it."""
    return {
        "Program": "Happiness Program",
        "Program Date": "2024-03-15",
        "Name": "Asha Rao",
        "Room No": "B-204",
        "Program Experience": {
            "How satisfied are you?": "Very satisfied",
            "How were you feeling before the program?": "Stressed",
            "How were you feeling after the program?": "Calm",
            "How likely would you recommend this program?": "10",
        },
        "Suggestions": "More evening sessions",
        "Overall Ashram Experience": {
            "Housing?": "Good",
            "Hygiene and cleanliness?": "Excellent",
            "Dining Experience?": "Good",
            "Program arrangements?": "Excellent",
        },
        "Volunteer Preferences": "Kitchen seva",
        "Contribution Interests": "Teaching",
    }


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A real JPEG of roughly 10KB."""
    image = Image.effect_noise((96, 96), 64).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=90)
    return buffer.getvalue()


@pytest.fixture
def document_store() -> SqlDocumentStore:
    """Document store on in-memory SQLite with the collection created."""
    store = SqlDocumentStore(build_engine("sqlite://"))
    store.ensure_collection()
    return store


@pytest.fixture
def empty_document_store() -> SqlDocumentStore:
    """Document store whose collection has never been created."""
    return SqlDocumentStore(build_engine("sqlite://"))


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def extraction_client(full_extraction: dict[str, Any]) -> FakeExtractionClient:
    return FakeExtractionClient(response=json.dumps(full_extraction))


@pytest.fixture
def spreadsheet() -> FakeSpreadsheet:
    return FakeSpreadsheet()


@pytest.fixture
def pipeline(
    object_store: FakeObjectStore,
    extraction_client: FakeExtractionClient,
    document_store: SqlDocumentStore,
    spreadsheet: FakeSpreadsheet,
) -> UploadPipeline:
    return UploadPipeline(
        object_store=object_store,
        extraction_client=extraction_client,
        document_store=document_store,
        spreadsheet=spreadsheet,
    )


@pytest.fixture
def client(
    pipeline: UploadPipeline,
    document_store: SqlDocumentStore,
) -> Generator[TestClient, None, None]:
    """Create a test client wired to the fake collaborators."""
    services = ServiceContainer(pipeline=pipeline, document_store=document_store)
    with TestClient(create_app(services=services)) as test_client:
        yield test_client
