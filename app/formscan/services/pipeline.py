"""
Upload pipeline: one photographed form in, one stored FeedbackRecord out.

Stages run strictly in order and the first failure stops the run. Nothing
is retried or rolled back; the returned UploadResult records which external
side effects had already happened.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ..models import FeedbackRecord
from .ai.validation import parse_extraction_response, validate_extracted_form
from .clients import DocumentStore, ExtractionClient, ObjectStore, SpreadsheetClient
from .exceptions import FormPipelineError
from .image_service import ImageService
from .storage_service import build_object_key

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline stages, in execution order."""

    VALIDATE_INPUT = "validate_input"
    STORE_IMAGE = "store_image"
    EXTRACT = "extract"
    VALIDATE_SCHEMA = "validate_schema"
    PERSIST = "persist"
    MIRROR = "mirror"


class CommitState(str, Enum):
    """How far a run got in terms of external side effects."""

    COMMITTED = "committed"  # every stage succeeded
    PARTIAL = "partial"  # failed after at least one side effect
    REJECTED = "rejected"  # failed before any side effect


@dataclass
class UploadResult:
    """Outcome of one pipeline run."""

    state: CommitState
    uid: str | None = None
    record: FeedbackRecord | None = None
    error: FormPipelineError | None = None
    failed_stage: Stage | None = None
    committed_stages: list[Stage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == CommitState.COMMITTED


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class UploadPipeline:
    """
    Coordinates the object store, extraction client, document store and
    spreadsheet mirror for a single upload.

    All collaborators are passed in; the pipeline keeps no state between
    runs, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        extraction_client: ExtractionClient,
        document_store: DocumentStore,
        spreadsheet: SpreadsheetClient,
        image_service: ImageService | None = None,
    ):
        self.object_store = object_store
        self.extraction_client = extraction_client
        self.document_store = document_store
        self.spreadsheet = spreadsheet
        self.image_service = image_service or ImageService()

    def run(
        self,
        image_bytes: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> UploadResult:
        """
        Process one uploaded form image.

        Args:
            image_bytes: Raw uploaded file content.
            filename: Original filename, used in the storage key.
            content_type: MIME type declared by the client.

        Returns:
            UploadResult; ``record`` is set only when ``ok`` is True.
        """
        committed: list[Stage] = []
        stage = Stage.VALIDATE_INPUT
        uid = None

        try:
            mime_type = self.image_service.resolve_mime_type(image_bytes, content_type)

            uid = str(uuid.uuid4())
            logger.info(
                "Processing upload %s: %s (%s, %d bytes)",
                uid, filename, mime_type, len(image_bytes),
            )

            stage = Stage.STORE_IMAGE
            key = build_object_key(uid, filename)
            image_url = self.object_store.upload(key, image_bytes, mime_type)
            committed.append(stage)

            stage = Stage.EXTRACT
            prepared = self.image_service.prepare(image_bytes, mime_type)
            raw = self.extraction_client.extract(prepared.base64_data, prepared.mime_type)
            parsed = parse_extraction_response(raw)

            stage = Stage.VALIDATE_SCHEMA
            form = validate_extracted_form(parsed)

            record = FeedbackRecord.from_extraction(
                form,
                uid=uid,
                image_url=image_url,
                uploaded_at=utc_timestamp(),
            )

            stage = Stage.PERSIST
            self.document_store.put(uid, record.to_document())
            committed.append(stage)
            logger.info("Record %s saved to document store", uid)

            stage = Stage.MIRROR
            self.spreadsheet.append_row(
                {
                    "UID": uid,
                    "Program": record.program,
                    "Program Date": record.program_date,
                    "Name": record.name,
                    "Room No": record.room_no,
                    "Image URL": image_url,
                }
            )
            committed.append(stage)

        except FormPipelineError as e:
            e.stage = stage.value
            state = CommitState.PARTIAL if committed else CommitState.REJECTED
            logger.error(
                "Upload %s failed at stage %s (%s, committed: %s): %s",
                uid or "-",
                stage.value,
                state.value,
                [s.value for s in committed] or "none",
                e,
            )
            return UploadResult(
                state=state,
                uid=uid,
                error=e,
                failed_stage=stage,
                committed_stages=committed,
            )

        logger.info("Upload %s processed successfully", uid)
        return UploadResult(
            state=CommitState.COMMITTED,
            uid=uid,
            record=record,
            committed_stages=committed,
        )
