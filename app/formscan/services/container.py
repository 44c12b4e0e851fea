"""
Construction of the service clients.

Built once at application startup from Settings and stored on
``app.state``; routers receive the pieces through FastAPI dependencies.
"""

import logging
from dataclasses import dataclass

from ..config import Settings
from ..database import build_engine
from .ai.extraction import OpenAIExtractionClient
from .clients import DocumentStore
from .document_store import SqlDocumentStore
from .pipeline import UploadPipeline
from .sheets_service import SheetsMirror
from .storage_service import GCSObjectStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the HTTP layer needs."""

    pipeline: UploadPipeline
    document_store: DocumentStore


def build_services(settings: Settings) -> ServiceContainer:
    """
    Create all external service clients from ``settings``.

    Args:
        settings: Validated application settings.

    Returns:
        ServiceContainer wired with the production clients.
    """
    engine = build_engine(settings.database_url, echo=settings.sql_debug)
    document_store = SqlDocumentStore(engine)
    logger.info("Document store initialized")

    object_store = GCSObjectStore.from_service_account(
        settings.google_service_account,
        settings.storage_bucket,
        url_expires=settings.signed_url_expires,
        timeout=settings.storage_timeout_seconds,
    )

    extraction_client = OpenAIExtractionClient(
        api_key=settings.openai_api_key,
        model=settings.extraction_model,
        timeout=settings.extraction_timeout_seconds,
    )

    spreadsheet = SheetsMirror.from_service_account(
        client_email=settings.google_service_account_email,
        private_key=settings.google_private_key,
        spreadsheet_id=settings.google_sheet_id,
        timeout=settings.sheets_timeout_seconds,
    )

    pipeline = UploadPipeline(
        object_store=object_store,
        extraction_client=extraction_client,
        document_store=document_store,
        spreadsheet=spreadsheet,
    )
    return ServiceContainer(pipeline=pipeline, document_store=document_store)
