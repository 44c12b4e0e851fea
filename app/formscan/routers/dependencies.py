"""
FastAPI dependencies exposing the services built at startup.
"""

from fastapi import Request

from ..services.clients import DocumentStore
from ..services.container import ServiceContainer
from ..services.pipeline import UploadPipeline


def get_services(request: Request) -> ServiceContainer:
    """The container stored on ``app.state`` by the lifespan handler."""
    return request.app.state.services


def get_upload_pipeline(request: Request) -> UploadPipeline:
    return get_services(request).pipeline


def get_document_store(request: Request) -> DocumentStore:
    return get_services(request).document_store
