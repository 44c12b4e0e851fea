"""
Services package for the feedback form digitizer.

Contains:
- pipeline: the upload orchestration
- feedback_service: the listing read path
- storage_service, document_store, sheets_service, ai: external collaborators
- container: wiring of the collaborators from settings
"""

from .container import ServiceContainer, build_services
from .pipeline import CommitState, Stage, UploadPipeline, UploadResult

__all__ = [
    "CommitState",
    "ServiceContainer",
    "Stage",
    "UploadPipeline",
    "UploadResult",
    "build_services",
]
