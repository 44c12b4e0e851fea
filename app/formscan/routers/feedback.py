"""
Router for reading captured feedback.

Handles:
- Listing of every stored record, newest first
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..services.clients import DocumentStore
from ..services.exceptions import FormPipelineError
from ..services.feedback_service import list_feedback
from .dependencies import get_document_store
from .errors import FETCH_FAILED, error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["feedback"])


@router.get("/feedback", response_model=list[dict[str, Any]])
async def get_feedback(
    store: Annotated[DocumentStore, Depends(get_document_store)],
):
    """
    List all feedback records ordered by upload time (newest first).

    Every record includes its store identifier as ``id``.
    """
    try:
        return await run_in_threadpool(list_feedback, store)
    except FormPipelineError as e:
        logger.error("Failed to fetch feedback: %s", e)
        return error_response(e, FETCH_FAILED)
    except Exception as e:
        logger.exception("Unexpected error fetching feedback")
        return error_response(e, FETCH_FAILED)
