"""
Router for the form upload endpoint.

Handles:
- Image upload, extraction and storage of one feedback form
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..models import UploadResponse
from ..services.pipeline import UploadPipeline
from .dependencies import get_upload_pipeline
from .errors import UPLOAD_FAILED, error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_form(
    pipeline: Annotated[UploadPipeline, Depends(get_upload_pipeline)],
    image: Annotated[UploadFile | None, File(description="Photo of a feedback form")] = None,
):
    """
    Upload a photographed feedback form.

    Stores the image, extracts the form fields with the vision model, saves
    the record and mirrors it to the spreadsheet. Returns the stored record.
    """
    if image is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "No image file provided"},
        )

    try:
        file_bytes = await image.read()
        logger.info(
            "Received file: %s (%s, %d bytes)",
            image.filename,
            image.content_type,
            len(file_bytes),
        )

        # SDK calls block; keep them off the event loop
        result = await run_in_threadpool(
            pipeline.run,
            file_bytes,
            image.filename or "upload",
            image.content_type,
        )
    except Exception as e:
        logger.exception("Unexpected error processing upload")
        return error_response(e, UPLOAD_FAILED)
    finally:
        await image.close()

    if not result.ok:
        return error_response(result.error, UPLOAD_FAILED)

    return UploadResponse(success=True, data=result.record.to_document())
