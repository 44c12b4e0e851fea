"""
Mapping of pipeline and store errors to HTTP responses.
"""

import logging

from fastapi import status
from fastapi.responses import JSONResponse

from ..services.exceptions import FormPipelineError, InvalidInput, ServiceUnavailable

logger = logging.getLogger(__name__)

UPLOAD_FAILED = "Failed to process upload"
FETCH_FAILED = "Failed to fetch feedback"


def error_response(error: Exception, fallback: str) -> JSONResponse:
    """
    Build the JSON error body for ``error``.

    Args:
        error: The failure raised or reported by a service.
        fallback: Top-level ``error`` text for generic 500 responses.
    """
    if isinstance(error, InvalidInput):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": error.message},
        )

    if isinstance(error, ServiceUnavailable):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": error.message,
                "message": error.hint,
                "details": error.details,
            },
        )

    code = error.code if isinstance(error, FormPipelineError) else "internal_error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": fallback, "details": str(error), "code": code},
    )
