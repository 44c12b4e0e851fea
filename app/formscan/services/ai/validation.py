"""
Parsing and schema validation of the extraction model output.

Handles:
- Strict JSON parsing of the raw response
- Required-field checks in a fixed order
- Backfilling of missing rating groups
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from ...models import (
    ASHRAM_EXPERIENCE_KEY,
    PROGRAM_EXPERIENCE_KEY,
    REQUIRED_FIELDS,
    ExtractedForm,
)
from ..exceptions import ExtractionParseError, SchemaValidationError

logger = logging.getLogger(__name__)


def parse_extraction_response(text: str) -> dict[str, Any]:
    """
    Parse the raw model response strictly as a JSON object.

    Raises:
        ExtractionParseError: If the text is not valid JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse extraction response: %s", text[:500])
        raise ExtractionParseError(
            f"Failed to parse extraction response: {e}"
        ) from e

    if not isinstance(data, dict):
        raise ExtractionParseError(
            f"Failed to parse extraction response: expected a JSON object, got {type(data).__name__}"
        )
    return data


def find_missing_fields(data: dict[str, Any]) -> list[str]:
    """
    Required keys that are absent or empty, in check order.

    Any falsy answer counts as missing, so a model that returns ``false`` or
    ``0`` for an unreadable field does not get past the check.
    """
    missing = []
    for field in REQUIRED_FIELDS:
        if not data.get(field):
            missing.append(field)
    return missing


def validate_extracted_form(data: dict[str, Any]) -> ExtractedForm:
    """
    Turn parsed model output into an ExtractedForm.

    Missing rating groups become empty groups; missing required fields do
    not.

    Raises:
        SchemaValidationError: If required fields are missing or a rating
            group is not an object.
    """
    missing = find_missing_fields(data)
    if missing:
        logger.error("Missing required fields in parsed data: %s", missing)
        raise SchemaValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing_fields=missing,
        )

    for group in (PROGRAM_EXPERIENCE_KEY, ASHRAM_EXPERIENCE_KEY):
        value = data.get(group)
        if value and not isinstance(value, dict):
            raise SchemaValidationError(
                f"Invalid extracted data: '{group}' must be an object"
            )

    try:
        return ExtractedForm.model_validate(data)
    except ValidationError as e:
        logger.error("Extracted data failed validation: %s", e)
        raise SchemaValidationError(f"Invalid extracted data: {e}") from e
