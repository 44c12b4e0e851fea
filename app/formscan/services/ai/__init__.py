"""
AI package for reading feedback forms.

- extraction: OpenAI vision client and the fixed extraction prompt
- validation: strict JSON parsing and required-field checks
"""

from .extraction import EXTRACTION_PROMPT, OpenAIExtractionClient, build_messages
from .validation import (
    find_missing_fields,
    parse_extraction_response,
    validate_extracted_form,
)

__all__ = [
    "EXTRACTION_PROMPT",
    "OpenAIExtractionClient",
    "build_messages",
    "find_missing_fields",
    "parse_extraction_response",
    "validate_extracted_form",
]
