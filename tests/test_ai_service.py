"""Tests for the extraction client and extraction output validation."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.formscan.services.ai import (
    EXTRACTION_PROMPT,
    OpenAIExtractionClient,
    build_messages,
    find_missing_fields,
    parse_extraction_response,
    validate_extracted_form,
)
from app.formscan.services.exceptions import (
    ExtractionError,
    ExtractionParseError,
    SchemaValidationError,
)


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestParseExtractionResponse:
    """Tests for strict JSON parsing."""

    def test_parses_object(self):
        """Test that a JSON object is returned as a dict."""
        assert parse_extraction_response('{"Program": "Sahaj"}') == {"Program": "Sahaj"}

    def test_invalid_json_raises(self):
        """Test that malformed JSON raises ExtractionParseError."""
        with pytest.raises(ExtractionParseError) as exc_info:
            parse_extraction_response("```json\n{}\n```")
        assert "Failed to parse" in str(exc_info.value)

    def test_non_object_raises(self):
        """Test that a JSON array is not accepted."""
        with pytest.raises(ExtractionParseError):
            parse_extraction_response('["Program"]')


class TestValidateExtractedForm:
    """Tests for required-field validation."""

    def test_valid_data_passes(self, full_extraction):
        """Test that complete data validates."""
        form = validate_extracted_form(full_extraction)
        assert form.name == "Asha Rao"

    def test_missing_fields_in_check_order(self):
        """Test that all missing required fields are named in order."""
        assert find_missing_fields({"Name": "A"}) == ["Program", "Program Date", "Room No"]

    def test_empty_values_count_as_missing(self, full_extraction):
        """Test that empty strings and nulls are treated as missing."""
        full_extraction["Program Date"] = ""
        full_extraction["Room No"] = None
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_extracted_form(full_extraction)
        assert exc_info.value.missing_fields == ["Program Date", "Room No"]
        assert str(exc_info.value) == "Missing required fields: Program Date, Room No"

    def test_false_and_zero_count_as_missing(self, full_extraction):
        """Test that falsy non-string answers are treated as missing."""
        full_extraction["Name"] = False
        full_extraction["Room No"] = 0
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_extracted_form(full_extraction)
        assert exc_info.value.missing_fields == ["Name", "Room No"]

    def test_numeric_room_number_accepted(self, full_extraction):
        """Test that a non-zero numeric answer is still present."""
        full_extraction["Room No"] = 12
        assert validate_extracted_form(full_extraction).room_no == "12"

    def test_missing_nested_groups_allowed(self, full_extraction):
        """Test that rating groups are optional."""
        del full_extraction["Program Experience"]
        del full_extraction["Overall Ashram Experience"]
        form = validate_extracted_form(full_extraction)
        assert form.program_experience.satisfaction is None

    def test_non_object_group_rejected(self, full_extraction):
        """Test that a rating group must be an object when present."""
        full_extraction["Program Experience"] = "Very good"
        with pytest.raises(SchemaValidationError):
            validate_extracted_form(full_extraction)


class TestOpenAIExtractionClient:
    """Tests for OpenAIExtractionClient with a stubbed OpenAI client."""

    def test_returns_raw_content(self, full_extraction):
        """Test that the model text is returned untouched."""
        openai_client = MagicMock()
        content = json.dumps(full_extraction)
        openai_client.chat.completions.create.return_value = _completion(content)
        client = OpenAIExtractionClient(api_key="sk-test", client=openai_client)

        assert client.extract("aGVsbG8=", "image/jpeg") == content

    def test_request_shape(self):
        """Test model, JSON mode and inline image of the request."""
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = _completion("{}")
        client = OpenAIExtractionClient(api_key="sk-test", model="gpt-4o", client=openai_client)

        client.extract("aGVsbG8=", "image/png")

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        user_content = kwargs["messages"][1]["content"]
        assert user_content[0]["text"] == EXTRACTION_PROMPT
        assert user_content[1]["image_url"]["url"] == "data:image/png;base64,aGVsbG8="

    def test_empty_response_raises(self):
        """Test that an empty body is an ExtractionError."""
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = _completion(None)
        client = OpenAIExtractionClient(api_key="sk-test", client=openai_client)

        with pytest.raises(ExtractionError) as exc_info:
            client.extract("aGVsbG8=", "image/jpeg")
        assert not isinstance(exc_info.value, ExtractionParseError)

    def test_sdk_failure_wrapped(self):
        """Test that SDK errors and timeouts become ExtractionError."""
        openai_client = MagicMock()
        openai_client.chat.completions.create.side_effect = TimeoutError("timed out")
        client = OpenAIExtractionClient(api_key="sk-test", client=openai_client)

        with pytest.raises(ExtractionError) as exc_info:
            client.extract("aGVsbG8=", "image/jpeg")
        assert "timed out" in str(exc_info.value)

    def test_missing_api_key(self):
        """Test that no client is built without an API key."""
        client = OpenAIExtractionClient(api_key="")
        with pytest.raises(ExtractionError):
            client.extract("aGVsbG8=", "image/jpeg")


class TestPrompt:
    """Tests for the fixed extraction prompt."""

    def test_prompt_lists_every_key(self):
        """Test that the prompt names the full key schema."""
        for key in (
            "Program",
            "Program Date",
            "Name",
            "Room No",
            "Program Experience",
            "How satisfied are you?",
            "Overall Ashram Experience",
            "Program arrangements?",
            "Suggestions",
            "Volunteer Preferences",
            "Contribution Interests",
        ):
            assert f'"{key}"' in EXTRACTION_PROMPT

    def test_messages_carry_system_prompt(self):
        """Test that the system message comes first."""
        messages = build_messages("eA==", "image/jpeg")
        assert messages[0]["role"] == "system"
        assert messages[1]["role"] == "user"
