"""
Form field extraction from feedback form photos.

Uses an OpenAI vision model with a fixed prompt and JSON-object response
format. The client returns the raw response text; parsing and schema checks
live in the validation module.
"""

import logging
from typing import Any

from ..exceptions import ExtractionError

logger = logging.getLogger(__name__)


# =============================================================================
# Extraction Prompt
# =============================================================================

EXTRACTION_SYSTEM_PROMPT = """You are a precise Data Entry Clerk digitizing handwritten feedback forms.
Read the form in the image and transcribe the answers exactly as written.

## Rules:
1. Only return the keys listed in the user prompt. Do not add extra keys.
2. If an answer is blank or illegible, use an empty string. DO NOT HALLUCINATE.
3. For rating questions, return the option that is ticked or circled.
4. Respond with a single JSON object and nothing else."""

EXTRACTION_PROMPT = """Please analyze this feedback form image and extract the following information in a structured format:
- Program name and date
- Room number and accommodation details
- Name of participant
- Program experience ratings
- Suggestions
- Overall ashram experience ratings
- Volunteer preferences
- Contribution interests
Please format the response as a JSON object with these exact keys:
{
  "Program": "string",
  "Program Date": "string",
  "Name": "string",
  "Room No": "string",
  "Program Experience": {
    "How satisfied are you?": "string",
    "How were you feeling before the program?": "string",
    "How were you feeling after the program?": "string",
    "How likely would you recommend this program?": "string"
  },
  "Suggestions": "string",
  "Overall Ashram Experience": {
    "Housing?": "string",
    "Hygiene and cleanliness?": "string",
    "Dining Experience?": "string",
    "Program arrangements?": "string"
  },
  "Volunteer Preferences": "string",
  "Contribution Interests": "string"
}"""


def build_messages(image_base64: str, mime_type: str) -> list[dict[str, Any]]:
    """Chat messages carrying the prompt and the inline image."""
    return [
        {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": EXTRACTION_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:{mime_type};base64,{image_base64}",
                        "detail": "high",
                    },
                },
            ],
        },
    ]


# =============================================================================
# Extraction Client
# =============================================================================


class OpenAIExtractionClient:
    """
    Extraction client for OpenAI vision-capable chat models.

    The OpenAI client is created lazily on first use.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1",
        timeout: float = 120.0,
        client: Any = None,
    ):
        """
        Initialize the extraction client.

        Args:
            api_key: OpenAI API key.
            model: OpenAI model to use (must support vision).
            timeout: Per-request timeout in seconds.
            client: Pre-built OpenAI client (used by tests).
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ExtractionError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def extract(self, image_base64: str, mime_type: str) -> str:
        """
        Send the form image to the model.

        Args:
            image_base64: Base64-encoded image bytes.
            mime_type: MIME type of the encoded image.

        Returns:
            Raw response text, expected to hold a JSON object.

        Raises:
            ExtractionError: If the call fails, times out or returns nothing.
        """
        logger.info("Sending form image to %s (%s)", self.model, mime_type)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(image_base64, mime_type),
                response_format={"type": "json_object"},
            )
        except ExtractionError:
            raise
        except Exception as e:
            logger.exception("Extraction request failed")
            raise ExtractionError(f"Extraction error: {e}") from e

        content = None
        if response and response.choices:
            content = response.choices[0].message.content
        if not content:
            logger.error("Empty response from extraction model: %r", response)
            raise ExtractionError("Extraction error: empty response from extraction model")

        logger.info("Received response from extraction model")
        logger.debug("Raw extraction response: %s", content)
        return content
