"""
Image handling for uploaded form photos using Pillow.

Validates that the upload is a readable image, settles its MIME type and
prepares the base64 payload sent to the vision model.
"""

import base64
import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .exceptions import ExtractionError, InvalidInput

logger = logging.getLogger(__name__)


@dataclass
class PreparedImage:
    """Inline image payload for the extraction client."""

    base64_data: str
    mime_type: str
    width: int
    height: int


class ImageService:
    """
    Service for form image operations.

    Phone photos are often far larger than the model needs; anything above
    ``max_size`` pixels on the long side is downscaled before encoding.
    """

    def __init__(self, max_size: int = 2048):
        """
        Initialize the image service.

        Args:
            max_size: Longest side, in pixels, of the image sent to the model.
        """
        self.max_size = max_size

    def resolve_mime_type(self, data: bytes, declared: str | None = None) -> str:
        """
        Check that ``data`` is an image and return its MIME type.

        The declared type wins when it is an ``image/*`` type; otherwise the
        type is derived from the decoded format.

        Raises:
            InvalidInput: If the payload is empty or not a readable image.
        """
        if not data:
            raise InvalidInput("No image file provided")

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                detected = Image.MIME.get(image.format or "")
            # verify() leaves pixel data undecoded; truncated files only fail on load
            with Image.open(io.BytesIO(data)) as image:
                image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
            logger.warning("Rejected unreadable upload: %s", e)
            raise InvalidInput("Uploaded file is not a readable image") from e

        if declared and declared.lower().startswith("image/"):
            return declared.lower()
        if not detected:
            raise InvalidInput("Uploaded file is not a supported image format")
        return detected

    def prepare(self, data: bytes, mime_type: str) -> PreparedImage:
        """
        Encode ``data`` for the model, downscaling it when too large.

        Raises:
            ExtractionError: If the image cannot be decoded or re-encoded.
        """
        try:
            return self._prepare(data, mime_type)
        except (Image.DecompressionBombError, OSError, ValueError) as e:
            logger.error("Could not prepare image for extraction: %s", e)
            raise ExtractionError(f"Extraction error: could not prepare image: {e}") from e

    def _prepare(self, data: bytes, mime_type: str) -> PreparedImage:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            if max(width, height) <= self.max_size:
                return PreparedImage(
                    base64_data=base64.b64encode(data).decode("utf-8"),
                    mime_type=mime_type,
                    width=width,
                    height=height,
                )

            ratio = self.max_size / max(width, height)
            new_size = (int(width * ratio), int(height * ratio))
            logger.info("Downscaling image from %dx%d to %dx%d", width, height, *new_size)
            resized = image.resize(new_size, Image.Resampling.LANCZOS)
            # PNG cannot hold CMYK or YCbCr
            if resized.mode not in ("RGB", "RGBA", "L", "LA"):
                resized = resized.convert("RGB")

        buffer = io.BytesIO()
        resized.save(buffer, format="PNG", optimize=True)
        return PreparedImage(
            base64_data=base64.b64encode(buffer.getvalue()).decode("utf-8"),
            mime_type="image/png",
            width=new_size[0],
            height=new_size[1],
        )
