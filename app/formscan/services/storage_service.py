"""
Object storage for uploaded form images using Google Cloud Storage.

Images are written under the ``forms/`` prefix and handed back as V2 signed
URLs that stay valid for as long as the record is of interest.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from google.api_core.exceptions import NotFound
from google.cloud import storage
from google.oauth2 import service_account

from .exceptions import ServiceUnavailable, StorageError

logger = logging.getLogger(__name__)

FORMS_PREFIX = "forms"


def build_object_key(uid: str, filename: str) -> str:
    """Storage key for an uploaded image: ``forms/{uid}-{filename}``."""
    return f"{FORMS_PREFIX}/{uid}-{filename}"


class GCSObjectStore:
    """
    Object store backed by a single GCS bucket.

    Uses a service account both to write objects and to sign the
    retrieval URLs.
    """

    def __init__(
        self,
        bucket: storage.Bucket,
        url_expires: datetime = datetime(2500, 3, 1, tzinfo=timezone.utc),
        timeout: float = 60.0,
    ):
        self.bucket = bucket
        self.url_expires = url_expires
        self.timeout = timeout

    @classmethod
    def from_service_account(
        cls,
        info: dict[str, Any],
        bucket_name: str,
        url_expires: datetime,
        timeout: float = 60.0,
    ) -> "GCSObjectStore":
        credentials = service_account.Credentials.from_service_account_info(info)
        client = storage.Client(project=info["project_id"], credentials=credentials)
        logger.info("Storage bucket initialized: %s", bucket_name)
        return cls(client.bucket(bucket_name), url_expires=url_expires, timeout=timeout)

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        """
        Upload ``data`` and return a signed read URL.

        Raises:
            ServiceUnavailable: If the bucket does not exist.
            StorageError: For any other upload or signing failure.
        """
        blob = self.bucket.blob(key)
        try:
            logger.info("Uploading %s (%d bytes) to bucket %s", key, len(data), self.bucket.name)
            blob.upload_from_string(data, content_type=content_type, timeout=self.timeout)
            url = blob.generate_signed_url(
                version="v2",
                expiration=self.url_expires,
                method="GET",
            )
        except NotFound as e:
            logger.error("Storage bucket %s not found: %s", self.bucket.name, e)
            raise ServiceUnavailable(
                "Storage service not available",
                hint="Please ensure the storage bucket exists and the service account can write to it",
                details=str(e),
            ) from e
        except Exception as e:
            logger.exception("Storage upload failed for %s", key)
            raise StorageError(f"Storage error: {e}") from e

        logger.info("Stored %s", key)
        return url
