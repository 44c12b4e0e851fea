"""
Read path for stored feedback records.
"""

import logging
from typing import Any

from .clients import DocumentStore

logger = logging.getLogger(__name__)


def list_feedback(store: DocumentStore) -> list[dict[str, Any]]:
    """
    Return every stored record, newest ``uploadedAt`` first.

    Each record carries its store key as ``id``. A store whose collection
    has not been created yet is initialized and reported as empty.
    """
    if not store.collection_exists():
        logger.info("Feedback collection does not exist yet, initializing it")
        store.ensure_collection()
        return []

    feedback = [{"id": key, **document} for key, document in store.list_documents()]
    logger.info("Fetched %d feedback entries", len(feedback))
    return feedback
