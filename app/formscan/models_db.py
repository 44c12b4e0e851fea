"""
SQLAlchemy database models for the document store.

A single table holds the ``feedback`` collection: one JSON document per
record, keyed by the record's ``uid``.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base

FEEDBACK_COLLECTION = "feedback"


class FeedbackDocument(Base):
    """
    Persisted feedback document.

    ``uploaded_at`` duplicates the document's ``uploadedAt`` field so the
    collection can be ordered without looking inside the JSON.
    """

    __tablename__ = FEEDBACK_COLLECTION

    uid: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    uploaded_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        index=True,
        comment="ISO-8601 UTC timestamp, sorts lexicographically",
    )
    data: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="Full FeedbackRecord as JSON",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<FeedbackDocument(uid={self.uid}, uploaded_at='{self.uploaded_at}')>"
