"""
SQL-backed document store for feedback records.

Documents are stored whole as JSON in the ``feedback`` table and keyed by
the record uid. Collection initialization is explicit and idempotent.
"""

import logging
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from ..database import Base, build_session_factory
from ..models_db import FEEDBACK_COLLECTION, FeedbackDocument
from .exceptions import PersistenceError, ServiceUnavailable

logger = logging.getLogger(__name__)


class SqlDocumentStore:
    """
    Document store on top of SQLAlchemy.

    Connection failures are reported as ServiceUnavailable; every other
    database error becomes a PersistenceError.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    def collection_exists(self) -> bool:
        try:
            return inspect(self.engine).has_table(FEEDBACK_COLLECTION)
        except SQLAlchemyError as e:
            raise self._translate(e, "inspect collection") from e

    def ensure_collection(self) -> bool:
        """
        Create the feedback table when it does not exist yet.

        Returns:
            True if the table was created by this call.
        """
        if self.collection_exists():
            return False
        try:
            Base.metadata.create_all(
                bind=self.engine,
                tables=[FeedbackDocument.__table__],
                checkfirst=True,
            )
        except SQLAlchemyError as e:
            raise self._translate(e, "create collection") from e
        logger.info("Created '%s' collection", FEEDBACK_COLLECTION)
        return True

    def put(self, key: str, document: dict[str, Any]) -> None:
        row = FeedbackDocument(
            uid=key,
            uploaded_at=document["uploadedAt"],
            data=document,
        )
        with self.session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise PersistenceError(
                    f"Document store error: document {key} already exists"
                ) from e
            except SQLAlchemyError as e:
                session.rollback()
                raise self._translate(e, "write document") from e

    def get(self, key: str) -> dict[str, Any] | None:
        with self.session_factory() as session:
            try:
                row = session.get(FeedbackDocument, key)
            except SQLAlchemyError as e:
                raise self._translate(e, "read document") from e
            return dict(row.data) if row else None

    def list_documents(self) -> list[tuple[str, dict[str, Any]]]:
        query = select(FeedbackDocument).order_by(
            FeedbackDocument.uploaded_at.desc(),
            FeedbackDocument.uid,
        )
        with self.session_factory() as session:
            try:
                rows = session.scalars(query).all()
            except SQLAlchemyError as e:
                raise self._translate(e, "list documents") from e
            return [(row.uid, dict(row.data)) for row in rows]

    @staticmethod
    def _translate(error: SQLAlchemyError, action: str) -> Exception:
        logger.error("Document store failed to %s: %s", action, error)
        if isinstance(error, OperationalError):
            return ServiceUnavailable(
                "Document store not available",
                hint="Please ensure the database is running and reachable",
                details=str(error.orig or error),
            )
        return PersistenceError(f"Document store error: {error}")
