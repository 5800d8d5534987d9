# File: services/persistence_service.py
import asyncio
import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from database.models.report_model import Report
from services.errors import PersistenceError

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Insert-and-return record store for completed reports and saved searches,
    keyed by user id. Session work runs in a worker thread.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _insert(
        self,
        user_id: str,
        title: str,
        content: Optional[str],
        papers: List[Any],
        record_type: str,
        created_at: Optional[datetime],
    ) -> dict:
        db = self.session_factory()
        try:
            row = Report(
                user_id=user_id,
                title=title,
                content=content,
                papers=papers,
                type=record_type,
            )
            if created_at is not None:
                row.created_at = created_at
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.to_dict()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ DB write failed for {record_type} '{(title or '')[:50]}': {e}", exc_info=True)
            raise PersistenceError(f"Failed to save {record_type}: {e}") from e
        finally:
            db.close()

    async def insert(
        self,
        user_id: str,
        title: str,
        content: Optional[str],
        papers: List[Any],
        record_type: str,
        created_at: Optional[datetime] = None,
    ) -> dict:
        record = await asyncio.to_thread(
            self._insert, user_id, title, content, papers, record_type, created_at
        )
        if not record:
            raise PersistenceError(f"No {record_type} record returned after save")
        logger.info(f"💾 Saved {record_type} {record['id']} for user {user_id}")
        return record
