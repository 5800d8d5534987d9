# database/models/report_model.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, String, Text
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), index=True, nullable=False)

    title = Column(String(1024), nullable=False)
    content = Column(Text, nullable=True)

    # Serialized papers (search) or paper analyses (report)
    papers = Column(JSON, default=lambda: [])

    type = Column(String(32), nullable=False, default="report")  # "report" | "search"
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "papers": self.papers,
            "type": self.type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
