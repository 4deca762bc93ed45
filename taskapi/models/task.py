from datetime import datetime, UTC

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from taskapi.database import Base


def _utcnow():
    return datetime.now(UTC)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
