from sqlalchemy import Column, DateTime, Integer, String

from taskapi.database import Base
from taskapi.models.task import _utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    # bcrypt hash, never serialized
    password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
