import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

from taskapi.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Columns added after the first release; older tables get them via ALTER TABLE
_ADDITIVE_TASK_COLUMNS = {
    "description": "TEXT DEFAULT ''",
    "completed": "BOOLEAN NOT NULL DEFAULT FALSE",
    "created_at": "TIMESTAMP",
}


class Database:
    """Owns the engine and session factory for one app instance."""

    def __init__(self, settings: Settings):
        url = settings.database_url
        kwargs = {"pool_pre_ping": True, "echo": settings.db_echo}
        if url.startswith("sqlite"):
            # Only apply sqlite-specific connect_args when using sqlite
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["pool_size"] = settings.pool_size
            kwargs["max_overflow"] = 0
        self.engine = create_engine(url, **kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @contextmanager
    def session(self):
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def create_all(self):
        # models must be imported so their tables are registered on Base
        from taskapi.models import task, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        self.ensure_schema()

    def ensure_schema(self):
        """Ensure new columns exist without Alembic (simple additive migrations)."""
        try:
            insp = inspect(self.engine)
            cols = [c["name"] for c in insp.get_columns("tasks")]
            missing = [name for name in _ADDITIVE_TASK_COLUMNS if name not in cols]
            if not missing:
                return
            with self.engine.begin() as conn:
                for name in missing:
                    logger.info("adding column tasks.%s", name)
                    conn.execute(
                        text(f"ALTER TABLE tasks ADD COLUMN {name} {_ADDITIVE_TASK_COLUMNS[name]}")
                    )
        except SQLAlchemyError:
            # best-effort; startup continues with whatever schema exists
            logger.warning("schema check for tasks failed", exc_info=True)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("database ping failed", exc_info=True)
            return False

    def dispose(self):
        self.engine.dispose()
