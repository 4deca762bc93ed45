import logging
from contextlib import contextmanager
from typing import List, Optional

import pydantic
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskapi.database import Database
from taskapi.errors import Conflict, InternalError, NotFound, ValidationError
from taskapi.models.task import Task
from taskapi.models.user import User
from taskapi.schemas.task import TaskOut
from taskapi.stores.base import TASK_FIELDS, TaskStore, UserStore

logger = logging.getLogger(__name__)


@contextmanager
def _session(database: Database, action: str):
    with database.session() as db:
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("failed to %s: %s", action, exc)
            raise InternalError(f"failed to {action}") from exc


def _require_title(title) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("title cannot be empty")
    return str(title).strip()


class SqlTaskStore(TaskStore):
    def __init__(self, database: Database):
        self.database = database

    def _to_out(self, task: Task) -> TaskOut:
        try:
            return TaskOut.model_validate(task)
        except pydantic.ValidationError as exc:
            logger.error("task %s failed to decode: %s", task.id, exc)
            raise InternalError(f"failed to read task {task.id}") from exc

    def create(self, title: str, description: str = "") -> TaskOut:
        task = Task(title=_require_title(title), description=description or "", completed=False)
        with _session(self.database, "create task") as db:
            db.add(task)
            db.commit()
            db.refresh(task)
        logger.info("created task %s", task.id)
        return self._to_out(task)

    def get_all(self) -> List[TaskOut]:
        with _session(self.database, "fetch tasks") as db:
            rows = db.scalars(select(Task).order_by(Task.id)).all()

        tasks = []
        for row in rows:
            try:
                tasks.append(TaskOut.model_validate(row))
            except pydantic.ValidationError as exc:
                # one bad row should not hide the rest of the list
                logger.warning("skipping task %s: %s", row.id, exc)
        return tasks

    def get_by_id(self, task_id: int) -> TaskOut:
        with _session(self.database, "fetch task") as db:
            task = db.get(Task, task_id)
        if task is None:
            raise NotFound("task not found")
        return self._to_out(task)

    def update(self, task_id: int, changes: dict) -> TaskOut:
        changes = {k: v for k, v in changes.items() if k in TASK_FIELDS}
        if "title" in changes:
            changes["title"] = _require_title(changes["title"])
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        with _session(self.database, "update task") as db:
            task = db.get(Task, task_id)
            if task is None:
                raise NotFound("task not found")
            for field, value in changes.items():
                setattr(task, field, value)
            db.commit()
            db.refresh(task)
        logger.info("updated task %s (%s)", task_id, ", ".join(sorted(changes)) or "no fields")
        return self._to_out(task)

    def delete(self, task_id: int) -> None:
        with _session(self.database, "delete task") as db:
            task = db.get(Task, task_id)
            if task is None:
                raise NotFound("task not found")
            db.delete(task)
            db.commit()
        logger.info("deleted task %s", task_id)


class SqlUserStore(UserStore):
    def __init__(self, database: Database):
        self.database = database

    def create(self, email: str, password_hash: str) -> User:
        user = User(email=email, password=password_hash)
        with self.database.session() as db:
            try:
                db.add(user)
                db.commit()
                db.refresh(user)
            except IntegrityError as exc:
                # unique index on email; covers two registrations racing
                db.rollback()
                raise Conflict("user already exists") from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("failed to create user: %s", exc)
                raise InternalError("failed to create user") from exc
        logger.info("created user %s", user.id)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        with _session(self.database, "fetch user") as db:
            return db.scalars(select(User).where(User.email == email)).first()

    def get_by_id(self, user_id: int) -> User:
        with _session(self.database, "fetch user") as db:
            user = db.get(User, user_id)
        if user is None:
            raise NotFound("user not found")
        return user
