"""Store interfaces.

The app binds one concrete implementation of each at startup
(see ``taskapi.stores.sql``); tests may substitute their own.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from taskapi.models.user import User
from taskapi.schemas.task import TaskOut

TASK_FIELDS = ("title", "description", "completed")


class TaskStore(ABC):
    @abstractmethod
    def create(self, title: str, description: str = "") -> TaskOut:
        ...

    @abstractmethod
    def get_all(self) -> List[TaskOut]:
        ...

    @abstractmethod
    def get_by_id(self, task_id: int) -> TaskOut:
        ...

    @abstractmethod
    def update(self, task_id: int, changes: dict) -> TaskOut:
        """Apply only the keys present in ``changes``; absent keys stay as they are."""

    @abstractmethod
    def delete(self, task_id: int) -> None:
        ...


class UserStore(ABC):
    @abstractmethod
    def create(self, email: str, password_hash: str) -> User:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User:
        ...
