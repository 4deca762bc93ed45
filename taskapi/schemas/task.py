from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_title(v: str) -> str:
    if not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = ""

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def description_default(cls, v):
        return v or ""


class TaskUpdate(BaseModel):
    """Partial update body.

    Every field is optional. A field the client leaves out is not in
    ``model_fields_set`` and is left unchanged; a field sent explicitly (even
    ``""`` or ``false``) overwrites the stored value.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if v is None:
            raise ValueError("title cannot be null")
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def description_null_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("completed")
    @classmethod
    def completed_not_null(cls, v):
        if v is None:
            raise ValueError("completed cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str = Field(min_length=1)
    description: str = ""
    completed: bool = False
    created_at: datetime

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, v):
        return "" if v is None else v
