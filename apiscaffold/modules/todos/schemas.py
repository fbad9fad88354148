"""
API Scaffold — Todo Schemas
============================

What:  Request/response shapes for the todos module.
Why:   Each model is both the validator the dispatcher runs and the
       component the documentation generator emits.

Wire names are camelCase (userId, createdAt, updatedAt).
"""

from datetime import datetime
from typing import Annotated, List, Optional, Union
from uuid import UUID

from pydantic import Field, field_validator
from pydantic.json_schema import SkipJsonSchema

from apiscaffold.core.schema import ApiModel, Schema


class Todo(ApiModel):
    id: UUID
    title: str = Field(min_length=1)
    description: Optional[str] = None
    completed: bool = False
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class CreateTodo(ApiModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    completed: bool = False
    user_id: UUID


class UpdateTodo(ApiModel):
    """Partial update: only the fields sent are merged."""

    # None is only the "not sent" default; the document lists these as non-nullable
    title: Union[Annotated[str, Field(min_length=1)], SkipJsonSchema[None]] = None
    description: Optional[str] = None
    completed: Union[bool, SkipJsonSchema[None]] = None

    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, v):
        """Omitting a field keeps it; sending null for it is an error."""
        if v is None:
            raise ValueError("may be omitted but cannot be null")
        return v


class TodoParams(ApiModel):
    id: UUID


class TodoQuery(ApiModel):
    completed: Optional[bool] = Field(default=None, description="Only todos with this completion state")
    user_id: Optional[UUID] = Field(default=None, description="Only todos owned by this user")


TodoList = Schema(List[Todo], name="TodoList")
