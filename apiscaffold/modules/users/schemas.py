"""
API Scaffold — User Schemas
============================

What:  Request/response shapes for the users module.

Security Note:
    `password` exists only on the request models. User (the response
    model) has no such field, so response validation strips it even if a
    handler hands back a record that carries it.
"""

from datetime import datetime
from typing import Annotated, List, Optional, Union
from uuid import UUID

from pydantic import EmailStr, Field, field_validator
from pydantic.json_schema import SkipJsonSchema

from apiscaffold.core.schema import ApiModel, Schema


class User(ApiModel):
    id: UUID
    email: EmailStr
    name: str = Field(min_length=2)
    created_at: datetime
    updated_at: datetime


class CreateUser(ApiModel):
    email: EmailStr
    name: str = Field(min_length=2)
    password: str = Field(min_length=8, description="At least 8 characters; never returned")


class UpdateUser(ApiModel):
    """Partial update: only the fields sent are merged."""

    # None is only the "not sent" default; the document lists these as non-nullable
    email: Union[EmailStr, SkipJsonSchema[None]] = None
    name: Union[Annotated[str, Field(min_length=2)], SkipJsonSchema[None]] = None
    password: Union[Annotated[str, Field(min_length=8)], SkipJsonSchema[None]] = None

    @field_validator("email", "name", "password")
    @classmethod
    def reject_null(cls, v):
        """Omitting a field keeps it; sending null for it is an error."""
        if v is None:
            raise ValueError("may be omitted but cannot be null")
        return v


class UserParams(ApiModel):
    id: UUID


UserList = Schema(List[User], name="UserList")
