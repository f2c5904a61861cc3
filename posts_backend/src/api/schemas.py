from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError

TITLE_MAX_WORDS = 100
CONTENT_MAX_WORDS = 500


def _check_words(value: str, limit: int) -> str:
    """
    Enforce a 1..limit word count on a text field.

    Raises rule-named errors so the failing rule can be reported back to the
    caller as-is: blank text violates ``required``, long text ``maxLength``.
    """
    words = value.split()
    if not words:
        raise PydanticCustomError("required", "required validation failed")
    if len(words) > limit:
        raise PydanticCustomError(
            "maxLength",
            "maxLength validation failed",
            {"maxLength": limit},
        )
    return value


# PUBLIC_INTERFACE
class PostCreate(BaseModel):
    """
    Schema for creating a new Post.

    Both fields are required and must be strings; numbers are rejected rather
    than coerced.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "A short title",
                "content": "Some words about the title.",
            }
        }
    )

    title: StrictStr = Field(..., description=f"Post title, at most {TITLE_MAX_WORDS} words")
    content: StrictStr = Field(..., description=f"Post body, at most {CONTENT_MAX_WORDS} words")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_words(v, TITLE_MAX_WORDS)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _check_words(v, CONTENT_MAX_WORDS)


# PUBLIC_INTERFACE
class PostUpdate(BaseModel):
    """
    Schema for updating an existing Post.
    All fields are optional; only provided fields will be updated. A field
    that is provided must still be a string within its word limit, so an
    explicit null is rejected.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "A better title",
            }
        }
    )

    title: StrictStr = Field(default=None, description=f"Post title, at most {TITLE_MAX_WORDS} words")
    content: StrictStr = Field(default=None, description=f"Post body, at most {CONTENT_MAX_WORDS} words")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_words(v, TITLE_MAX_WORDS)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _check_words(v, CONTENT_MAX_WORDS)

    def changes(self) -> Dict[str, str]:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# PUBLIC_INTERFACE
class PostOut(BaseModel):
    """
    Schema returned by the API for a Post.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "A short title",
                "content": "Some words about the title.",
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the post")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class ErrorItem(BaseModel):
    """A single error record. Validation errors carry field/rule/args."""

    field: Optional[str] = None
    rule: Optional[str] = None
    args: Optional[Dict[str, Any]] = None
    message: Optional[str] = None


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Body returned for every 401, 404 and 422 response."""

    errors: List[ErrorItem]
