from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class PostEntity(TypedDict):
    """
    A lightweight domain model representing a Post for non-ORM storage
    backends.

    Fields:
    - id: Unique integer identifier, assigned by the repository
    - title: Post title (at most 100 words, validated via schemas)
    - content: Post body (at most 500 words, validated via schemas)
    - created_at: Local creation timestamp (datetime)
    - updated_at: Local last update timestamp (datetime)
    """

    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
