from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ..auth import require_auth
from ..errors import NotFoundError
from ..repositories import Repository, get_repository
from ..schemas import ErrorResponse, PostCreate, PostOut, PostUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/posts",
    tags=["posts"],
)

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"}}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Post not found"}}
_INVALID = {422: {"model": ErrorResponse, "description": "Validation error"}}


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# Largest value an sqlite INTEGER PRIMARY KEY can hold
MAX_POST_ID = 2**63 - 1


def _parse_id(post_id: str) -> Optional[int]:
    """
    Path ids are opaque to clients. Only the canonical decimal form of an
    issued id can exist, so "+1", "01", "1_0" and out-of-range values are None.
    """
    if not (post_id.isascii() and post_id.isdigit()):
        return None
    if len(post_id) > len(str(MAX_POST_ID)) or (len(post_id) > 1 and post_id.startswith("0")):
        return None
    value = int(post_id)
    return value if value <= MAX_POST_ID else None


def _find_or_404(repo: Repository, post_id: str) -> int:
    parsed = _parse_id(post_id)
    if parsed is None or repo.get(parsed) is None:
        logger.info("Post %s not found", post_id)
        raise NotFoundError("Post not found")
    return parsed


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[PostOut],
    summary="List Posts",
    description="Return every post in creation order.",
    responses={200: {"description": "List retrieved successfully"}},
)
def list_posts(repo: Repository = Depends(_get_repo)) -> List[PostOut]:
    """
    List all posts.
    """
    return [PostOut(**it) for it in repo.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=PostOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Create a new post and return the created resource. Requires a bearer token.",
    dependencies=[Depends(require_auth)],
    responses={
        201: {"description": "Post created successfully"},
        **_UNAUTHORIZED,
        **_INVALID,
    },
)
def create_post(payload: PostCreate, repo: Repository = Depends(_get_repo)) -> PostOut:
    """
    Create a new Post.
    """
    created = repo.create(payload)
    logger.info("Created post %s", created["id"])
    return PostOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{post_id}",
    response_model=PostOut,
    summary="Get Post",
    description="Get a single post by ID.",
    responses={
        200: {"description": "Post found"},
        **_NOT_FOUND,
    },
)
def get_post(post_id: str, repo: Repository = Depends(_get_repo)) -> PostOut:
    """
    Retrieve a single Post by its ID.
    """
    parsed = _parse_id(post_id)
    item = repo.get(parsed) if parsed is not None else None
    if item is None:
        logger.info("Post %s not found", post_id)
        raise NotFoundError("Post not found")
    return PostOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.patch(
    "/{post_id}",
    response_model=PostOut,
    summary="Update Post",
    description=(
        "Partially update a post. Only supplied fields change. "
        "The body is validated before the post is looked up. Requires a bearer token."
    ),
    dependencies=[Depends(require_auth)],
    responses={
        200: {"description": "Post updated"},
        **_UNAUTHORIZED,
        **_NOT_FOUND,
        **_INVALID,
    },
)
def patch_post(
    post_id: str,
    payload: Optional[PostUpdate] = None,
    repo: Repository = Depends(_get_repo),
) -> PostOut:
    """
    Partial update of a Post.
    """
    parsed = _find_or_404(repo, post_id)
    updated = repo.update(parsed, payload or PostUpdate())
    if updated is None:
        # Deleted between lookup and update
        raise NotFoundError("Post not found")
    logger.info("Updated post %s", parsed)
    return PostOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{post_id}",
    response_model=PostOut,
    summary="Delete Post",
    description="Delete a post by ID and return its last state. Requires a bearer token.",
    dependencies=[Depends(require_auth)],
    responses={
        200: {"description": "Post deleted"},
        **_UNAUTHORIZED,
        **_NOT_FOUND,
    },
)
def delete_post(post_id: str, repo: Repository = Depends(_get_repo)) -> PostOut:
    """
    Delete a Post. Returns the deleted Post on success, 404 if not found.
    """
    parsed = _parse_id(post_id)
    deleted = repo.delete(parsed) if parsed is not None else None
    if deleted is None:
        logger.info("Post %s not found", post_id)
        raise NotFoundError("Post not found")
    logger.info("Deleted post %s", parsed)
    return PostOut(**deleted)  # type: ignore[arg-type]
