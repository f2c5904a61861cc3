import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import authorize_request
from .errors import ApiError, PostValidationError, UnauthorizedError
from .logging_config import setup_logging
from .repositories import get_repository
from .routers import posts as posts_router
from .seed import seed_posts
from .settings import get_settings
from .validation import to_rule_errors

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "posts",
        "description": "CRUD operations for Posts. Mutating operations require a bearer token.",
    },
]

_settings = get_settings()
setup_logging(_settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Seed sample posts on startup when SEED_POSTS is set."""
    if _settings.seed_posts > 0:
        repo = app.dependency_overrides.get(get_repository, get_repository)()
        seed_posts(repo, _settings.seed_posts)
    yield


app = FastAPI(
    title="Posts Backend",
    description="Backend API service for managing posts with pluggable storage backends.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Render every domain error as ``{"errors": [...]}`` with its status code.
    """
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return rule records for request validation errors.

    Response format:
        {
            "errors": [
                {"field": "title", "rule": "required", "message": "required validation failed"},
                {"field": "content", "rule": "maxLength", "args": {"maxLength": 500}, ...}
            ]
        }
    """
    # Malformed JSON is rejected before route dependencies run; auth still comes first
    try:
        await authorize_request(request)
    except UnauthorizedError as unauthorized:
        return await api_error_handler(request, unauthorized)

    error = PostValidationError(to_rule_errors(exc.errors()))
    logger.info("Rejected %s %s: %s", request.method, request.url.path, error.errors)
    return await api_error_handler(request, error)


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(posts_router.router)
