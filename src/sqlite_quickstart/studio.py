"""Read-only studio for browsing the quickstart database.

This module builds a small FastAPI application over the same client the
example script uses, so the records it wrote can be inspected from a
browser or with curl.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .config import Settings
from .database import QuickstartClient, SQLiteAdapter
from .exceptions import NotFoundException, register_exception_handlers
from .logging_config import LoggingMiddleware, get_logger
from .models import PostRead, UserWithPosts

logger = get_logger(__name__)

router = APIRouter()


def get_client(request: Request) -> QuickstartClient:
    """Dependency returning the client opened by the application lifespan."""
    return request.app.state.client


@router.get(
    "/health",
    response_model=dict[str, Any],
    summary="Health check with database connectivity",
)
async def health_check(client: QuickstartClient = Depends(get_client)) -> JSONResponse:
    connected = await client.is_healthy()
    body = {
        "status": "healthy" if connected else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "database": {"connected": connected, "path": client.adapter.database},
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)


@router.get("/users", response_model=list[UserWithPosts], summary="List users with their posts")
async def list_users(client: QuickstartClient = Depends(get_client)) -> list[UserWithPosts]:
    users = await client.user.find_many(include_posts=True)
    return [UserWithPosts.model_validate(user) for user in users]


@router.get("/users/{email}", response_model=UserWithPosts, summary="Get a user by email")
async def get_user(email: str, client: QuickstartClient = Depends(get_client)) -> UserWithPosts:
    user = await client.user.find_unique(email)
    if user is None:
        raise NotFoundException("User", email)
    return UserWithPosts.model_validate(user)


@router.get("/posts", response_model=list[PostRead], summary="List posts")
async def list_posts(
    published: bool | None = Query(default=None, description="Filter by publication status"),
    client: QuickstartClient = Depends(get_client),
) -> list[PostRead]:
    posts = await client.post.find_many(published=published)
    return [PostRead.model_validate(post) for post in posts]


def create_app(settings: Settings, project_root: Path) -> FastAPI:
    """Create and configure the studio application.

    Args:
        settings: Application settings
        project_root: Project root the runtime URL is resolved from

    Returns:
        FastAPI: Configured studio application
    """
    runtime_url = settings.runtime_url(project_root)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = QuickstartClient(SQLiteAdapter(runtime_url, echo=settings.debug))
        await client.connect()
        app.state.client = client
        logger.info("Studio started", extra={"database": client.adapter.database})
        try:
            yield
        finally:
            await client.disconnect()

    app = FastAPI(
        title="SQLite Quickstart Studio",
        description="Read-only browser for the quickstart User and Post tables",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(router)
    return app
