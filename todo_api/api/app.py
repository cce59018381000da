"""
FastAPI application for the todo service.

``create_app`` builds a fully wired app from explicit settings and
storage; handlers reach services only through ``request.app.state``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, StrictBool

from todo_api import __version__
from todo_api.api.errors import register_exception_handlers
from todo_api.api.middleware import register_middleware
from todo_api.auth import AuthContext, CredentialStore, TokenService, require_auth, users_router
from todo_api.config import Settings, get_settings
from todo_api.core.models import Todo, Utf8Str
from todo_api.integrations.sentry import init_sentry
from todo_api.services import TodoService
from todo_api.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Dependencies
# =============================================================================


def get_todo_service(request: Request) -> TodoService:
    return request.app.state.todos


# =============================================================================
# Request/Response Models
# =============================================================================


class TodoCreate(BaseModel):
    text: Utf8Str


class TodoUpdate(BaseModel):
    text: Utf8Str | None = None
    completed: StrictBool | None = None


class TodoEnvelope(BaseModel):
    todo: Todo


class TodoList(BaseModel):
    todos: list[Todo]


# =============================================================================
# Todos
# =============================================================================

router = APIRouter(prefix="/todos", tags=["todos"])


@router.post("", response_model=Todo, response_model_exclude_none=True)
async def create_todo(
    data: TodoCreate,
    ctx: AuthContext = Depends(require_auth),
    todos: TodoService = Depends(get_todo_service),
):
    """Create a todo owned by the caller."""
    return await todos.create(ctx.user_id, data.text)


@router.get("", response_model=TodoList, response_model_exclude_none=True)
async def list_todos(
    ctx: AuthContext = Depends(require_auth),
    todos: TodoService = Depends(get_todo_service),
):
    """List the caller's todos."""
    return TodoList(todos=await todos.find_all(ctx.user_id))


@router.get("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
async def get_todo(
    todo_id: str,
    ctx: AuthContext = Depends(require_auth),
    todos: TodoService = Depends(get_todo_service),
):
    """Get one of the caller's todos."""
    return TodoEnvelope(todo=await todos.get(ctx.user_id, todo_id))


@router.delete("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
async def delete_todo(
    todo_id: str,
    ctx: AuthContext = Depends(require_auth),
    todos: TodoService = Depends(get_todo_service),
):
    """Delete one of the caller's todos and return it."""
    return TodoEnvelope(todo=await todos.delete(ctx.user_id, todo_id))


@router.patch("/{todo_id}", response_model=TodoEnvelope, response_model_exclude_none=True)
async def update_todo(
    todo_id: str,
    data: TodoUpdate,
    ctx: AuthContext = Depends(require_auth),
    todos: TodoService = Depends(get_todo_service),
):
    """Update text and/or completion of one of the caller's todos."""
    todo = await todos.update(
        ctx.user_id, todo_id, text=data.text, completed=data.completed
    )
    return TodoEnvelope(todo=todo)


# =============================================================================
# App Setup
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to the environment-loaded settings
        storage: Defaults to fresh in-memory storage
    """
    settings = settings or get_settings()
    storage = storage or create_local_storage()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")
        logger.info("Todo API starting in %s mode", settings.environment)

        yield

        logger.info("Todo API shutting down")

    app = FastAPI(
        title="Todo API",
        description="Private todo lists with token authentication",
        version=__version__,
        lifespan=lifespan,
    )

    credentials = CredentialStore(storage, settings)
    app.state.settings = settings
    app.state.storage = storage
    app.state.credentials = credentials
    app.state.tokens = TokenService(settings, credentials)
    app.state.todos = TodoService(storage)

    # CORS; x-auth must be readable by browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-auth"],
    )
    register_middleware(app)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "todo-api"}

    app.include_router(users_router)
    app.include_router(router)

    return app


app = create_app()
