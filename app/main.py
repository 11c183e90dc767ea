# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the todo API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    TodoAppException,
    UnauthenticatedError,
    todo_app_exception_handler,
    unauthenticated_exception_handler,
    validation_exception_handler,
)
from app.auth import SessionGateMiddleware, get_current_identity, Identity
from app.auth import routes as auth_routes
from app.routers import health, todos
from core.models.todo import TodoList
from core.services.todo_service import TodoService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup/shutdown. Clients to Supabase are created lazily on
    first use.
    """
    logger.info(f"Starting todo API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down todo API")


# Create FastAPI application
app = FastAPI(
    title="Todo API",
    description="""
## Multi-user Todo API

Authenticated users create, complete and delete todo items, optionally
attaching an image.

### Quick Start

```bash
# 1. Register and log in (stores the session cookie)
curl -X POST http://localhost:8000/register \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Ann", "email": "ann@x.com", "password": "secret1"}'
curl -c jar -X POST http://localhost:8000/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "ann@x.com", "password": "secret1"}'

# 2. Create a todo with an image
curl -b jar -X POST http://localhost:8000/api/v1/todos \\
  -F "content=Write report" -F "image=@photo.png"

# 3. Mark it done
curl -b jar -X PATCH http://localhost:8000/api/v1/todos/{id}/status \\
  -H "Content-Type: application/json" -d '{"status": "Done"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Registration, login and logout",
        },
        {
            "name": "Todos",
            "description": "Create, list, update and delete todos",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Route gate - redirects based on session-cookie presence
app.add_middleware(SessionGateMiddleware)

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(UnauthenticatedError)
async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
    """Redirect unauthenticated callers to the login surface."""
    return await unauthenticated_exception_handler(request, exc)


@app.exception_handler(TodoAppException)
async def handle_todo_app_exception(request: Request, exc: TodoAppException):
    """Handle custom todo API exceptions."""
    return await todo_app_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Registration, login, logout
app.include_router(
    auth_routes.router,
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Todo endpoints
app.include_router(
    todos.router,
    prefix="/api/v1/todos",
    tags=["Todos"]
)


# =============================================================================
# Home
# =============================================================================

@app.get("/", response_model=TodoList, tags=["Todos"])
async def home(
    response: Response,
    identity: Identity = Depends(get_current_identity),
):
    """
    Home surface - the current user's todo list.
    """
    response.headers["Cache-Control"] = todos.NO_STORE
    return TodoService.list_todos(identity)
