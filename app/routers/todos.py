# =============================================================================
# app/routers/todos.py - Todo Endpoints
# =============================================================================
# CRUD over the authenticated user's todos.
# All endpoints require authentication, and every response is marked
# no-store so clients refetch the list after a mutation.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, Response, UploadFile, status

from app.auth import get_current_identity, get_current_identity_optional, Identity
from app.config import settings
from core.models.todo import (
    AttachmentUrlResponse,
    ImageUpload,
    StatusUpdateRequest,
    Todo,
    TodoList,
)
from core.services.todo_service import TodoService

logger = logging.getLogger(__name__)

router = APIRouter()

NO_STORE = "no-store"


def _no_store(response: Response) -> None:
    response.headers["Cache-Control"] = NO_STORE


async def _read_image(image: UploadFile | None) -> ImageUpload | None:
    if image is None:
        return None
    data = await image.read()
    return ImageUpload(
        filename=image.filename or "",
        content_type=image.content_type,
        data=data,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=TodoList)
async def list_todos(
    response: Response,
    identity: Optional[Identity] = Depends(get_current_identity_optional),
):
    """
    List the current user's todos.

    Order is not guaranteed. If the todos can't be loaded the list is
    empty and `error` carries a generic message.
    """
    _no_store(response)
    return TodoService.list_todos(identity)


@router.post("", response_model=Todo, status_code=status.HTTP_201_CREATED)
async def create_todo(
    response: Response,
    content: Annotated[str, Form(description="Todo text")] = "",
    image: Annotated[UploadFile | None, File(description="Optional image attachment")] = None,
    identity: Identity = Depends(get_current_identity),
):
    """
    Create a todo, optionally attaching an image.

    If the image upload fails the todo is still created, without an
    attachment.
    """
    _no_store(response)
    upload = await _read_image(image)
    return TodoService.create_todo(identity, content, upload)


@router.patch("/{todo_id}/status", response_model=Todo)
async def update_todo_status(
    response: Response,
    todo_id: Annotated[str, Path(description="Todo ID")],
    request: StatusUpdateRequest,
    identity: Identity = Depends(get_current_identity),
):
    """
    Set a todo's status (InProgress or Done).

    User must own the todo.
    """
    _no_store(response)
    return TodoService.update_status(identity, todo_id, request.status)


@router.delete("/{todo_id}")
async def delete_todo(
    response: Response,
    todo_id: Annotated[str, Path(description="Todo ID")],
    identity: Identity = Depends(get_current_identity),
):
    """
    Delete a todo and its attachment.

    User must own the todo. If the attachment can't be removed the todo
    is kept and a storage error is returned.
    """
    _no_store(response)
    TodoService.delete_todo(identity, todo_id)
    return {"success": True, "todo_id": todo_id}


@router.get("/{todo_id}/attachment-url", response_model=AttachmentUrlResponse)
async def get_attachment_url(
    response: Response,
    todo_id: Annotated[str, Path(description="Todo ID")],
    ttl: Annotated[
        int | None,
        Query(ge=1, le=7 * 24 * 3600, description="URL lifetime in seconds"),
    ] = None,
    identity: Identity = Depends(get_current_identity),
):
    """
    Get a temporary URL for a todo's attachment.

    User must own the todo.
    """
    _no_store(response)
    expires_in = ttl or settings.SIGNED_URL_TTL_SECONDS
    url = TodoService.get_attachment_url(identity, todo_id, expires_in)
    return AttachmentUrlResponse(todo_id=todo_id, url=url, expires_in=expires_in)
