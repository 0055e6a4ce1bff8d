"""Chat API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, status

from app.core.dependencies import get_chat_service, get_current_user
from app.domains.chat.service import ChatService
from app.exceptions.base import BaseAppException, InternalServerError
from app.schemas.base import MessageResponse
from app.schemas.chat import (
    ChatReply,
    ChatRequest,
    ChatSessionCreate,
    ChatSessionResponse,
    ChatSessionSummary,
    ChatSessionUpdate,
    ChatStats,
)
from models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
    dependencies=[Depends(get_current_user)],
)


@router.post("/sessions", response_model=ChatSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_chat_session(
    session_data: ChatSessionCreate | None = Body(None),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Create an empty chat session.

    Args:
        session_data: Optional title; empty titles become "New Chat"
        current_user: Current authenticated user
        service: Chat service

    Returns:
        The created session
    """
    try:
        title = session_data.title if session_data else None
        session = await service.create_session(user_id=current_user.id, title=title)
        return ChatSessionResponse.model_validate(session)
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error creating session: {str(e)}")
        raise InternalServerError(str(e)) from e


@router.get("/sessions", response_model=list[ChatSessionSummary])
async def get_chat_sessions(
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Get all sessions for the current user, most recently updated first."""
    try:
        return await service.list_sessions(user_id=current_user.id)
    except Exception as e:
        logger.error(f"Error retrieving sessions: {str(e)}")
        raise InternalServerError(str(e)) from e


@router.get("/sessions/{session_id}", response_model=ChatSessionResponse)
async def get_chat_session(
    session_id: UUID = Path(..., description="Session ID"),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Get a specific session with all messages."""
    try:
        session = await service.get_session(user_id=current_user.id, session_id=session_id)
        return ChatSessionResponse.model_validate(session)
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving session: {str(e)}")
        raise InternalServerError(str(e)) from e


@router.put("/sessions/{session_id}", response_model=ChatSessionResponse)
async def update_chat_session(
    session_id: UUID = Path(..., description="Session ID"),
    update_data: ChatSessionUpdate | None = Body(None),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Rename a session. An empty title leaves the current title in place."""
    title = update_data.title if update_data else None
    try:
        session = await service.update_session_title(
            user_id=current_user.id, session_id=session_id, title=title
        )
        return ChatSessionResponse.model_validate(session)
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error updating session: {str(e)}")
        raise InternalServerError(str(e)) from e


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_chat_session(
    session_id: UUID = Path(..., description="Session ID"),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Delete a session."""
    try:
        await service.delete_session(user_id=current_user.id, session_id=session_id)
        return MessageResponse(message="Chat session deleted successfully")
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting session: {str(e)}")
        raise InternalServerError(str(e)) from e


@router.post("/message", response_model=ChatReply)
async def send_chat_message(
    chat_request: ChatRequest = Body(...),
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Send a message to the model.

    Creates a new session when ``sessionId`` is omitted.

    Args:
        chat_request: Message and optional session ID
        current_user: Current authenticated user
        service: Chat service

    Returns:
        The reply, the updated session and its ID
    """
    return await service.send_message(
        user_id=current_user.id,
        message=chat_request.message,
        session_id=chat_request.session_id,
    )


@router.get("/stats", response_model=ChatStats)
async def get_chat_stats(
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    """Get session and message counts for the current user."""
    try:
        return await service.get_stats(user_id=current_user.id)
    except Exception as e:
        logger.error(f"Error computing stats: {str(e)}")
        raise InternalServerError(str(e)) from e
