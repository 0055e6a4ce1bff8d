"""Chat service layer: session storage, conversational turns and usage stats."""

import asyncio
import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import Settings, settings as default_settings
from app.exceptions.ai import AIConfigurationError, AIServiceError, AITimeoutError
from app.exceptions.base import BaseAppException, InternalServerError
from app.exceptions.chat import ChatSessionNotFoundError
from app.schemas.chat import ChatReply, ChatSessionResponse, ChatSessionSummary, ChatStats
from app.services.model_provider import ChatProvider, GeminiChatProvider, build_history
from models.base import utcnow
from models.chat_message import ChatMessage, MessageRole
from models.chat_session import ChatSession


logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


class ChatService:
    """Service class for chat sessions and model conversations.

    Every operation is scoped to the owning user: a session belonging to
    someone else behaves exactly like a session that does not exist.
    """

    def __init__(
        self,
        db: AsyncSession,
        provider: ChatProvider | None = None,
        settings: Settings | None = None,
    ):
        """Initialize chat service.

        Args:
            db: Async database session for data operations.
            provider: Model provider used for replies; Gemini when omitted.
            settings: Configuration; the process-wide settings when omitted.
        """
        self.db = db
        self.settings = settings or default_settings
        self.provider = provider or GeminiChatProvider(self.settings)

    @property
    def default_title(self) -> str:
        return self.settings.default_session_title

    def _title_from_message(self, message: str) -> str:
        return message[: self.settings.title_max_length]

    # Session store

    async def create_session(self, user_id: UUID, title: str | None = None) -> ChatSession:
        """Create an empty session. Empty or missing titles fall back to the default title."""
        session = ChatSession(
            user_id=user_id,
            title=title or self.default_title,
            is_active=True,
            messages=[],
        )

        try:
            self.db.add(session)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(f"Created chat session {session.id} for user {user_id}")
        return await self.get_session(user_id, session.id, refresh=True)

    async def list_sessions(self, user_id: UUID) -> list[ChatSessionSummary]:
        """List the user's sessions, most recently updated first."""
        query = (
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(ChatSession.updated_at.desc())
        )
        result = await self.db.execute(query)
        sessions = result.scalars().all()

        return [
            ChatSessionSummary(
                id=session.id,
                title=session.title,
                message_count=session.message_count,
                is_active=session.is_active,
                created_at=session.created_at,
                updated_at=session.updated_at,
                last_message=(
                    session.last_message.content[:PREVIEW_LENGTH] if session.last_message else None
                ),
            )
            for session in sessions
        ]

    async def get_session(self, user_id: UUID, session_id: UUID, refresh: bool = False) -> ChatSession:
        """Fetch one of the user's sessions with its messages.

        Raises:
            ChatSessionNotFoundError: If the session is missing or owned by another user
        """
        query = select(ChatSession).where(ChatSession.id == session_id, ChatSession.user_id == user_id)
        if refresh:
            query = query.execution_options(populate_existing=True)

        result = await self.db.execute(query)
        session = result.scalar_one_or_none()

        if not session:
            raise ChatSessionNotFoundError()
        return session

    async def update_session_title(self, user_id: UUID, session_id: UUID, title: str | None) -> ChatSession:
        """Rename a session. An empty title keeps the current one; the session is saved either way."""
        session = await self.get_session(user_id, session_id)

        if title:
            session.title = title

        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        return await self.get_session(user_id, session_id, refresh=True)

    async def delete_session(self, user_id: UUID, session_id: UUID) -> bool:
        """Delete a session and its messages."""
        session = await self.get_session(user_id, session_id)

        try:
            await self.db.delete(session)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(f"Deleted chat session {session_id} for user {user_id}")
        return True

    # Conversation

    async def send_message(self, user_id: UUID, message: str, session_id: UUID | None = None) -> ChatReply:
        """Drive one conversational turn.

        The user message is committed before the provider is called, so a
        failing provider leaves it in the session without a reply.

        Args:
            user_id: Owner of the session
            message: Text sent by the user
            session_id: Existing session, or None to start a new one

        Returns:
            ChatReply with the reply text and the updated session
        """
        if not self.provider.is_configured:
            raise AIConfigurationError("AI service not properly initialized")

        try:
            if session_id:
                session = await self.get_session(user_id, session_id)
            else:
                session = ChatSession(
                    user_id=user_id,
                    title=self._title_from_message(message) or self.default_title,
                    is_active=True,
                    messages=[],
                )
                self.db.add(session)

            session.messages.append(ChatMessage(role=MessageRole.USER, content=message))
            session.updated_at = utcnow()
            await self.db.commit()

            if not session_id:
                logger.info(f"Created chat session {session.id} for user {user_id}")

            history = build_history(session.messages[:-1])
            reply = await asyncio.wait_for(
                self.provider.send(history, message), timeout=self.settings.ai_request_timeout
            )

            session.messages.append(ChatMessage(role=MessageRole.MODEL, content=reply))
            if len(session.messages) == 2 and session.title == self.default_title:
                session.title = self._title_from_message(message)
                logger.info(f"Retitled chat session {session.id} from its first message")
            session.updated_at = utcnow()
            await self.db.commit()

            session = await self.get_session(user_id, session.id, refresh=True)
            return ChatReply(
                reply=reply,
                session=ChatSessionResponse.model_validate(session),
                session_id=session.id,
            )

        except BaseAppException:
            raise
        except TimeoutError:
            logger.error(f"Chat provider timed out after {self.settings.ai_request_timeout}s")
            raise AITimeoutError("Chat request timed out") from None
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Chat storage error: {str(e)}")
            raise InternalServerError(str(e)) from e
        except Exception as e:
            logger.error(f"Chat service error: {str(e)}")
            raise AIServiceError(f"Chat service error: {str(e)}") from e

    # Stats

    async def get_stats(self, user_id: UUID) -> ChatStats:
        """Count the user's sessions, active sessions and messages."""
        total_sessions = await self.db.scalar(
            select(func.count(ChatSession.id)).where(ChatSession.user_id == user_id)
        )
        active_sessions = await self.db.scalar(
            select(func.count(ChatSession.id)).where(
                ChatSession.user_id == user_id, ChatSession.is_active.is_(True)
            )
        )
        total_messages = await self.db.scalar(
            select(func.count(ChatMessage.id))
            .join(ChatMessage.session)
            .where(ChatSession.user_id == user_id)
        )

        return ChatStats(
            total_sessions=total_sessions or 0,
            active_sessions=active_sessions or 0,
            total_messages=total_messages or 0,
        )
