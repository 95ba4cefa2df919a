"""Chat service layer relaying conversations to OpenAI."""

import logging
from collections.abc import AsyncIterator
from datetime import datetime, timedelta
from uuid import UUID

from openai import AsyncOpenAI, OpenAIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.exceptions.chat import (
    ChatNotFoundError,
    CompletionConfigurationError,
    CompletionServiceError,
)
from app.schemas.chat import ChatMessageIn, ChatOptions
from models.chat import Chat
from models.message import Message, MessageRole

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New chat"
TITLE_MAX_LENGTH = 25


class ChatService:
    """Service class for chat relay operations using the OpenAI completion API."""

    def __init__(self, db: AsyncSession, client: AsyncOpenAI | None = None):
        """Initialize chat service with database session.

        Args:
            db: Async database session for data operations.
            client: Pre-built OpenAI client; one is created from settings on first use when omitted.
        """
        self.db = db
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """OpenAI client, built from settings on first use.

        History operations never touch it, so they work without an API key.
        """
        if self._client is None:
            self._client = self._initialize_client()
        return self._client

    @staticmethod
    def _initialize_client() -> AsyncOpenAI:
        """Initialize the OpenAI client."""
        if not settings.openai_api_key:
            raise CompletionConfigurationError("OpenAI API key not configured")

        return AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
            max_retries=0,
        )

    async def chat(self, messages: list[ChatMessageIn], options: ChatOptions | None = None) -> str:
        """Send the conversation to OpenAI and, for signed-in callers, persist the exchange.

        Args:
            messages: Conversation so far including the newest user message.
            options: Model, caller id and chat id.

        Returns:
            The assistant's reply, or an empty string when the model returned no text.
        """
        options = options or ChatOptions()
        await self._check_chat_access(options)

        completion = await self._create_completion(messages, options.model)
        answer = completion.choices[0].message.content or ""

        if options.user_id:
            await self._persist_exchange(messages, answer, options)

        return answer

    async def chat_stream(
        self, messages: list[ChatMessageIn], options: ChatOptions | None = None
    ) -> AsyncIterator[str]:
        """Stream the assistant reply token by token.

        Every non-empty chunk is yielded as soon as it arrives while the full
        answer is accumulated. The exchange is persisted only after the upstream
        stream has been fully drained; an abandoned stream persists nothing.
        The upstream response is closed however the iteration ends.
        """
        options = options or ChatOptions()
        await self._check_chat_access(options)

        stream = await self._create_completion(messages, options.model, stream=True)

        answer_parts: list[str] = []
        try:
            async for part in stream:
                token = part.choices[0].delta.content if part.choices else None
                if token:
                    answer_parts.append(token)
                    yield token
        except OpenAIError as e:
            logger.error(f"OpenAI stream failed: {str(e)}")
            raise CompletionServiceError(f"Completion stream failed: {str(e)}") from e
        finally:
            await stream.close()

        if options.user_id:
            await self._persist_exchange(messages, "".join(answer_parts), options)

    async def list_chats(self, user_id: UUID) -> list[Chat]:
        """Return all chats of a user, newest first."""
        query = select(Chat).where(Chat.user_id == user_id).order_by(Chat.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_messages(self, chat_id: UUID, user_id: UUID) -> list[Message]:
        """Return the messages of one of the user's chats, oldest first."""
        query = (
            select(Message)
            .join(Chat, Message.chat_id == Chat.id)
            .where(Message.chat_id == chat_id, Chat.user_id == user_id)
            .order_by(Message.created_at)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def rename_chat(self, chat_id: UUID, user_id: UUID, title: str) -> Chat:
        """Set a new title on one of the user's chats."""
        chat = await self._get_owned_chat(chat_id, user_id)

        try:
            chat.title = title
            await self.db.commit()
            await self.db.refresh(chat)
            return chat
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete_chat(self, chat_id: UUID, user_id: UUID) -> None:
        """Delete one of the user's chats together with its messages."""
        chat = await self._get_owned_chat(chat_id, user_id)

        try:
            await self.db.delete(chat)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    # Private helper methods

    async def _create_completion(self, messages: list[ChatMessageIn], model: str, stream: bool = False):
        """Call the chat completions endpoint once."""
        kwargs = {"stream": True} if stream else {}
        try:
            return await self.client.chat.completions.create(
                model=model,
                messages=[message.model_dump(mode="json") for message in messages],
                **kwargs,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {str(e)}")
            raise CompletionServiceError(f"Completion request failed: {str(e)}") from e

    async def _check_chat_access(self, options: ChatOptions) -> None:
        """Reject a foreign or unknown ``chat_id`` before any upstream call is made."""
        if options.user_id and options.chat_id:
            await self._get_owned_chat(options.chat_id, options.user_id)

    async def _persist_exchange(
        self, messages: list[ChatMessageIn], answer: str, options: ChatOptions
    ) -> None:
        """Store the latest message and the assistant reply, creating the chat if needed."""
        title = self._derive_title(messages)
        latest = messages[-1]

        try:
            chat_id = await self._ensure_chat_record(options.chat_id, options.user_id, title)

            # Explicit timestamps keep the user row ahead of the reply.
            now = datetime.utcnow()
            self.db.add_all(
                [
                    Message(
                        chat_id=chat_id,
                        role=latest.role,
                        content=latest.content,
                        model=options.model,
                        created_at=now,
                    ),
                    Message(
                        chat_id=chat_id,
                        role=MessageRole.ASSISTANT,
                        content=answer,
                        model=options.model,
                        created_at=now + timedelta(microseconds=1),
                    ),
                ]
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to persist chat exchange: {str(e)}")
            raise

    async def _ensure_chat_record(self, chat_id: UUID | None, user_id: UUID, title: str) -> UUID:
        """Return the id of the chat to append to, creating it when none was given."""
        if chat_id:
            await self._get_owned_chat(chat_id, user_id)
            return chat_id

        chat = Chat(user_id=user_id, title=title)
        self.db.add(chat)
        await self.db.flush()
        return chat.id

    async def _get_owned_chat(self, chat_id: UUID, user_id: UUID) -> Chat:
        query = select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
        result = await self.db.execute(query)
        chat = result.scalar_one_or_none()

        if not chat:
            raise ChatNotFoundError()

        return chat

    @staticmethod
    def _derive_title(messages: list[ChatMessageIn]) -> str:
        """Title a new chat after its first user message."""
        first = next(
            (message for message in messages if message.role == MessageRole.USER),
            messages[0] if messages else None,
        )
        if first is None or not first.content:
            return DEFAULT_CHAT_TITLE
        return first.content[:TITLE_MAX_LENGTH]
