"""Chat service tying the response selector to the chat log."""

from typing import List, Optional

import structlog

from ..domain.clock import Clock, system_clock
from ..domain.exceptions import ValidationError
from ..domain.models import ChatExchange, ChatMessage, MessageType
from ..repositories.base import ActivityRepository, ChatRepository
from .responder import ResponseSelector

logger = structlog.get_logger()


class ChatService:
    """Answers user messages and records both sides of the exchange."""

    def __init__(
        self,
        activities: ActivityRepository,
        chat_log: ChatRepository,
        selector: Optional[ResponseSelector] = None,
        clock: Clock = system_clock,
    ) -> None:
        self.activities = activities
        self.chat_log = chat_log
        self.selector = selector or ResponseSelector()
        self.clock = clock

    async def post_message(self, text: Optional[str]) -> ChatExchange:
        """Store a user message together with the generated reply.

        Raises:
            ValidationError: if the message is missing or blank. The log is
                left untouched in that case.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Message is required")

        now = self.clock()
        user_message = ChatMessage(type=MessageType.USER, text=text.strip(), timestamp=now)

        activities, current_pet = await self.activities.list()
        reply = self.selector.select(text, activities, current_pet, now)
        ai_message = ChatMessage(type=MessageType.AI, text=reply, timestamp=self.clock())

        await self.chat_log.append_exchange(user_message, ai_message)
        logger.info(
            "message_processed",
            user_message_length=len(user_message.text),
            ai_response_length=len(reply),
        )
        return ChatExchange(user_message=user_message, ai_message=ai_message)

    async def history(self) -> List[ChatMessage]:
        return await self.chat_log.history()
