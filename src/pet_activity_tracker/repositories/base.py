"""Base repository interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional, Tuple
from uuid import UUID

from ..domain.models import Activity, ChatMessage


class ActivityRepository(ABC):
    """Abstract store of activity records and the session's current pet."""

    @abstractmethod
    async def add(
        self,
        pet_name: Optional[str],
        activity_type: Optional[str],
        duration: Any,
        date_time: Optional[datetime] = None,
    ) -> Activity:
        """Validate and append a new activity."""
        pass

    @abstractmethod
    async def list(self) -> Tuple[List[Activity], str]:
        """Return every stored activity in insertion order and the current pet."""
        pass

    @abstractmethod
    async def delete_by_id(self, activity_id: UUID) -> Activity:
        """Remove an activity and return it."""
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class ChatRepository(ABC):
    """Abstract bounded chat log."""

    @abstractmethod
    async def append_exchange(self, user_message: ChatMessage, ai_message: ChatMessage) -> None:
        """Append a user/ai pair and drop the oldest entries past the limit."""
        pass

    @abstractmethod
    async def history(self) -> List[ChatMessage]:
        """Chronological snapshot of the log."""
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
