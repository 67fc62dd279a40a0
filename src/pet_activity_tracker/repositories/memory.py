"""In-memory repository implementations."""

import asyncio
import math
from datetime import datetime
from typing import Any, List, Optional, Tuple
from uuid import UUID

import structlog

from ..domain.clock import Clock, system_clock
from ..domain.exceptions import NotFoundError, ValidationError
from ..domain.models import Activity, ActivityType, ChatMessage
from .base import ActivityRepository, ChatRepository

logger = structlog.get_logger()

DEFAULT_CHAT_HISTORY_LIMIT = 50


def _parse_duration(duration: Any) -> Optional[float]:
    """Coerce a client-supplied duration to a positive float, or None."""
    if duration is None or isinstance(duration, bool):
        return None
    try:
        value = float(duration)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class InMemoryActivityRepository(ActivityRepository):
    """Activity store kept in process memory.

    Mutations are serialized through a single asyncio lock so that the
    append/delete and the ``current_pet`` assignment never interleave.
    """

    def __init__(self, clock: Clock = system_clock) -> None:
        self._activities: List[Activity] = []
        self._current_pet = ""
        self._clock = clock
        self._lock = asyncio.Lock()
        logger.info("activity_repository_initialized")

    @property
    def current_pet(self) -> str:
        return self._current_pet

    async def add(
        self,
        pet_name: Optional[str],
        activity_type: Optional[str],
        duration: Any,
        date_time: Optional[datetime] = None,
    ) -> Activity:
        """Validate and append a new activity, making its pet the current one."""
        name = pet_name.strip() if isinstance(pet_name, str) else ""
        if not name:
            raise ValidationError("Pet name is required")

        value = _parse_duration(duration)
        if value is None:
            raise ValidationError("Duration/quantity must be greater than 0")

        try:
            kind = ActivityType(activity_type)
        except ValueError:
            raise ValidationError("Invalid activity type")

        now = self._clock()
        activity = Activity(
            pet_name=name,
            type=kind,
            duration=value,
            date_time=date_time or now,
            created_at=now,
        )
        async with self._lock:
            self._activities.append(activity)
            self._current_pet = name

        logger.info(
            "activity_logged",
            activity_id=str(activity.id),
            pet_name=name,
            activity_type=kind.value,
            duration=value,
        )
        return activity

    async def list(self) -> Tuple[List[Activity], str]:
        async with self._lock:
            return list(self._activities), self._current_pet

    async def delete_by_id(self, activity_id: UUID) -> Activity:
        """Remove the first activity with the given id."""
        async with self._lock:
            for index, activity in enumerate(self._activities):
                if activity.id == activity_id:
                    del self._activities[index]
                    break
            else:
                logger.warning("activity_not_found", activity_id=str(activity_id))
                raise NotFoundError("Activity not found")

        logger.info("activity_deleted", activity_id=str(activity_id))
        return activity

    async def count(self) -> int:
        async with self._lock:
            return len(self._activities)


class InMemoryChatRepository(ChatRepository):
    """Bounded chat log; the oldest messages are dropped first."""

    def __init__(self, limit: int = DEFAULT_CHAT_HISTORY_LIMIT) -> None:
        self._messages: List[ChatMessage] = []
        self._limit = limit
        self._lock = asyncio.Lock()
        logger.info("chat_repository_initialized", limit=limit)

    async def append_exchange(self, user_message: ChatMessage, ai_message: ChatMessage) -> None:
        async with self._lock:
            self._messages.extend((user_message, ai_message))
            overflow = len(self._messages) - self._limit
            if overflow > 0:
                del self._messages[:overflow]
                logger.debug("chat_history_truncated", dropped=overflow)

    async def history(self) -> List[ChatMessage]:
        async with self._lock:
            return list(self._messages)

    async def count(self) -> int:
        async with self._lock:
            return len(self._messages)
