"""Domain models for the pet activity tracker."""

from datetime import datetime
from enum import Enum
from typing import List, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityType(str, Enum):
    """Closed set of loggable activities."""

    WALK = "walk"
    MEAL = "meal"
    MEDICATION = "medication"


class Activity(CamelModel):
    """A logged walk, meal or medication event."""

    id: UUID = Field(default_factory=uuid4)
    pet_name: str
    type: ActivityType
    duration: float  # minutes for walks, quantity otherwise
    date_time: datetime
    created_at: datetime


class MessageType(str, Enum):
    USER = "user"
    AI = "ai"


class ChatMessage(CamelModel):
    """Chat message model."""

    id: UUID = Field(default_factory=uuid4)
    type: MessageType
    text: str
    timestamp: datetime


class Summary(CamelModel):
    """Aggregates over today's activities."""

    walks: Union[int, float] = 0
    meals: int = 0
    medications: int = 0
    total_activities: int = 0


class Reminder(CamelModel):
    show_reminder: bool = False
    message: str = ""
    current_time: datetime


class ActivityListing(CamelModel):
    activities: List[Activity] = []
    current_pet: str = ""


class ChatExchange(CamelModel):
    """The user message and the reply generated for it."""

    user_message: ChatMessage
    ai_message: ChatMessage
