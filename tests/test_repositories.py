"""Test suite for the in-memory stores."""

from datetime import datetime
from uuid import uuid4

import pytest

from pet_activity_tracker.domain.exceptions import NotFoundError, ValidationError
from pet_activity_tracker.domain.models import ActivityType, ChatMessage, MessageType


@pytest.mark.asyncio
async def test_add_activity_assigns_server_fields(activity_repository, clock):
    """Test that a new activity gets an id, timestamps and a trimmed name."""
    activity = await activity_repository.add("  Rex  ", "walk", 20)

    assert activity.pet_name == "Rex"
    assert activity.type == ActivityType.WALK
    assert activity.duration == 20.0
    assert activity.created_at == clock.now
    assert activity.date_time == clock.now
    assert activity_repository.current_pet == "Rex"


@pytest.mark.asyncio
async def test_add_activity_keeps_supplied_date_time(activity_repository, clock):
    when = datetime(2024, 5, 13, 8, 30)
    activity = await activity_repository.add("Rex", "meal", 1, when)

    assert activity.date_time == when
    assert activity.created_at == clock.now


@pytest.mark.asyncio
@pytest.mark.parametrize("duration", [0, -1, -0.5, None, "", "abc", float("nan"), True])
async def test_add_activity_rejects_bad_duration(activity_repository, duration):
    """Test that non-positive or unparseable durations are refused."""
    with pytest.raises(ValidationError) as exc:
        await activity_repository.add("Rex", "walk", duration)
    assert exc.value.message == "Duration/quantity must be greater than 0"
    assert await activity_repository.count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("duration", [0.1, 1, 45, "12.5"])
async def test_add_activity_accepts_positive_duration(activity_repository, duration):
    activity = await activity_repository.add("Rex", "meal", duration)
    assert activity.duration == float(duration)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", [None, "", "   "])
async def test_add_activity_requires_pet_name(activity_repository, name):
    with pytest.raises(ValidationError) as exc:
        await activity_repository.add(name, "walk", 10)
    assert exc.value.message == "Pet name is required"


@pytest.mark.asyncio
@pytest.mark.parametrize("activity_type", [None, "nap", "Walk", ""])
async def test_add_activity_rejects_unknown_type(activity_repository, activity_type):
    with pytest.raises(ValidationError) as exc:
        await activity_repository.add("Rex", activity_type, 10)
    assert exc.value.message == "Invalid activity type"
    assert activity_repository.current_pet == ""


@pytest.mark.asyncio
async def test_current_pet_follows_latest_log(activity_repository):
    await activity_repository.add("Rex", "walk", 10)
    await activity_repository.add("Luna", "meal", 1)

    activities, current_pet = await activity_repository.list()
    assert current_pet == "Luna"
    assert [a.pet_name for a in activities] == ["Rex", "Luna"]


@pytest.mark.asyncio
async def test_delete_removes_activity(activity_repository):
    """Test that a deleted id never shows up in the listing again."""
    first = await activity_repository.add("Rex", "walk", 10)
    second = await activity_repository.add("Rex", "meal", 1)

    deleted = await activity_repository.delete_by_id(first.id)
    assert deleted == first

    activities, _ = await activity_repository.list()
    assert [a.id for a in activities] == [second.id]

    with pytest.raises(NotFoundError):
        await activity_repository.delete_by_id(first.id)


@pytest.mark.asyncio
async def test_delete_unknown_id(activity_repository):
    with pytest.raises(NotFoundError) as exc:
        await activity_repository.delete_by_id(uuid4())
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_list_returns_a_copy(activity_repository):
    await activity_repository.add("Rex", "walk", 10)
    activities, _ = await activity_repository.list()
    activities.clear()
    assert await activity_repository.count() == 1


def _message(kind: MessageType, text: str, clock) -> ChatMessage:
    return ChatMessage(type=kind, text=text, timestamp=clock.now)


@pytest.mark.asyncio
async def test_chat_log_keeps_most_recent_messages(chat_repository, clock):
    """Test FIFO truncation at the default limit of 50 messages."""
    for i in range(30):
        await chat_repository.append_exchange(
            _message(MessageType.USER, f"question {i}", clock),
            _message(MessageType.AI, f"answer {i}", clock),
        )

    history = await chat_repository.history()
    assert len(history) == 50
    assert history[0].text == "question 5"
    assert history[-1].text == "answer 29"
    assert [m.type for m in history[:2]] == [MessageType.USER, MessageType.AI]
