"""Test suite for concurrent operations."""

import asyncio

import pytest


@pytest.mark.asyncio
async def test_concurrent_activity_logging(client):
    """Test logging many activities concurrently."""
    responses = await asyncio.gather(
        *[
            client.post(
                "/api/activities",
                json={"petName": f"Pet {i}", "activityType": "walk", "duration": i + 1},
            )
            for i in range(20)
        ]
    )

    assert all(r.status_code == 201 for r in responses)
    ids = [r.json()["data"]["id"] for r in responses]
    assert len(set(ids)) == 20  # All IDs should be unique

    summary = (await client.get("/api/summary")).json()["data"]
    assert summary["totalActivities"] == 20
    assert summary["walks"] == sum(range(1, 21))


@pytest.mark.asyncio
async def test_concurrent_deletes(client):
    """Test that racing deletes of the same id succeed exactly once."""
    created = (
        await client.post(
            "/api/activities",
            json={"petName": "Rex", "activityType": "meal", "duration": 1},
        )
    ).json()["data"]

    responses = await asyncio.gather(
        *[client.delete(f"/api/activities/{created['id']}") for _ in range(5)]
    )
    assert sorted(r.status_code for r in responses) == [200, 404, 404, 404, 404]


@pytest.mark.asyncio
async def test_concurrent_chat_messages(client):
    """Test that concurrent posts keep user/ai pairs together and the log bounded."""
    responses = await asyncio.gather(
        *[client.post("/api/chat", json={"message": f"note {i}"}) for i in range(40)]
    )
    assert all(r.status_code == 200 for r in responses)

    history = (await client.get("/api/chat")).json()["data"]
    assert len(history) == 50
    for user_message, ai_message in zip(history[::2], history[1::2]):
        assert user_message["type"] == "user"
        assert ai_message["type"] == "ai"
