"""Unit tests for publishing case event changes to Redis."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

from case_events.adapters import redis_adapter
from case_events.domain.events import CaseEventCreated, CaseEventUpdated

RECORD = {
    "id": 17,
    "testDate": "2020-03-01T09:00:00.000Z",
    "dateOfBirth": "1985-06-15T00:00:00.000Z",
    "name": "Jane Doe",
    "location": "Austin, TX",
    "age": 34,
    "status": "CONFIRMED",
    "type": "UPDATE",
}


def make_event():
    return CaseEventUpdated(
        case_id=17,
        status="CONFIRMED",
        previous_status="POTENTIAL",
        record=RECORD,
        occurred_at=datetime(2020, 3, 2, 10, 0, tzinfo=timezone.utc),
    )


def test_message_carries_record_snapshot_and_change():
    message = redis_adapter.to_message(make_event())

    assert message == {
        "change": "CaseEventUpdated",
        "previousStatus": "POTENTIAL",
        "occurredAt": "2020-03-02T10:00:00.000Z",
        "record": RECORD,
    }


def test_created_message_has_no_previous_status():
    event = CaseEventCreated(
        case_id=17,
        status="POTENTIAL",
        record=dict(RECORD, status="POTENTIAL", type="NEW"),
        occurred_at=datetime(2020, 3, 1, 9, 0, tzinfo=timezone.utc),
    )

    assert redis_adapter.to_message(event)["previousStatus"] is None


def test_publish_sends_to_channel(redis_client):
    pubsub = redis_client.pubsub()
    pubsub.subscribe("surveillance:case-events")
    pubsub.get_message(timeout=0.1)  # subscribe confirmation

    receivers = redis_adapter.publish("surveillance:case-events", make_event())

    message = pubsub.get_message(timeout=1)
    assert receivers == 1
    assert message["type"] == "message"
    assert json.loads(message["data"])["record"] == RECORD


def test_client_is_built_from_config_on_first_use(monkeypatch):
    monkeypatch.setattr(redis_adapter, "_client", None)
    monkeypatch.setenv("REDIS_HOST", "redis.internal")
    monkeypatch.setenv("REDIS_PORT", "6380")

    with patch.object(redis_adapter.redis, "Redis") as mock_redis:
        first = redis_adapter.get_client()
        second = redis_adapter.get_client()

    mock_redis.assert_called_once_with(host="redis.internal", port=6380)
    assert first is second
