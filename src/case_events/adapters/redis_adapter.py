"""
Redis adapter for publishing case event changes.

Every message is one JSON object carrying the emitted record snapshot, so
subscribers see the same record as the stdout stream plus the change that
produced it:

    {"change": "CaseEventRetired", "previousStatus": "POTENTIAL",
     "occurredAt": "2020-03-01T10:00:00.000Z", "record": {...}}

``previousStatus`` is null for newly created case events.
"""

import json
import logging
from typing import Any, Dict

import redis

import config
from case_events.domain.model import format_timestamp
from shared.domain.commands import Event

logger = logging.getLogger(__name__)

_client = None


def get_client() -> redis.Redis:
    """Return the shared Redis client, connecting with config settings on first use."""
    global _client
    if _client is None:
        _client = redis.Redis(**config.get_redis_host_and_port())
    return _client


def to_message(event: Event) -> Dict[str, Any]:
    return {
        "change": type(event).__name__,
        "previousStatus": getattr(event, "previous_status", None),
        "occurredAt": format_timestamp(event.occurred_at),
        "record": event.record,
    }


def publish(channel: str, event: Event) -> int:
    """Publish the case event change to a Redis channel; returns the number of receivers."""
    logger.info("publishing: channel=%s, change=%s, case=%s",
                channel, type(event).__name__, event.case_id)
    return get_client().publish(channel, json.dumps(to_message(event)))
