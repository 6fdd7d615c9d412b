"""Domain events for the case event generator."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from shared.domain.commands import Event


@dataclass
class CaseEventCreated(Event):
    """Event raised when a new case event has been reported."""
    case_id: int
    status: str
    record: Dict[str, Any]
    occurred_at: datetime


@dataclass
class CaseEventUpdated(Event):
    """Event raised when a case event moved to a non-terminal status."""
    case_id: int
    status: str
    previous_status: str
    record: Dict[str, Any]
    occurred_at: datetime


@dataclass
class CaseEventRetired(Event):
    """Event raised when a case event reached a terminal status and left the store."""
    case_id: int
    status: str
    previous_status: str
    record: Dict[str, Any]
    occurred_at: datetime
