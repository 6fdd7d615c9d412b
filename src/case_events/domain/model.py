import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from case_events.domain.events import CaseEventCreated, CaseEventRetired, CaseEventUpdated


class Status(str, Enum):
    POTENTIAL = "POTENTIAL"
    CONFIRMED = "CONFIRMED"
    NEGATIVE = "NEGATIVE"
    DEAD = "DEAD"
    RECOVERED = "RECOVERED"


class EventType(str, Enum):
    NEW = "NEW"
    UPDATE = "UPDATE"


EVENT_TYPES = (EventType.NEW, EventType.UPDATE)

# A record is only ever read back in one of the two non-terminal statuses.
TRANSITIONS = {
    Status.POTENTIAL: (Status.CONFIRMED, Status.NEGATIVE),
    Status.CONFIRMED: (Status.DEAD, Status.RECOVERED),
}
TERMINAL_STATUSES = frozenset({Status.NEGATIVE, Status.DEAD, Status.RECOVERED})

DAYS_PER_YEAR = 365.25


class CaseEventError(Exception):
    """Base class for failures of a single case event operation."""


class NoRecordError(CaseEventError):
    """Raised when an update is requested but the store holds no case event."""


class InvariantViolation(CaseEventError):
    """Raised when a stored case event is in a status with no transitions."""


def format_timestamp(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision, e.g. 2020-03-01T10:00:00.000Z."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def age_in_years(date_of_birth: datetime, now: datetime) -> int:
    """Whole years between birth and now, counting a year as 365.25 days."""
    days = (now - date_of_birth).total_seconds() / 86400
    return math.floor(days / DAYS_PER_YEAR)


def next_status_choices(status: str) -> Tuple[Status, Status]:
    """Return the statuses a case event in ``status`` may move to."""
    try:
        return TRANSITIONS[Status(status)]
    except (KeyError, ValueError):
        raise InvariantViolation(f"Case event in status {status} cannot be updated") from None


@dataclass
class CaseEvent:
    id: int
    test_date: str            # ISO-8601 UTC
    date_of_birth: str        # ISO-8601 UTC
    name: str
    location: str             # 'City, ST'
    age: int
    status: str = Status.POTENTIAL.value
    type: str = EventType.NEW.value
    store_id: Optional[int] = None
    events: List = field(default_factory=list, compare=False, repr=False)

    def __hash__(self):
        return hash(self.id)

    @classmethod
    def new(cls, id: int, test_date: datetime, date_of_birth: datetime,
            name: str, location: str, now: datetime = None) -> "CaseEvent":
        """Build a freshly reported case event in status POTENTIAL."""
        now = now or datetime.now(timezone.utc)
        return cls(
            id=id,
            test_date=format_timestamp(test_date),
            date_of_birth=format_timestamp(date_of_birth),
            name=name,
            location=location,
            age=age_in_years(date_of_birth, now),
            status=Status.POTENTIAL.value,
            type=EventType.NEW.value,
        )

    def create(self) -> None:
        """Mark the case event as created and raise the matching domain event."""
        self.events.append(
            CaseEventCreated(
                case_id=self.id,
                status=self.status,
                record=self.to_dict(),
                occurred_at=datetime.now(timezone.utc),
            )
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in {s.value for s in TERMINAL_STATUSES}

    def advance(self, new_status: str) -> bool:
        """
        Move the case event to ``new_status``.

        The new status must be one of the allowed successors of the current
        one. Returns True if the case event reached a terminal status and has
        to be retired from the store.
        """
        new_status = Status(new_status)
        previous = self.status
        if new_status not in next_status_choices(previous):
            raise InvariantViolation(
                f"Case event {self.id} cannot move from {previous} to {new_status.value}"
            )

        self.status = new_status.value
        self.type = EventType.UPDATE.value

        event_cls = CaseEventRetired if self.is_terminal else CaseEventUpdated
        self.events.append(
            event_cls(
                case_id=self.id,
                status=self.status,
                previous_status=previous,
                record=self.to_dict(),
                occurred_at=datetime.now(timezone.utc),
            )
        )
        return self.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot for emission; the store-internal id is left out."""
        return {
            "id": self.id,
            "testDate": self.test_date,
            "dateOfBirth": self.date_of_birth,
            "name": self.name,
            "location": self.location,
            "age": self.age,
            "status": self.status,
            "type": self.type,
        }
