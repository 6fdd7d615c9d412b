"""Generation loop - drives new/update case event operations and emits the results."""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TextIO

from case_events.domain import commands, model
from case_events.service_layer import messagebus
from case_events.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

COMMANDS_BY_TYPE = {
    model.EventType.NEW: commands.CreateCaseEvent,
    model.EventType.UPDATE: commands.UpdateCaseEvent,
}


@dataclass
class Outcome:
    """Result of a single generation attempt: either a record or the error that prevented it."""
    kind: model.EventType
    record: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CaseEventGenerator:
    """Runs the generation loop against one unit of work and writes JSON lines to ``output``."""

    def __init__(self, uow: AbstractUnitOfWork, output: TextIO = None):
        self.uow = uow
        self.output = output or sys.stdout

    def attempt(self, kind: model.EventType) -> Outcome:
        """Run a single new or update operation and capture its outcome."""
        command = COMMANDS_BY_TYPE[kind]()
        try:
            [case_event] = messagebus.handle(command, self.uow)
        except model.CaseEventError as e:
            return Outcome(kind=kind, error=e)
        except Exception as e:
            logger.exception(f"Unexpected error processing {kind.value} event")
            return Outcome(kind=kind, error=e)
        return Outcome(kind=kind, record=case_event.to_dict())

    def emit(self, record: Dict[str, Any]) -> None:
        self.output.write(json.dumps(record) + "\n")
        self.output.flush()

    def generate(self, count: int) -> List[Outcome]:
        """
        Run ``count`` iterations, each randomly creating or updating a case event.

        Every iteration is attempted exactly once. Failed iterations are logged
        and emit nothing; they never abort the loop.

        Returns:
            One outcome per iteration, in order
        """
        count = count or 0
        logger.info(f"Generating {max(count, 0)} case events")

        outcomes = []
        for i in range(count):
            kind = model.EventType(self.uow.facts.pick(model.EVENT_TYPES))
            logger.debug(f"Processing {kind.value} event ({i + 1}/{count})")

            outcome = self.attempt(kind)
            if outcome.ok:
                self.emit(outcome.record)
            else:
                logger.debug(f"Skipping {kind.value} event: {outcome.error}")
            outcomes.append(outcome)

        emitted = sum(1 for outcome in outcomes if outcome.ok)
        logger.info(f"Emitted {emitted} of {len(outcomes)} case events")
        return outcomes

    def clear(self) -> int:
        """Remove every case event from the store."""
        [removed] = messagebus.handle(commands.ClearCaseEvents(), self.uow)
        return removed
