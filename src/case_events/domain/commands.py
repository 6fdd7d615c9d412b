"""Commands for the case event generator."""

from dataclasses import dataclass

from shared.domain.commands import Command


@dataclass
class CreateCaseEvent(Command):
    """Command to report a new case event."""
    pass


@dataclass
class UpdateCaseEvent(Command):
    """Command to advance the status of the next pending case event."""
    pass


@dataclass
class ClearCaseEvents(Command):
    """Command to remove every case event from the store."""
    pass
