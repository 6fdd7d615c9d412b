import logging
from datetime import datetime, timezone

from case_events.domain import model
from case_events.domain.commands import ClearCaseEvents, CreateCaseEvent, UpdateCaseEvent
from case_events.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def create_case_event(
    command: CreateCaseEvent,
    uow: AbstractUnitOfWork
) -> model.CaseEvent:
    """
    Report a new case event and push it to the record store.

    Flow:
    1. Draw date of birth, test date, id, name and location from the fact source
    2. Build the case event in status POTENTIAL (type NEW)
    3. Insert it via the repository and commit

    Args:
        command: CreateCaseEvent command
        uow: Unit of work for transaction management (includes the fact source)

    Returns:
        The stored case event, store id populated

    Raises:
        StoreWriteError: If the case event cannot be inserted
    """
    logger.debug("Generating new case event")

    with uow:
        date_of_birth = uow.facts.date_of_birth()
        case_event = model.CaseEvent.new(
            id=uow.facts.case_id(),
            test_date=uow.facts.test_date(),
            date_of_birth=date_of_birth,
            name=uow.facts.full_name(),
            location=uow.facts.location(),
            now=datetime.now(timezone.utc),
        )
        case_event.create()

        uow.case_events.add(case_event)
        uow.commit()

    return case_event


def update_case_event(
    command: UpdateCaseEvent,
    uow: AbstractUnitOfWork
) -> model.CaseEvent:
    """
    Advance the pending case event with the most recent test date.

    POTENTIAL moves to CONFIRMED or NEGATIVE, CONFIRMED moves to DEAD or
    RECOVERED. Case events reaching a terminal status are removed from the
    store, all others are updated in place (status and type only).

    Raises:
        NoRecordError: If the store holds no case event
        InvariantViolation: If the selected case event has no transitions
        StoreError: If reading, updating or removing fails
    """
    logger.debug("Updating existing case event")

    with uow:
        logger.debug("Grabbing newest case event from store by testDate")
        case_event = uow.case_events.get_newest_by_test_date()
        if case_event is None:
            logger.warning("No case event exists to update - skipping")
            raise model.NoRecordError("No existing case event to update")

        try:
            choices = model.next_status_choices(case_event.status)
        except model.InvariantViolation as e:
            logger.error(f"{e} (id: {case_event.id})")
            raise

        store_id = case_event.store_id
        retired = case_event.advance(uow.facts.pick(choices))

        if retired:
            uow.case_events.delete(store_id)
            logger.debug(f"Document removed (id: {case_event.id})")
        else:
            uow.case_events.update_fields(
                store_id, status=case_event.status, type=case_event.type
            )
            logger.debug(f"Document updated (id: {case_event.id})")
        uow.commit()

    case_event.store_id = None
    return case_event


def clear_case_events(
    command: ClearCaseEvents,
    uow: AbstractUnitOfWork
) -> int:
    """Remove every case event from the store and return how many were removed."""
    logger.info("Clearing all case events in persistent store")

    with uow:
        removed = uow.case_events.delete_all()
        uow.commit()

    logger.info(f"Removed {removed} case event(s)")
    return removed


def publish_case_event(event, uow: AbstractUnitOfWork):
    """
    Publish a case event domain event to Redis, if a channel is configured.

    Args:
        event: CaseEventCreated, CaseEventUpdated or CaseEventRetired event
        uow: Unit of work carrying the publish channel
    """
    if not uow.publish_channel:
        return

    logger.debug(f"Publishing {type(event).__name__} event for case {event.case_id}")
    try:
        from case_events.adapters import redis_adapter

        redis_adapter.publish(uow.publish_channel, event)
    except Exception as e:
        logger.error(f"Failed to publish {type(event).__name__} event for {event.case_id}: {e}")
        # Don't re-raise - external failures shouldn't break the flow
