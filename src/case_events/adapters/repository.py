"""Record store for case events following the Cosmic Python repository pattern."""

import abc
import logging
from typing import Optional, Set

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from case_events.adapters import orm
from case_events.domain import model

logger = logging.getLogger(__name__)


class StoreError(model.CaseEventError):
    """Base class for record store failures."""


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class AbstractRepository(abc.ABC):
    def __init__(self):
        self.seen = set()  # type: Set[model.CaseEvent]

    def add(self, case_event: model.CaseEvent) -> int:
        store_id = self._add(case_event)
        self.seen.add(case_event)
        return store_id

    def get_newest_by_test_date(self) -> Optional[model.CaseEvent]:
        case_event = self._get_newest_by_test_date()
        if case_event:
            self.seen.add(case_event)
        return case_event

    @abc.abstractmethod
    def _add(self, case_event: model.CaseEvent) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def _get_newest_by_test_date(self) -> Optional[model.CaseEvent]:
        raise NotImplementedError

    @abc.abstractmethod
    def update_fields(self, store_id: int, **fields) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, store_id: int) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def delete_all(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class SqlAlchemyRepository(AbstractRepository):
    def __init__(self, session):
        super().__init__()
        self.session = session

    def _add(self, case_event):
        try:
            self.session.add(case_event)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert case event {case_event.id}: {e}")
            raise StoreWriteError(f"Failed to insert case event {case_event.id}") from e
        logger.debug(f"Document inserted (id: {case_event.id})")
        return case_event.store_id

    def _get_newest_by_test_date(self):
        # Sorted descending: the most recent test date is picked, not the oldest.
        try:
            case_event = self.session.scalars(
                select(model.CaseEvent)
                .order_by(orm.case_events.c.test_date.desc())
                .limit(1)
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read case events: {e}")
            raise StoreReadError("Failed to read case events") from e

        if case_event is not None:
            # Detach so in-memory status changes are only persisted through update_fields().
            self.session.expunge(case_event)
        return case_event

    def update_fields(self, store_id: int, **fields) -> int:
        try:
            result = self.session.execute(
                update(orm.case_events)
                .where(orm.case_events.c.store_id == store_id)
                .values(**fields)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to update case event (store id: {store_id}): {e}")
            raise StoreWriteError(f"Failed to update case event with store id {store_id}") from e
        return result.rowcount

    def delete(self, store_id: int) -> int:
        try:
            result = self.session.execute(
                delete(orm.case_events).where(orm.case_events.c.store_id == store_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to remove case event (store id: {store_id}): {e}")
            raise StoreWriteError(f"Failed to remove case event with store id {store_id}") from e
        return result.rowcount

    def delete_all(self) -> int:
        try:
            result = self.session.execute(delete(orm.case_events))
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear case events: {e}")
            raise StoreWriteError("Failed to clear case events") from e
        return result.rowcount

    def count(self) -> int:
        try:
            return self.session.scalar(select(func.count()).select_from(orm.case_events))
        except SQLAlchemyError as e:
            logger.error(f"Failed to count case events: {e}")
            raise StoreReadError("Failed to count case events") from e
