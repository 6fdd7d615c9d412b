# pylint: disable=attribute-defined-outside-init
from __future__ import annotations
import abc
import logging
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session


import config
from case_events.adapters import facts, orm, repository

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(abc.ABC):
    case_events: repository.AbstractRepository
    facts: facts.AbstractFactSource
    publish_channel: str = None

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        self._commit()

    def collect_new_events(self):
        for case_event in self.case_events.seen:
            while case_event.events:
                yield case_event.events.pop(0)

    @abc.abstractmethod
    def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


def create_session_factory(database_uri: str = None) -> sessionmaker:
    """Create a session factory bound to the case event store, creating the schema if needed."""
    database_uri = database_uri or config.get_database_uri()
    logger.debug(f"Database location {database_uri}")
    engine = create_engine(database_uri)
    orm.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_factory=None, facts_impl=None, publish_channel=None):
        self.session_factory = session_factory or create_session_factory()
        self.facts = facts_impl or facts.FakerFactSource()
        self.publish_channel = publish_channel

    def __enter__(self):
        self.session = self.session_factory()  # type: Session
        self.case_events = repository.SqlAlchemyRepository(self.session)
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.session.close()

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to commit case event changes: {e}")
            raise repository.StoreWriteError("Failed to commit case event changes") from e

    def rollback(self):
        self.session.rollback()
