import logging
from sqlalchemy import (
    Table,
    Column,
    Integer,
    String,
    event,
)
from sqlalchemy.orm import registry
from case_events.domain import model

logger = logging.getLogger(__name__)

# SQLAlchemy 2.0 pattern: use registry
mapper_registry = registry()
metadata = mapper_registry.metadata

case_events = Table(
    "case_events",
    metadata,
    Column("store_id", Integer, primary_key=True, autoincrement=True),
    Column("id", Integer, nullable=False, unique=True),
    Column("test_date", String(32), nullable=False, index=True),
    Column("date_of_birth", String(32), nullable=False),
    Column("name", String(255)),
    Column("location", String(255)),
    Column("age", Integer),
    Column("status", String(16), nullable=False),
    Column("type", String(16), nullable=False),
)


def start_mappers():
    logger.info("Starting mappers")
    mapper_registry.map_imperatively(model.CaseEvent, case_events)


@event.listens_for(model.CaseEvent, "load")
def receive_load(case_event, _):
    case_event.events = []
