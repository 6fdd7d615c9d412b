"""Unit tests for the Faker backed fact source"""
import re
from datetime import datetime, timedelta, timezone

import pytest

from case_events.adapters.facts import EARLIEST_DOB, LATEST_DOB, MAX_CASE_ID, FakerFactSource
from case_events.domain.model import EVENT_TYPES, Status


@pytest.fixture
def facts():
    return FakerFactSource(seed=1234)


def test_date_of_birth_within_bounds(facts):
    for _ in range(50):
        dob = facts.date_of_birth()
        assert EARLIEST_DOB <= dob <= LATEST_DOB


def test_test_date_within_last_30_days(facts):
    now = datetime.now(timezone.utc)
    for _ in range(50):
        test_date = facts.test_date()
        assert now - timedelta(days=30, minutes=1) <= test_date <= now + timedelta(minutes=1)


def test_case_id_is_positive(facts):
    for _ in range(50):
        assert 1 <= facts.case_id() <= MAX_CASE_ID


def test_location_is_city_and_state_abbreviation(facts):
    assert re.fullmatch(r".+, [A-Z]{2}", facts.location())


def test_full_name_is_not_empty(facts):
    assert facts.full_name().strip()


def test_pick_returns_one_of_the_options(facts):
    options = (Status.CONFIRMED, Status.NEGATIVE)
    picks = {facts.pick(options) for _ in range(50)}
    assert picks <= set(options)
    assert facts.pick(EVENT_TYPES) in EVENT_TYPES


def test_seed_makes_draws_reproducible():
    first = FakerFactSource(seed=99)
    second = FakerFactSource(seed=99)

    assert first.full_name() == second.full_name()
    assert first.case_id() == second.case_id()
    assert first.date_of_birth() == second.date_of_birth()
