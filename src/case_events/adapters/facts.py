"""Random fact source - supplies realistic values for generated case events."""

import abc
from datetime import datetime, timezone
from typing import Sequence, TypeVar

from faker import Faker

T = TypeVar("T")

EARLIEST_DOB = datetime(1970, 2, 1, tzinfo=timezone.utc)
LATEST_DOB = datetime(2020, 2, 1, tzinfo=timezone.utc)
RECENT_TEST_DAYS = 30
MAX_CASE_ID = 99999


class AbstractFactSource(abc.ABC):
    """Abstract source of random facts, injected so tests can script the draws."""

    @abc.abstractmethod
    def pick(self, options: Sequence[T]) -> T:
        """Pick one of ``options`` uniformly at random."""
        raise NotImplementedError

    @abc.abstractmethod
    def case_id(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def date_of_birth(self) -> datetime:
        raise NotImplementedError

    @abc.abstractmethod
    def test_date(self) -> datetime:
        raise NotImplementedError

    @abc.abstractmethod
    def full_name(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def location(self) -> str:
        raise NotImplementedError


class FakerFactSource(AbstractFactSource):
    """Fact source backed by Faker."""

    def __init__(self, seed: int = None, locale: str = "en_US"):
        """
        Initialize fact source.

        Args:
            seed: Seed for reproducible draws. If None, draws are random.
            locale: Faker locale; must provide US-style state abbreviations.
        """
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def pick(self, options):
        return self.fake.random_element(elements=tuple(options))

    def case_id(self) -> int:
        return self.fake.random_int(min=1, max=MAX_CASE_ID)

    def date_of_birth(self) -> datetime:
        return self.fake.date_time_between_dates(
            datetime_start=EARLIEST_DOB,
            datetime_end=LATEST_DOB,
            tzinfo=timezone.utc,
        )

    def test_date(self) -> datetime:
        return self.fake.date_time_between(
            start_date=f"-{RECENT_TEST_DAYS}d",
            end_date="now",
            tzinfo=timezone.utc,
        )

    def full_name(self) -> str:
        return self.fake.name()

    def location(self) -> str:
        return f"{self.fake.city()}, {self.fake.state_abbr()}"
