"""Shared fixtures for the watchpet test suite."""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from watchpet.models.config import PetConfig
from watchpet.models.pet import Pet, Species

# A Tuesday in March: no seasonal accessory, no holiday mood.
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_pet(**overrides) -> Pet:
    base = {
        "id": "pet-1",
        "user_id": "u1",
        "name": "Mochi",
        "species": Species.CAT,
        "color": "blau",
        "hunger": 50,
        "happiness": 75,
        "last_fed": NOW,
        "last_status_update": NOW,
        "created_at": NOW - timedelta(days=30),
        "favorite_genre": "Drama",
    }
    base.update(overrides)
    return Pet(**base)


@pytest.fixture
def config() -> PetConfig:
    return PetConfig()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def in_memory_db(tmp_path):
    from watchpet.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def store(in_memory_db):
    from watchpet.storage.keyed_store import KeyedStore

    return KeyedStore(in_memory_db, retry_backoff=0, sleep=lambda _: None)


@pytest.fixture
def pet_repo(store):
    from watchpet.storage.repos.pet_repo import PetRepo

    return PetRepo(store)


@pytest.fixture
def streak_repo(store):
    from watchpet.storage.repos.streak_repo import StreakRepo

    return StreakRepo(store)


@pytest.fixture
def manager(pet_repo, streak_repo, config, clock):
    from watchpet.systems.pet_manager import PetManager

    return PetManager(pet_repo, streak_repo, config=config, clock=clock, rng=random.Random(42))


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def pet_factory():
    return make_pet
