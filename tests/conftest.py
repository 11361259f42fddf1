from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from palabras.db.blob_store import InMemoryBlobStore
from palabras.db.storage import MemStorage
from palabras.main import create_app
from palabras.services.difficulty_tuner import DifficultyTuner
from palabras.services.scheduler import SpacedRepetitionScheduler


@pytest.fixture
def now():
    return datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scheduler():
    return SpacedRepetitionScheduler()


@pytest.fixture
def tuner():
    return DifficultyTuner()


@pytest.fixture
def record(scheduler, now):
    return scheduler.create_record("test_word_1", now=now)


@pytest.fixture
def store():
    return InMemoryBlobStore()


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def client(storage, store):
    return TestClient(create_app(storage=storage, store=store))
