"""Test configuration."""
import os
from typing import Any, Callable, Dict, List

import pytest
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Import after environment setup
from vocabot.models.word_models import WordPool
from vocabot.services.word_service import WordService

fake = Faker()


class StubRandom:
    """Random generator returning a fixed sequence of values."""

    def __init__(self, *values: float):
        self.values = list(values)

    def random(self) -> float:
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@pytest.fixture
def stub_random() -> type:
    """Factory for random generators with scripted values."""
    return StubRandom


@pytest.fixture
def make_record() -> Callable[..., Dict[str, Any]]:
    """Build a raw word record in the import format."""
    def _make_record(**overrides: Any) -> Dict[str, Any]:
        record = {
            "word": fake.unique.word(),
            "part_of_speech": fake.random_element(["n.", "v.", "adj.", "adv."]),
            "explanation": [fake.sentence() for _ in range(fake.random_int(1, 3))],
        }
        record.update(overrides)
        return record
    return _make_record


@pytest.fixture
def records(make_record) -> List[Dict[str, Any]]:
    """Three valid word records."""
    return [make_record() for _ in range(3)]


@pytest.fixture
def pool(records) -> WordPool:
    """A word pool with three freshly imported words."""
    pool = WordPool()
    WordService(pool).import_words(records)
    return pool
