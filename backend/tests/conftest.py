"""Shared test fixtures for all test groups."""

import itertools

import pytest

from app.domain.board import BoardStore
from app.domain.categories import DECONSTRUCT


class SnapshotRecorder:
    """Change listener that keeps every snapshot it receives."""

    def __init__(self):
        self.calls = []

    def __call__(self, snapshot):
        self.calls.append(snapshot)

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def recorder():
    return SnapshotRecorder()


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: problem-new-1, segments-new-2, ..."""
    counter = itertools.count(1)
    return lambda category: f"{category}-new-{next(counter)}"


@pytest.fixture
def sample_seed():
    """AI-drafted hypothesis in the shape the front-end receives it."""
    return {
        "problem": ["Slow checkout: carts abandoned at payment", "Hidden fees"],
        "existingAlternatives": ["Spreadsheets"],
        "customerSegments": ["Small online retailers"],
        "earlyAdopters": ["Shopify stores under 10 staff"],
        "jobToBeDone": ["Get paid without losing the sale", "A second job"],
    }


@pytest.fixture
def board(sample_seed, recorder, sequential_ids):
    """Deconstruct board hydrated from sample_seed with a recording listener."""
    return BoardStore.hydrate(DECONSTRUCT, sample_seed, on_change=recorder, id_factory=sequential_ids)
