"""Root conftest — shared fixtures for deterministic stores."""

from datetime import datetime, timezone

import pytest

from qualstore.core.qualitative_store import QualitativeStore

FIXED_NOW = datetime(2025, 3, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


class SequentialIds:
    """id_factory yielding '<prefix>-1', '<prefix>-2', ... per prefix."""

    def __init__(self):
        self.counters: dict[str, int] = {}

    def __call__(self, prefix: str) -> str:
        self.counters[prefix] = self.counters.get(prefix, 0) + 1
        return f"{prefix}-{self.counters[prefix]}"


def make_store(**kwargs) -> QualitativeStore:
    kwargs.setdefault("id_factory", SequentialIds())
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return QualitativeStore(**kwargs)


@pytest.fixture
def store() -> QualitativeStore:
    return make_store()
