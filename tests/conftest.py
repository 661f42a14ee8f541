from __future__ import annotations

from datetime import date, datetime

import pytest

from support import UTC, InMemoryEvents, InMemorySummaries

# Sunday 2025-01-19 .. Saturday 2025-01-25
WEEK_START = date(2025, 1, 19)


@pytest.fixture
def week_start() -> date:
    return WEEK_START


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday of the following week
    return datetime(2025, 1, 29, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def events_repo() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def summaries_repo() -> InMemorySummaries:
    return InMemorySummaries()
