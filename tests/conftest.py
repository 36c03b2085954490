from __future__ import annotations

import pytest

from tests.support.inventory import FakeInventoryStore, RecordedErrors


@pytest.fixture
def store() -> FakeInventoryStore:
    return FakeInventoryStore()


@pytest.fixture
def errors() -> RecordedErrors:
    return RecordedErrors()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "STOCKSYNC_API_URL",
        "STOCKSYNC_USER_AGENT",
        "STOCKSYNC_RATE_LIMIT",
        "STOCKSYNC_PAGE_SIZE",
        "STOCKSYNC_BATCH_SIZE",
        "STOCKSYNC_ENSURE_CHANNELS",
    ):
        monkeypatch.delenv(name, raising=False)
