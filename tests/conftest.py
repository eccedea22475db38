"""Shared fixtures: a throwaway SQLite file per test, a controllable clock,
and a store that counts how often it is hit."""

import os
import sys
from collections import Counter
from pathlib import Path

import pytest
import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))
os.environ.setdefault("METRICS_ENABLED", "false")

from ojtlog.core.cache import TTLCache
from ojtlog.core.errors import StoreError
from ojtlog.crud.logs import LogStore
from ojtlog.db.session import build_engine, build_session_factory, init_models
from ojtlog.schemas.log import LogEntryForm
from ojtlog.services.identity import StaticIdentity
from ojtlog.services.local_store import LegacyLogArchive, LocalStore
from ojtlog.services.log_repository import LogRepository


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingLogStore(LogStore):
    def __init__(self, session_factory) -> None:
        super().__init__(session_factory)
        self.calls: Counter = Counter()

    async def select_page(self, user_id, offset, limit):
        self.calls["select_page"] += 1
        return await super().select_page(user_id, offset, limit)

    async def count_for_user(self, user_id):
        self.calls["count_for_user"] += 1
        return await super().count_for_user(user_id)

    async def upsert_ignore(self, rows):
        self.calls["upsert_ignore"] += 1
        return await super().upsert_ignore(rows)


class BrokenLogStore(LogStore):
    """Every call fails the way an unreachable database would."""

    def __init__(self) -> None:
        super().__init__(session_factory=None)  # type: ignore[arg-type]

    async def _fail(self, *args, **kwargs):
        raise StoreError("ojt_logs unavailable")

    select_page = _fail
    count_for_user = _fail
    select_by_id = _fail
    select_total_hours = _fail
    insert = _fail
    update_owned = _fail
    delete_owned = _fail
    upsert_ignore = _fail


def make_form(**overrides) -> LogEntryForm:
    data = {
        "date": "2026-02-21",
        "week_number": 1,
        "day_number": 1,
        "time_in": "08:00",
        "time_out": "17:00",
        "tasks_accomplished": ["Set up workstation"],
        "key_learnings": ["Git branching"],
        "challenges": "",
        "goals_for_tomorrow": "Finish onboarding",
    }
    data.update(overrides)
    return LogEntryForm(**data)


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'logs.db'}")
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def store(engine) -> CountingLogStore:
    return CountingLogStore(build_session_factory(engine))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock) -> TTLCache:
    return TTLCache(30, clock=clock)


@pytest.fixture()
def local_store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "local_store.json")


@pytest.fixture()
def legacy(local_store) -> LegacyLogArchive:
    return LegacyLogArchive(local_store)


@pytest.fixture()
def make_repo(store, cache, legacy):
    def _make(user_id: str | None = "user-1", **kwargs) -> LogRepository:
        kwargs.setdefault("cache", cache)
        kwargs.setdefault("legacy", legacy)
        return LogRepository(kwargs.pop("store", store), StaticIdentity(user_id), **kwargs)

    return _make
