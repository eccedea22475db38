"""User-scoped access to daily log entries.

``LogRepository`` sits between callers and ``LogStore``:

* every call resolves the current user afresh through the identity provider;
* ``total_hours`` is always computed here from the clock times, never taken
  from input;
* list pages are cached for a short TTL and the whole ``logs`` namespace is
  dropped after any successful write.

Reads degrade to empty results when the store fails (the failure is logged).
Writes raise: ``UnauthenticatedError`` without a user, ``StoreError`` when the
store fails.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from ..core.cache import TTLCache
from ..core.errors import StoreError, UnauthenticatedError
from ..crud.logs import LogStore
from ..schemas.log import ImportResult, LogEntry, LogEntryForm, LogPage, LogSummary
from .identity import IdentityProvider, resolve_user_id
from .local_store import LegacyLogArchive
from .timecalc import DEFAULT_BREAK, BreakWindow, compute_duration, normalize_clock

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
CACHE_TTL_SECONDS = 30.0
LIST_CACHE_NAMESPACE = "logs"
HOUR_PLACES = Decimal("0.01")


def page_cache_key(user_id: str, page: int) -> str:
    return f"{LIST_CACHE_NAMESPACE}:{user_id}:page:{page}"


def _clock(value: Any) -> str:
    # stores may hand back HH:MM:SS
    return str(value or "")[:5]


def _hours(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def row_to_summary(row: Mapping[str, Any]) -> LogSummary:
    return LogSummary(
        id=str(row["id"]),
        date=str(row["date"]),
        week_number=row["week_number"],
        day_number=row["day_number"],
        time_in=_clock(row["time_in"]),
        time_out=_clock(row["time_out"]),
        total_hours=_hours(row.get("total_hours")),
    )


def row_to_entry(row: Mapping[str, Any]) -> LogEntry:
    summary = row_to_summary(row)
    return LogEntry(
        **summary.model_dump(),
        tasks_accomplished=list(row.get("tasks_accomplished") or []),
        key_learnings=list(row.get("key_learnings") or []),
        challenges=row.get("challenges") or "",
        goals_for_tomorrow=row.get("goals_for_tomorrow") or "",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class LogRepository:
    def __init__(
        self,
        store: LogStore,
        identity: IdentityProvider,
        *,
        cache: TTLCache | None = None,
        legacy: LegacyLogArchive | None = None,
        page_size: int = PAGE_SIZE,
        break_window: BreakWindow = DEFAULT_BREAK,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.store = store
        self.identity = identity
        self.cache = cache if cache is not None else TTLCache(CACHE_TTL_SECONDS)
        self.legacy = legacy
        self.page_size = page_size
        self.break_window = break_window

    async def _require_user(self) -> str:
        user_id = await resolve_user_id(self.identity)
        if not user_id:
            raise UnauthenticatedError()
        return user_id

    def _invalidate_lists(self) -> None:
        self.cache.invalidate(LIST_CACHE_NAMESPACE)

    def _row_values(self, form: LogEntryForm) -> dict[str, Any]:
        return {
            "date": form.date,
            "week_number": form.week_number,
            "day_number": form.day_number,
            "time_in": form.time_in,
            "time_out": form.time_out,
            "total_hours": compute_duration(form.time_in, form.time_out, self.break_window),
            "tasks_accomplished": list(form.tasks_accomplished),
            "key_learnings": list(form.key_learnings),
            "challenges": form.challenges,
            "goals_for_tomorrow": form.goals_for_tomorrow,
        }

    async def list_page(self, page: int = 0) -> LogPage:
        if page < 0:
            raise ValueError("page must be a non-negative integer")
        user_id = await resolve_user_id(self.identity)
        if not user_id:
            return LogPage()

        key = page_cache_key(user_id, page)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("logs.cache_hit", extra={"extra_data": {"key": key}})
            return cached.model_copy(deep=True)

        offset = page * self.page_size
        try:
            rows, total = await asyncio.gather(
                self.store.select_page(user_id, offset, self.page_size),
                self.store.count_for_user(user_id),
            )
        except StoreError:
            logger.error("logs.list_failed", exc_info=True, extra={"extra_data": {"page": page}})
            return LogPage()

        result = LogPage(
            entries=[row_to_summary(row) for row in rows[: self.page_size]],
            total_count=total,
            has_more=(page + 1) * self.page_size < total,
        )
        self.cache.set(key, result.model_copy(deep=True))
        return result

    async def get_by_id(self, log_id: str) -> LogEntry | None:
        user_id = await resolve_user_id(self.identity)
        if not user_id:
            return None
        try:
            row = await self.store.select_by_id(user_id, log_id)
        except StoreError:
            logger.error("logs.get_failed", exc_info=True, extra={"extra_data": {"log_id": log_id}})
            return None
        return row_to_entry(row) if row else None

    async def create(self, form: LogEntryForm) -> LogEntry:
        user_id = await self._require_user()
        row = await self.store.insert({**self._row_values(form), "user_id": user_id})
        self._invalidate_lists()
        logger.info("logs.created", extra={"extra_data": {"log_id": row["id"]}})
        return row_to_entry(row)

    async def update(self, log_id: str, form: LogEntryForm) -> LogEntry | None:
        user_id = await self._require_user()
        row = await self.store.update_owned(log_id, user_id, self._row_values(form))
        if row is None:
            return None
        self._invalidate_lists()
        logger.info("logs.updated", extra={"extra_data": {"log_id": log_id}})
        return row_to_entry(row)

    async def delete(self, log_id: str) -> None:
        user_id = await self._require_user()
        deleted = await self.store.delete_owned(log_id, user_id)
        self._invalidate_lists()
        logger.info("logs.deleted", extra={"extra_data": {"log_id": log_id, "deleted": deleted}})

    async def get_total_hours(self) -> float:
        user_id = await resolve_user_id(self.identity)
        if not user_id:
            return 0.0
        try:
            values = await self.store.select_total_hours(user_id)
        except StoreError:
            logger.error("logs.total_failed", exc_info=True)
            return 0.0
        total = sum((Decimal(str(_hours(value))) for value in values), Decimal(0))
        return float(total.quantize(HOUR_PLACES, rounding=ROUND_HALF_UP))

    def has_legacy_local_data(self) -> bool:
        return self.legacy is not None and self.legacy.has_records()

    async def import_legacy_local_data(self) -> ImportResult:
        """Copy local-only entries into the caller's account, then clear them.

        Rows keep their original ids; an id already present in the store is
        skipped rather than overwritten. The local copy survives a failed upload,
        and nothing is uploaded while any local record is invalid
        (``LegacyDataError``).
        """
        user_id = await self._require_user()
        if self.legacy is None:
            return ImportResult(imported=0)
        entries = await asyncio.to_thread(self.legacy.load, strict=True)
        if not entries:
            return ImportResult(imported=0)

        rows = []
        for entry in entries:
            time_in = normalize_clock(entry.time_in)
            time_out = normalize_clock(entry.time_out)
            rows.append(
                {
                    "id": entry.id,
                    "user_id": user_id,
                    "date": entry.date,
                    "week_number": entry.week_number,
                    "day_number": entry.day_number,
                    "time_in": time_in,
                    "time_out": time_out,
                    "total_hours": compute_duration(time_in, time_out, self.break_window),
                    "tasks_accomplished": list(entry.tasks_accomplished),
                    "key_learnings": list(entry.key_learnings),
                    "challenges": entry.challenges,
                    "goals_for_tomorrow": entry.goals_for_tomorrow,
                }
            )
        inserted = await self.store.upsert_ignore(rows)
        await asyncio.to_thread(self.legacy.clear)
        self._invalidate_lists()
        logger.info(
            "logs.legacy_imported",
            extra={"extra_data": {"submitted": len(rows), "inserted": inserted}},
        )
        return ImportResult(imported=len(entries))
