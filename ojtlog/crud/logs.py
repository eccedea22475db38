"""Table gateway for ``ojt_logs``.

``LogStore`` is the only code that talks to the database. Each method opens
its own session, so independent reads can be awaited concurrently. Rows come
back as plain dicts keyed by column name, and every driver failure surfaces
as ``StoreError``.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator
from uuid import uuid4

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.errors import StoreError
from ..models.log import OJTLog

LIST_COLUMNS = (
    OJTLog.id,
    OJTLog.date,
    OJTLog.week_number,
    OJTLog.day_number,
    OJTLog.time_in,
    OJTLog.time_out,
    OJTLog.total_hours,
)
# SQLite rejects OFFSET values beyond a signed 64-bit integer
MAX_OFFSET = 2**63 - 1
WRITABLE_FIELDS = (
    "date",
    "week_number",
    "day_number",
    "time_in",
    "time_out",
    "total_hours",
    "tasks_accomplished",
    "key_learnings",
    "challenges",
    "goals_for_tomorrow",
)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OverflowError) as exc:
        raise StoreError(f"ojt_logs {operation} failed") from exc


class LogStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def select_page(self, user_id: str, offset: int, limit: int) -> list[dict[str, Any]]:
        if offset > MAX_OFFSET:
            return []
        stmt = (
            select(*LIST_COLUMNS)
            .where(OJTLog.user_id == user_id)
            .order_by(desc(OJTLog.date))
            .offset(offset)
            .limit(limit)
        )
        with _store_errors("select_page"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [dict(row) for row in result.mappings().all()]

    async def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(OJTLog).where(OJTLog.user_id == user_id)
        with _store_errors("count"):
            async with self._session_factory() as session:
                return int((await session.execute(stmt)).scalar_one())

    async def select_by_id(self, user_id: str, log_id: str) -> dict[str, Any] | None:
        stmt = select(OJTLog).where(OJTLog.id == log_id, OJTLog.user_id == user_id)
        with _store_errors("select_by_id"):
            async with self._session_factory() as session:
                log = (await session.execute(stmt)).scalars().first()
                return log.to_row() if log else None

    async def select_total_hours(self, user_id: str) -> list[float | None]:
        stmt = select(OJTLog.total_hours).where(OJTLog.user_id == user_id)
        with _store_errors("select_total_hours"):
            async with self._session_factory() as session:
                return list((await session.execute(stmt)).scalars().all())

    async def insert(self, values: dict[str, Any]) -> dict[str, Any]:
        now = _utcnow()
        log = OJTLog(
            id=values.get("id") or str(uuid4()),
            user_id=values["user_id"],
            created_at=now,
            updated_at=now,
            **{field: values.get(field) for field in WRITABLE_FIELDS},
        )
        with _store_errors("insert"):
            async with self._session_factory() as session:
                session.add(log)
                await session.commit()
                return log.to_row()

    async def update_owned(self, log_id: str, user_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        """Apply ``values`` to the row only if ``user_id`` owns it."""
        stmt = select(OJTLog).where(OJTLog.id == log_id, OJTLog.user_id == user_id)
        with _store_errors("update"):
            async with self._session_factory() as session:
                log = (await session.execute(stmt)).scalars().first()
                if log is None:
                    return None
                for field in WRITABLE_FIELDS:
                    if field in values:
                        setattr(log, field, values[field])
                log.updated_at = max(_utcnow(), log.updated_at or "")
                await session.commit()
                return log.to_row()

    async def delete_owned(self, log_id: str, user_id: str) -> bool:
        stmt = delete(OJTLog).where(OJTLog.id == log_id, OJTLog.user_id == user_id)
        with _store_errors("delete"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return bool(result.rowcount)

    async def upsert_ignore(self, rows: Iterable[dict[str, Any]]) -> int:
        """Insert rows whose ``id`` is not already present; existing rows are left untouched.

        Returns the number of rows actually inserted.
        """
        pending: dict[str, dict[str, Any]] = {}
        for row in rows:
            pending.setdefault(row["id"], row)
        if not pending:
            return 0
        with _store_errors("upsert"):
            async with self._session_factory() as session:
                existing = set(
                    (await session.execute(select(OJTLog.id).where(OJTLog.id.in_(list(pending))))).scalars().all()
                )
                now = _utcnow()
                inserted = 0
                for log_id, row in pending.items():
                    if log_id in existing:
                        continue
                    session.add(
                        OJTLog(
                            id=log_id,
                            user_id=row["user_id"],
                            created_at=now,
                            updated_at=now,
                            **{field: row.get(field) for field in WRITABLE_FIELDS},
                        )
                    )
                    inserted += 1
                await session.commit()
                return inserted
