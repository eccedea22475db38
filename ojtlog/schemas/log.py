"""Request and response shapes for daily log entries.

Wire names are camelCase (``timeIn``, ``tasksAccomplished``...). Clock
strings are normalised to ``HH:MM`` when they parse; an unparseable value is
kept as entered and simply yields zero hours.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field, field_validator

from ..services.timecalc import normalize_clock
from .common import CamelModel


def _clean_items(values: list[str] | None) -> list[str]:
    if not values:
        return []
    return [item.strip() for item in values if isinstance(item, str) and item.strip()]


class LogEntryForm(CamelModel):
    date: str
    week_number: int = Field(ge=1)
    day_number: int = Field(ge=1)
    time_in: str
    time_out: str
    tasks_accomplished: list[str] = Field(default_factory=list)
    key_learnings: list[str] = Field(default_factory=list)
    challenges: str = ""
    goals_for_tomorrow: str = ""

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        value = value.strip()
        try:
            return dt.date.fromisoformat(value).isoformat()
        except ValueError as exc:
            raise ValueError("date must be YYYY-MM-DD") from exc

    @field_validator("time_in", "time_out")
    @classmethod
    def _clock(cls, value: str) -> str:
        return normalize_clock(value)

    @field_validator("tasks_accomplished", "key_learnings", mode="before")
    @classmethod
    def _items(cls, value):
        return _clean_items(value)

    @field_validator("challenges", "goals_for_tomorrow", mode="before")
    @classmethod
    def _text(cls, value):
        return value or ""


class LogSummary(CamelModel):
    """List-view projection: narrative fields are left out."""

    id: str
    date: str
    week_number: int
    day_number: int
    time_in: str
    time_out: str
    total_hours: float


class LogEntry(LogSummary):
    tasks_accomplished: list[str] = Field(default_factory=list)
    key_learnings: list[str] = Field(default_factory=list)
    challenges: str = ""
    goals_for_tomorrow: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class LogPage(CamelModel):
    entries: list[LogSummary] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


class TotalHours(CamelModel):
    total_hours: float


class LegacyStatus(CamelModel):
    has_legacy_data: bool


class ImportResult(CamelModel):
    imported: int


class LegacyLogEntry(CamelModel):
    """Record shape of the deprecated browser-local log store."""

    id: str
    date: str
    week_number: int
    day_number: int
    time_in: str
    time_out: str
    total_hours: float = 0
    tasks_accomplished: list[str] = Field(default_factory=list)
    key_learnings: list[str] = Field(default_factory=list)
    challenges: str = ""
    goals_for_tomorrow: str = ""

    @field_validator("tasks_accomplished", "key_learnings", mode="before")
    @classmethod
    def _items(cls, value):
        return _clean_items(value)

    @field_validator("challenges", "goals_for_tomorrow", mode="before")
    @classmethod
    def _text(cls, value):
        return value or ""
