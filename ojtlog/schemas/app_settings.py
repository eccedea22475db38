from __future__ import annotations

from pydantic import Field

from .common import CamelModel

DEFAULT_TARGET_HOURS = 500.0


class AppSettings(CamelModel):
    target_hours: float = Field(default=DEFAULT_TARGET_HOURS, gt=0)


class Progress(CamelModel):
    total_hours: float
    target_hours: float
    remaining_hours: float
    percent: float
