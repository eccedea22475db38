"""ORM mapping for the ``ojt_logs`` table.

One row per calendar work-day per user. ``total_hours`` is derived from
``time_in``/``time_out`` by the repository and never written from user input.
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import JSON, Column, Float, Integer, Text

from ..db.session import Base


def _new_id() -> str:
    return str(uuid4())


class OJTLog(Base):
    __tablename__ = "ojt_logs"

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Text, nullable=False, index=True)  # YYYY-MM-DD
    week_number = Column(Integer, nullable=False)
    day_number = Column(Integer, nullable=False)
    time_in = Column(Text, nullable=False)  # HH:MM
    time_out = Column(Text, nullable=False)
    total_hours = Column(Float, nullable=True, default=0)
    tasks_accomplished = Column(JSON, nullable=True)
    key_learnings = Column(JSON, nullable=True)
    challenges = Column(Text, nullable=True)
    goals_for_tomorrow = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    def to_row(self) -> dict[str, object]:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
