"""Table-level behaviour of LogStore and the row mapping around it."""

from sqlalchemy import text

from ojtlog.services.log_repository import row_to_entry, row_to_summary


def _values(**overrides):
    values = {
        "user_id": "user-1",
        "date": "2026-02-21",
        "week_number": 2,
        "day_number": 3,
        "time_in": "08:00",
        "time_out": "17:00",
        "total_hours": 8,
        "tasks_accomplished": ["Task A"],
        "key_learnings": ["Learning A"],
        "challenges": "Challenge",
        "goals_for_tomorrow": "Goal",
    }
    values.update(overrides)
    return values


async def test_insert_assigns_id_and_timestamps(store):
    row = await store.insert(_values())
    assert row["id"]
    assert row["created_at"] == row["updated_at"]
    assert row["user_id"] == "user-1"


async def test_select_page_returns_list_columns_only(store):
    await store.insert(_values())
    rows = await store.select_page("user-1", 0, 20)
    assert set(rows[0]) == {"id", "date", "week_number", "day_number", "time_in", "time_out", "total_hours"}


async def test_select_page_beyond_any_sql_offset_is_empty(store):
    await store.insert(_values())
    assert await store.select_page("user-1", 10**18 * 20, 20) == []


async def test_count_is_scoped_to_user(store):
    await store.insert(_values())
    await store.insert(_values(user_id="user-2"))
    assert await store.count_for_user("user-1") == 1
    assert await store.count_for_user("nobody") == 0


async def test_upsert_ignore_inserts_only_absent_ids(store):
    await store.insert(_values(id="keep-me", challenges="original"))
    inserted = await store.upsert_ignore(
        [
            {**_values(user_id="user-2", challenges="replacement"), "id": "keep-me"},
            {**_values(), "id": "fresh"},
            {**_values(), "id": "fresh"},
        ]
    )
    assert inserted == 1
    kept = await store.select_by_id("user-1", "keep-me")
    assert kept["challenges"] == "original"
    assert await store.select_by_id("user-2", "keep-me") is None
    assert await store.select_by_id("user-1", "fresh") is not None


async def test_upsert_ignore_with_nothing_is_a_no_op(store):
    assert await store.upsert_ignore([]) == 0


async def test_delete_owned_reports_whether_a_row_went(store):
    row = await store.insert(_values())
    assert await store.delete_owned(row["id"], "user-2") is False
    assert await store.delete_owned(row["id"], "user-1") is True


async def test_rows_with_seconds_and_nulls_map_cleanly(store, engine):
    async with engine.begin() as conn:
        await conn.execute(
            text(
                "INSERT INTO ojt_logs (id, user_id, date, week_number, day_number, time_in, time_out,"
                " total_hours, tasks_accomplished, key_learnings, challenges, goals_for_tomorrow,"
                " created_at, updated_at) VALUES ('log-1', 'user-1', '2026-02-21', 2, 3, '08:00:00',"
                " '17:00:00', NULL, NULL, NULL, NULL, NULL, '2026-02-21T00:00:00Z', '2026-02-21T00:00:00Z')"
            )
        )

    entry = row_to_entry(await store.select_by_id("user-1", "log-1"))
    assert (entry.time_in, entry.time_out) == ("08:00", "17:00")
    assert entry.total_hours == 0
    assert entry.tasks_accomplished == [] and entry.key_learnings == []
    assert entry.challenges == "" and entry.goals_for_tomorrow == ""

    summary = row_to_summary((await store.select_page("user-1", 0, 20))[0])
    assert summary.week_number == 2 and summary.day_number == 3
