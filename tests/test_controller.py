import asyncio

import pytest

from tencents import Dashboard, ReadError, RowValidationError, SchemaError
from tencents.sources import file_provider, text_provider

OLD_TEXT = "Date,Name,Note,Amount,Type\n2024-01-01,Old,,1,expense\n"
NEW_TEXT = "Date,Name,Note,Amount,Type\n2024-01-02,New,,2,expense\n"


def _names(dashboard: Dashboard) -> list[str]:
    return [t.name for t in dashboard.transactions]


def test_load_file_and_render_rows(legacy_csv):
    d = Dashboard()
    assert asyncio.run(d.load(file_provider(legacy_csv))) is True

    assert len(d.transactions) == 6
    assert [(r.name, r.amount) for r in d.rows] == [("Food", 175), ("Transport", 50)]

    d.toggle(d.rows[0])
    assert [r.name for r in d.rows] == ["Food", "Other", "Lunch", "Transport"]


def test_failed_decode_keeps_previous_dataset():
    d = Dashboard()
    asyncio.run(d.load(text_provider(OLD_TEXT)))

    bad = "Date,Name,Note,Amount,Type\n2024-01-02,New,,2,expense\n2024-01-03,New,,2,gift\n"
    with pytest.raises(RowValidationError):
        asyncio.run(d.load(text_provider(bad)))
    with pytest.raises(SchemaError):
        asyncio.run(d.load(text_provider("Date,Amount\n2024-01-01,5\n")))

    assert _names(d) == ["Old"]


def test_read_failure_keeps_previous_dataset(tmp_path):
    d = Dashboard()
    asyncio.run(d.load(text_provider(OLD_TEXT)))

    with pytest.raises(ReadError):
        asyncio.run(d.load(file_provider(tmp_path / "missing.csv")))

    not_csv = tmp_path / "statement.txt"
    not_csv.write_text(NEW_TEXT, encoding="utf-8")
    with pytest.raises(ReadError):
        asyncio.run(d.load(file_provider(not_csv)))

    assert _names(d) == ["Old"]


def test_stale_token_is_ignored():
    d = Dashboard()
    first = d.begin_load()
    second = d.begin_load()
    assert second > first

    assert d.apply_load(first, OLD_TEXT) is False
    assert d.transactions == ()
    assert d.apply_load(second, NEW_TEXT) is True
    assert _names(d) == ["New"]


def test_slow_earlier_read_cannot_overwrite_newer_file():
    d = Dashboard()

    async def scenario() -> bool:
        release = asyncio.Event()

        async def slow_read() -> str:
            await release.wait()
            return OLD_TEXT

        earlier = asyncio.create_task(d.load(slow_read))
        await asyncio.sleep(0)
        assert await d.load(text_provider(NEW_TEXT)) is True
        release.set()
        return await earlier

    assert asyncio.run(scenario()) is False
    assert _names(d) == ["New"]


def test_failed_read_of_superseded_file_is_ignored():
    d = Dashboard()

    async def scenario() -> bool:
        release = asyncio.Event()

        async def slow_failing_read() -> str:
            await release.wait()
            raise ReadError("File not found: old.csv")

        earlier = asyncio.create_task(d.load(slow_failing_read))
        await asyncio.sleep(0)
        assert await d.load(text_provider(NEW_TEXT)) is True
        release.set()
        return await earlier

    assert asyncio.run(scenario()) is False
    assert _names(d) == ["New"]


def test_byte_order_mark_in_provided_text_is_dropped():
    d = Dashboard()
    assert asyncio.run(d.load(text_provider("\ufeff" + NEW_TEXT))) is True
    assert _names(d) == ["New"]


def test_clear_drops_data_and_invalidates_pending_loads():
    d = Dashboard()
    asyncio.run(d.load(text_provider(OLD_TEXT)))
    token = d.begin_load()
    d.clear()

    assert d.transactions == ()
    assert d.expanded == frozenset()
    assert d.rows == []
    assert d.apply_load(token, NEW_TEXT) is False


def test_filters_are_replaced_and_reset(legacy_csv):
    d = Dashboard()
    asyncio.run(d.load(file_provider(legacy_csv)))

    d.set_filters(kind="income")
    assert [r.name for r in d.rows] == ["Salary"]

    d.set_filters(start="2024-01-01", end="2024-01-05")
    assert d.filters.kind == "income"
    assert d.rows == []

    d.set_filters(start="2024-01-01", end="2024-01-05", kind="expense")
    assert [(r.name, r.amount) for r in d.rows] == [("Food", 150)]

    d.reset_filters()
    assert d.filters.kind == "expense"
    assert not d.filters.date_range.is_active


def test_toggle_by_name_only_for_categories_with_subcategories():
    d = Dashboard()
    asyncio.run(d.load(text_provider(OLD_TEXT)))
    assert d.toggle_category("Old") == frozenset()

    asyncio.run(
        d.load(text_provider("Date,Name,Note,Amount,Type\n2024-01-01,Food,Lunch,3,expense\n"))
    )
    assert d.toggle_category("Food") == {"Food"}
    assert d.toggle_category("Food") == frozenset()
