"""Tests for the weighing record log."""

import sqlite3
from datetime import datetime

import pytest

from conferente.db.records import WeighingRecordDB, window_start
from conferente.models import WeighingRecord

# Wednesday
NOW = datetime(2025, 6, 18, 15, 30)


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


def _record(supplier="Acme", product="Box-A", timestamp_ms=None, **kwargs) -> WeighingRecord:
    fields = dict(
        supplier=supplier,
        product=product,
        target_weight_kg=100.0,
        gross_weight_kg=112.5,
        tare_kg=10.0,
        net_weight_kg=102.5,
        box_quantity=4,
        timestamp_ms=timestamp_ms if timestamp_ms is not None else _ms(2025, 6, 18, 8, 0),
    )
    fields.update(kwargs)
    return WeighingRecord(**fields)


@pytest.fixture
def db(tmp_path):
    store = WeighingRecordDB(db_path=tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture
def seeded(db):
    """One record per interesting period boundary around NOW."""
    stamps = {
        "today": _ms(2025, 6, 18, 8, 0),
        "monday": _ms(2025, 6, 16, 12, 0),
        "sunday_midnight": _ms(2025, 6, 15, 0, 0),
        "saturday": _ms(2025, 6, 14, 23, 59),
        "june_3": _ms(2025, 6, 3, 9, 0),
        "march": _ms(2025, 3, 1, 9, 0),
        "last_year": _ms(2024, 12, 31, 23, 59),
    }
    for name, ts in sorted(stamps.items(), key=lambda kv: kv[1]):
        db.append(_record(product=name, timestamp_ms=ts))
    return db


def test_append_assigns_id(db):
    record_id = db.append(_record())
    assert record_id
    stored = db.query_all()
    assert len(stored) == 1
    assert stored[0].id == record_id


def test_append_keeps_given_id(db):
    assert db.append(_record(id="fixed-id")) == "fixed-id"
    assert db.get("fixed-id") is not None


def test_duplicate_id_is_a_failed_write(db):
    db.append(_record(id="dup"))
    assert db.append(_record(id="dup")) is None
    assert len(db.query_all()) == 1


def test_query_all_newest_first(db):
    db.append(_record(product="first", timestamp_ms=1000))
    db.append(_record(product="second", timestamp_ms=2000))
    db.append(_record(product="third", timestamp_ms=3000))

    assert [r.product for r in db.query_all()] == ["third", "second", "first"]


def test_round_trip_all_fields(db):
    original = _record(
        target_weight_kg=0.0,
        gross_weight_kg=12.345,
        tare_kg=0.125,
        net_weight_kg=12.22,
        box_quantity=0,
        attachment="data:image/jpeg;base64,/9j/AAAA",
    )
    record_id = db.append(original)
    stored = db.get(record_id)

    assert stored.supplier == original.supplier
    assert stored.product == original.product
    assert stored.target_weight_kg == 0.0
    assert stored.gross_weight_kg == 12.345
    assert stored.tare_kg == 0.125
    assert stored.net_weight_kg == 12.22
    assert stored.box_quantity == 0
    assert stored.timestamp_ms == original.timestamp_ms
    assert stored.attachment == original.attachment
    assert stored.has_photo is True


def test_net_weight_is_a_snapshot(db):
    """The stored net is not re-derived from gross and tare."""
    record_id = db.append(_record(gross_weight_kg=50.0, tare_kg=5.0, net_weight_kg=44.0))
    assert db.get(record_id).net_weight_kg == 44.0


def test_record_without_photo(db):
    record_id = db.append(_record())
    stored = db.get(record_id)
    assert stored.attachment is None
    assert stored.has_photo is False


def test_window_start():
    assert window_start(NOW, "day") == datetime(2025, 6, 18)
    assert window_start(NOW, "week") == datetime(2025, 6, 15)
    assert window_start(NOW, "month") == datetime(2025, 6, 1)
    assert window_start(NOW, "year") == datetime(2025, 1, 1)


def test_week_starts_today_on_sunday():
    sunday = datetime(2025, 6, 15, 10, 0)
    assert window_start(sunday, "week") == datetime(2025, 6, 15)


def test_week_crosses_month_boundary():
    # Tuesday 2025-07-01 -> Sunday 2025-06-29
    assert window_start(datetime(2025, 7, 1, 9, 0), "week") == datetime(2025, 6, 29)


def test_window_start_unknown():
    with pytest.raises(ValueError, match="Período"):
        window_start(NOW, "decade")


def test_query_window_day(seeded):
    assert [r.product for r in seeded.query_window(NOW, "day")] == ["today"]


def test_query_window_week(seeded):
    products = [r.product for r in seeded.query_window(NOW, "week")]
    assert products == ["today", "monday", "sunday_midnight"]


def test_query_window_month(seeded):
    products = {r.product for r in seeded.query_window(NOW, "month")}
    assert products == {"today", "monday", "sunday_midnight", "saturday", "june_3"}


def test_query_window_year(seeded):
    products = {r.product for r in seeded.query_window(NOW, "year")}
    assert "march" in products
    assert "last_year" not in products
    assert len(products) == 6


def test_windows_are_nested(seeded):
    day, week, month, year = (
        {r.id for r in seeded.query_window(NOW, w)}
        for w in ("day", "week", "month", "year")
    )
    assert day <= week <= month <= year


def test_clear_all(seeded):
    assert seeded.clear_all() is True
    assert seeded.query_all() == []


def test_corrupt_database_reads_empty(tmp_path):
    db_path = tmp_path / "corrupt.db"
    db_path.write_bytes(b"this is not a database " * 64)

    store = WeighingRecordDB(db_path)
    assert store.query_all() == []
    assert store.query_window(NOW, "day") == []
    assert store.append(_record()) is None


def test_undecodable_row_is_skipped(tmp_path):
    db_path = tmp_path / "test.db"
    store = WeighingRecordDB(db_path)
    store.append(_record(product="good"))
    store.close()

    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """INSERT INTO weighing_records
           (record_id, supplier, product, gross_weight_kg, net_weight_kg, timestamp_ms)
           VALUES ('broken', 'Acme', 'bad', 'heavy', 'n/a', 0)"""
    )
    conn.commit()
    conn.close()

    store = WeighingRecordDB(db_path)
    assert [r.product for r in store.query_all()] == ["good"]
    store.close()
