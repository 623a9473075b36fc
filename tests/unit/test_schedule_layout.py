from datetime import datetime, timedelta, timezone, UTC
from types import SimpleNamespace

from eventdesk.utils import schedule_layout as layout


def _session(start, minutes=60, track_id=None):
    return SimpleNamespace(start_time=start, end_time=start + timedelta(minutes=minutes), track_id=track_id)


def test_block_position_offsets_from_six_am():
    pos = layout.block_position(datetime(2026, 3, 2, 9, 0, tzinfo=UTC), datetime(2026, 3, 2, 10, 30, tzinfo=UTC))
    assert pos.top == 180
    assert pos.height == 90


def test_block_position_has_minimum_height():
    pos = layout.block_position(datetime(2026, 3, 2, 12, 0, tzinfo=UTC), datetime(2026, 3, 2, 12, 10, tzinfo=UTC))
    assert pos.top == 360
    assert pos.height == layout.MIN_BLOCK_HEIGHT_PX


def test_block_position_treats_naive_as_utc():
    pos = layout.block_position(datetime(2026, 3, 2, 6, 15), datetime(2026, 3, 2, 7, 15))
    assert pos.top == 15
    assert pos.height == 60


def test_time_slots_cover_six_am_to_ten_pm():
    slots = layout.time_slots()
    assert len(slots) == 17
    assert (slots[0].hour, slots[0].label) == (6, "6:00 AM")
    assert slots[6].label == "12:00 PM"
    assert slots[7].label == "1:00 PM"
    assert (slots[-1].hour, slots[-1].label) == (22, "10:00 PM")


def test_session_date_uses_utc_day():
    plus_two = timezone(timedelta(hours=2))
    assert layout.session_date(datetime(2026, 3, 2, 1, 0, tzinfo=plus_two)) == "2026-03-01"


def test_available_dates_sorted_and_unique():
    sessions = [
        _session(datetime(2026, 3, 3, 9, tzinfo=UTC)),
        _session(datetime(2026, 3, 2, 14, tzinfo=UTC)),
        _session(datetime(2026, 3, 2, 9, tzinfo=UTC)),
    ]
    assert layout.available_dates(sessions) == ["2026-03-02", "2026-03-03"]


def test_filter_sessions_by_date_and_track():
    day_one = [
        _session(datetime(2026, 3, 2, 9, tzinfo=UTC), track_id="t1"),
        _session(datetime(2026, 3, 2, 10, tzinfo=UTC), track_id="t2"),
    ]
    day_two = [_session(datetime(2026, 3, 3, 9, tzinfo=UTC), track_id="t1")]
    sessions = day_one + day_two

    assert layout.filter_sessions(sessions, "2026-03-02") == day_one
    assert layout.filter_sessions(sessions, "2026-03-02", "all") == day_one
    assert layout.filter_sessions(sessions, "2026-03-02", "t2") == [day_one[1]]
    assert layout.filter_sessions(sessions, None, "t1") == [day_one[0], day_two[0]]


def test_group_by_track_orders_columns_by_first_session():
    late_t1 = _session(datetime(2026, 3, 2, 15, tzinfo=UTC), track_id="t1")
    early_t2 = _session(datetime(2026, 3, 2, 9, tzinfo=UTC), track_id="t2")
    loose = _session(datetime(2026, 3, 2, 11, tzinfo=UTC))
    early_t1 = _session(datetime(2026, 3, 2, 10, tzinfo=UTC), track_id="t1")

    grouped = layout.group_by_track([late_t1, early_t2, loose, early_t1])

    assert list(grouped.keys()) == ["t2", "t1", layout.NO_TRACK]
    assert grouped["t1"] == [early_t1, late_t1]
    assert grouped[layout.NO_TRACK] == [loose]
