"""Tests for date helpers."""

from datetime import date
from decimal import Decimal

from motel.core import ledger
from motel.core.dates import format_month, format_period, suggest_period
from motel.core.domain import Room, Tenant


def test_format_period():
    assert format_period(date(2024, 1, 5), date(2024, 2, 5)) == "05/01/2024 - 05/02/2024"


def test_format_month():
    assert format_month(date(2024, 7, 1)) == "Tháng 7/2024"


def test_suggest_period_continues_from_last_record(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 2, 1))

    assert suggest_period(room, date(2024, 3, 1)) == (date(2024, 2, 1), date(2024, 3, 1))


def test_suggest_period_starts_at_earliest_move_in(room, tenant):
    later = Tenant(name="Trần Thị Bình", move_in_date=date(2024, 2, 10))
    room = ledger.replace_tenants(room, [later, tenant])

    assert suggest_period(room, date(2024, 3, 1)) == (date(2024, 1, 1), date(2024, 3, 1))


def test_suggest_period_for_vacant_room_covers_last_month():
    vacant = Room(name="Phòng 102", base_rent=Decimal("1800000"))

    assert suggest_period(vacant, date(2024, 3, 31)) == (date(2024, 2, 29), date(2024, 3, 31))


def test_suggest_period_never_starts_after_today(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 5, 1))

    assert suggest_period(room, date(2024, 4, 1)) == (date(2024, 4, 1), date(2024, 4, 1))
