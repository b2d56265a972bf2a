"""Tests for due and overdue bill reminders."""

from datetime import date
from decimal import Decimal

from motel.core import ledger
from motel.core.domain import Room
from motel.services.notifications import build_notifications


def test_reminders_for_due_and_overdue_bills(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 2, 1))
    room = ledger.append_record(room, 150, 15, date(2024, 2, 1), date(2024, 3, 1))
    first, second = room.usage_history

    notifications = build_notifications([room], today=date(2024, 3, 1))

    assert [n.record_id for n in notifications] == [second.id, first.id]
    assert notifications[0].id == f"notif-{second.id}"
    assert notifications[0].message == "Hóa đơn phòng Phòng 101 đến hạn hôm nay."
    assert notifications[1].message == "Hóa đơn phòng Phòng 101 đã quá hạn 29 ngày."
    assert notifications[1].room_id == room.id
    assert notifications[1].due_date == date(2024, 2, 1)


def test_paid_and_future_bills_are_skipped(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 2, 1))
    room = ledger.append_record(room, 150, 15, date(2024, 2, 1), date(2024, 3, 1))
    room = ledger.mark_paid(room, room.usage_history[0].id)

    assert build_notifications([room], today=date(2024, 2, 20)) == []


def test_vacant_rooms_are_skipped(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 2, 1))
    room = ledger.replace_tenants(room, [])
    empty = Room(name="Phòng 102", base_rent=Decimal("1800000"))

    assert build_notifications([room, empty], today=date(2024, 6, 1)) == []


def test_reminders_sorted_newest_first_across_rooms(room, tenant):
    other = Room(name="Phòng 202", base_rent=Decimal("1500000"), tenants=(tenant,))
    room = ledger.append_record(room, 1, 1, date(2024, 1, 1), date(2024, 1, 10))
    other = ledger.append_record(other, 1, 1, date(2024, 1, 1), date(2024, 1, 20))

    notifications = build_notifications([room, other], today=date(2024, 2, 1))

    assert [n.room_id for n in notifications] == [other.id, room.id]
