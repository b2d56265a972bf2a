"""Builds reminders for unpaid bills that are due or overdue."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from motel.core.domain import Notification, Room


def build_notifications(rooms: Iterable[Room], today: date) -> list[Notification]:
    """
    Lists a reminder for every unpaid record of an occupied room whose
    period has ended, newest due date first.
    """
    notifications: list[Notification] = []
    for room in rooms:
        if not room.is_occupied:
            continue
        for record in room.usage_history:
            if record.is_paid:
                continue
            overdue_days = (today - record.end_date).days
            if overdue_days < 0:
                continue
            if overdue_days == 0:
                message = f"Hóa đơn phòng {room.name} đến hạn hôm nay."
            else:
                message = f"Hóa đơn phòng {room.name} đã quá hạn {overdue_days} ngày."
            notifications.append(
                Notification(
                    id=f"notif-{record.id}",
                    room_id=room.id,
                    record_id=record.id,
                    message=message,
                    due_date=record.end_date,
                )
            )

    notifications.sort(key=lambda n: n.due_date, reverse=True)
    return notifications
