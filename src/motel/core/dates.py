"""Date and time helper functions."""

from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta

from motel.core.domain import Room


def format_date(value: date) -> str:
    """Formats a date the Vietnamese way, 'dd/mm/yyyy'."""
    return value.strftime("%d/%m/%Y")


def format_period(start: date, end: date) -> str:
    """Formats a billing period as 'dd/mm/yyyy - dd/mm/yyyy'."""
    return f"{format_date(start)} - {format_date(end)}"


def format_month(value: date) -> str:
    """Formats a month as 'Tháng M/YYYY'."""
    return f"Tháng {value.month}/{value.year}"


def suggest_period(room: Room, today: date | None = None) -> tuple[date, date]:
    """
    Proposes the next billing period for a room.

    The period starts where the last recorded one ended. For the first period
    of a tenancy it starts at the earliest move-in date, and for a room with
    neither it starts one month before ``today``. It always ends ``today``.
    """
    today = today or date.today()
    last = room.last_record
    if last is not None:
        start = last.end_date
    elif room.tenants:
        start = min(tenant.move_in_date for tenant in room.tenants)
    else:
        start = today - relativedelta(months=1)
    return min(start, today), today
