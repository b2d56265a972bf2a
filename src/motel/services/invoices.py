"""Read-only queries across every room: the invoice list and the tenant archive."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from motel.core.domain import Room, Tenant, UsageRecord


class PaymentStatus(str, enum.Enum):
    ALL = "all"
    PAID = "paid"
    UNPAID = "unpaid"


@dataclass(frozen=True)
class InvoiceEntry:
    """An active-history record together with the room it bills."""

    room_id: str
    room_name: str
    record: UsageRecord


@dataclass(frozen=True)
class ArchivedTenant:
    """A former tenant of a room and the last period they were billed for."""

    room_id: str
    room_name: str
    tenant: Tenant
    last_billed: date


def _matches(query: str, *fields: str | None) -> bool:
    return any(query in field.lower() for field in fields if field)


def list_invoices(
    rooms: Iterable[Room],
    room_id: str | None = None,
    status: PaymentStatus = PaymentStatus.ALL,
    query: str = "",
    newest_first: bool = True,
) -> list[InvoiceEntry]:
    """
    Lists the active-history records of every room, sorted by end date.

    Args:
        rooms: Rooms to collect records from.
        room_id: Keep only this room's records.
        status: Keep only paid or only unpaid records.
        query: Case-insensitive match on the room name or a billed tenant's name.
        newest_first: Sort by end date descending (the default) or ascending.
    """
    needle = query.strip().lower()
    entries: list[InvoiceEntry] = []
    for room in rooms:
        if room_id is not None and room.id != room_id:
            continue
        for record in room.usage_history:
            if status is PaymentStatus.PAID and not record.is_paid:
                continue
            if status is PaymentStatus.UNPAID and record.is_paid:
                continue
            if needle and not _matches(
                needle, room.name, *(t.name for t in record.tenants_snapshot)
            ):
                continue
            entries.append(InvoiceEntry(room.id, room.name, record))

    entries.sort(key=lambda e: e.record.end_date, reverse=newest_first)
    return entries


def archived_tenants(
    rooms: Iterable[Room], room_id: str | None = None, query: str = ""
) -> list[ArchivedTenant]:
    """
    Lists people who used to live in a room, most recently billed first.

    Former tenants are read from the tenant snapshots of archived records.
    Someone who still lives in the room is not listed for it.
    """
    needle = query.strip().lower()
    found: dict[tuple[str, str], ArchivedTenant] = {}
    for room in rooms:
        if room_id is not None and room.id != room_id:
            continue
        current = {t.id for t in room.tenants}
        for record in room.archived_usage_history:
            for tenant in record.tenants_snapshot:
                if tenant.id in current:
                    continue
                key = (room.id, tenant.id)
                seen = found.get(key)
                if seen is None or seen.last_billed <= record.end_date:
                    # The latest snapshot carries the freshest details.
                    found[key] = ArchivedTenant(room.id, room.name, tenant, record.end_date)

    result = [
        entry
        for entry in found.values()
        if not needle
        or _matches(needle, entry.tenant.name, entry.tenant.phone, entry.tenant.id_number)
    ]
    result.sort(key=lambda e: e.last_billed, reverse=True)
    return result
