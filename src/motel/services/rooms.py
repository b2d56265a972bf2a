"""Service that owns the room list and applies ledger operations to it."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from motel.core import ledger
from motel.core.calculations import Rates
from motel.core.domain import Notification, Room, Tenant
from motel.core.ledger import NotFoundError, ValidationError
from motel.core.models import ROOMS_KEY
from motel.core.repositories.state import StateRepository
from motel.services.invoices import (
    ArchivedTenant,
    InvoiceEntry,
    PaymentStatus,
    archived_tenants,
    list_invoices,
)
from motel.services.notifications import build_notifications

logger = logging.getLogger(__name__)

_rooms_adapter = TypeAdapter(list[Room])


class StateError(Exception):
    """Raised when the stored room list cannot be read back."""


class RoomService:
    """
    Holds the application's rooms and persists them after every change.

    Each mutating method looks the room up, hands it to the pure ledger
    function, saves the updated list and only then replaces the one held in
    memory. Ledger and storage errors propagate unchanged and leave both
    copies as they were.
    """

    def __init__(self, state_repo: StateRepository, rates: Rates):
        self._state_repo = state_repo
        self._rates = rates
        self._rooms: list[Room] = []

    @property
    def rooms(self) -> list[Room]:
        """Rooms with pinned ones first, keeping the stored order otherwise."""
        pinned = [room for room in self._rooms if room.is_pinned]
        unpinned = [room for room in self._rooms if not room.is_pinned]
        return pinned + unpinned

    async def load(self) -> dict[str, list[str]]:
        """
        Reads the stored room list and checks every active ledger.

        Returns:
            Consistency issues keyed by room id; rooms without issues are
            left out. Each issue is also logged as a warning.
        """
        document = await self._state_repo.load(ROOMS_KEY)
        if document is None:
            logger.info("No stored rooms found, starting empty.")
            self._rooms = []
            return {}

        try:
            self._rooms = _rooms_adapter.validate_python(document)
        except SchemaError as e:
            raise StateError(f"Stored room list is malformed: {e}") from e

        report: dict[str, list[str]] = {}
        for room in self._rooms:
            issues = ledger.check_consistency(room, self._rates)
            for issue in issues:
                logger.warning(issue)
            if issues:
                report[room.id] = issues
        logger.info(f"Loaded {len(self._rooms)} rooms.")
        return report

    async def _commit(self, rooms: list[Room]) -> None:
        """Saves ``rooms`` and only then makes them the current list."""
        await self._state_repo.save(
            ROOMS_KEY, _rooms_adapter.dump_python(rooms, mode="json", by_alias=True)
        )
        self._rooms = rooms

    def get_room(self, room_id: str) -> Room:
        for room in self._rooms:
            if room.id == room_id:
                return room
        raise NotFoundError(f"Room {room_id} not found.")

    async def _replace(self, updated: Room) -> Room:
        await self._commit(
            [updated if room.id == updated.id else room for room in self._rooms]
        )
        return updated

    async def add_room(self, name: str, base_rent: Any) -> Room:
        """Creates a vacant room with an empty ledger."""
        name = name.strip()
        if not name:
            raise ValidationError("Room name cannot be empty.")
        room = Room(name=name, base_rent=ledger.parse_amount(base_rent, "Base rent"))
        await self._commit(self._rooms + [room])
        logger.info(f"Added room {room.name} ({room.id}).")
        return room

    async def toggle_pin(self, room_id: str) -> Room:
        room = self.get_room(room_id)
        return await self._replace(room.model_copy(update={"is_pinned": not room.is_pinned}))

    async def replace_tenants(self, room_id: str, tenants: Iterable[Tenant]) -> Room:
        room = self.get_room(room_id)
        updated = ledger.replace_tenants(room, tenants)
        if room.is_occupied and not updated.is_occupied:
            logger.info(
                f"Room {room.name} vacated, archived {len(room.usage_history)} records."
            )
        return await self._replace(updated)

    async def append_record(
        self,
        room_id: str,
        electric_reading: Any,
        water_reading: Any,
        start_date: Any,
        end_date: Any,
    ) -> Room:
        room = self.get_room(room_id)
        updated = ledger.append_record(
            room, electric_reading, water_reading, start_date, end_date, self._rates
        )
        record = updated.usage_history[-1]
        logger.info(
            f"Recorded usage for room {room.name}: "
            f"{record.electric_usage} kWh, {record.water_usage} m³, bill {record.bill_amount}."
        )
        return await self._replace(updated)

    async def edit_record(
        self,
        room_id: str,
        record_id: str,
        electric_reading: Any,
        water_reading: Any,
        start_date: Any,
        end_date: Any,
        bill_amount: Any = None,
        is_paid: bool | None = None,
    ) -> Room:
        room = self.get_room(room_id)
        updated = ledger.edit_record(
            room,
            record_id,
            electric_reading,
            water_reading,
            start_date,
            end_date,
            bill_amount=bill_amount,
            is_paid=is_paid,
            rates=self._rates,
        )
        logger.info(f"Edited record {record_id} of room {room.name}.")
        return await self._replace(updated)

    async def delete_record(self, room_id: str, record_id: str) -> Room:
        room = self.get_room(room_id)
        updated = ledger.delete_record(room, record_id, self._rates)
        logger.info(f"Deleted record {record_id} of room {room.name}.")
        return await self._replace(updated)

    async def mark_paid(self, room_id: str, record_id: str) -> Room:
        room = self.get_room(room_id)
        updated = ledger.mark_paid(room, record_id)
        if updated is room:
            return room
        logger.info(f"Record {record_id} of room {room.name} marked as paid.")
        return await self._replace(updated)

    async def checkout(
        self,
        room_id: str,
        electric_reading: Any,
        water_reading: Any,
        start_date: Any,
        end_date: Any,
        final_base_rent: Decimal | None = None,
    ) -> Room:
        room = self.get_room(room_id)
        updated = ledger.checkout(
            room,
            electric_reading,
            water_reading,
            start_date,
            end_date,
            final_base_rent=final_base_rent,
            rates=self._rates,
        )
        final = updated.archived_usage_history[-1]
        logger.info(
            f"Checked out room {room.name}: final bill {final.bill_amount}, "
            f"{len(room.usage_history) + 1} records archived."
        )
        return await self._replace(updated)

    def notifications(self, today: date | None = None) -> list[Notification]:
        """Due and overdue reminders for the current rooms."""
        return build_notifications(self._rooms, today or date.today())

    def invoices(
        self,
        room_id: str | None = None,
        status: PaymentStatus = PaymentStatus.ALL,
        query: str = "",
        newest_first: bool = True,
    ) -> list[InvoiceEntry]:
        return list_invoices(self._rooms, room_id, status, query, newest_first)

    def archived_tenants(
        self, room_id: str | None = None, query: str = ""
    ) -> list[ArchivedTenant]:
        return archived_tenants(self._rooms, room_id, query)
