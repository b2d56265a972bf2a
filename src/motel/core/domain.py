"""Domain value types for rooms, tenants and their usage ledgers.

All types are immutable; ledger operations return updated copies built with
``model_copy(update=...)``. Field names serialize to camelCase so stored
documents keep the ``motelRooms`` layout.
"""

from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return str(uuid.uuid4())


def as_number(value: Decimal) -> int | float:
    """Whole amounts become ints, anything else a float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Readings and money are Decimal in memory and plain JSON numbers on disk.
Amount = Annotated[
    Decimal, PlainSerializer(as_number, return_type=int | float, when_used="json")
]


class RoomStatus(str, enum.Enum):
    """Occupancy of a room, derived from its tenant list."""

    OCCUPIED = "occupied"
    VACANT = "vacant"


class DomainModel(BaseModel):
    """Frozen base with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class Tenant(DomainModel):
    """A person living in a room, with optional ID-card details."""

    id: str = Field(default_factory=new_id)
    name: str
    phone: str = ""
    move_in_date: date
    date_of_birth: date | None = None
    avatar_url: str | None = None
    id_number: str | None = None
    sex: str | None = None
    nationality: str | None = None
    place_of_origin: str | None = None
    place_of_residence: str | None = None
    occupation: str | None = None


class UsageRecord(DomainModel):
    """One billing period of a room."""

    id: str = Field(default_factory=new_id)
    start_date: date
    end_date: date
    electric_reading: Amount
    water_reading: Amount
    electric_usage: Amount
    water_usage: Amount
    bill_amount: Amount
    is_paid: bool = False
    bill_overridden: bool = False
    tenants_snapshot: tuple[Tenant, ...] = ()


class Room(DomainModel):
    """A rentable room with its active and archived usage ledgers."""

    id: str = Field(default_factory=new_id)
    name: str
    base_rent: Amount
    tenants: tuple[Tenant, ...] = ()
    usage_history: tuple[UsageRecord, ...] = ()
    archived_usage_history: tuple[UsageRecord, ...] = ()
    is_pinned: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> RoomStatus:
        return RoomStatus.OCCUPIED if self.tenants else RoomStatus.VACANT

    @property
    def is_occupied(self) -> bool:
        return bool(self.tenants)

    @property
    def last_record(self) -> UsageRecord | None:
        return self.usage_history[-1] if self.usage_history else None


class Notification(DomainModel):
    """A reminder about an unpaid bill that is due or overdue."""

    id: str
    room_id: str
    record_id: str
    message: str
    due_date: date
