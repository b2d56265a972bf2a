"""Usage ledger engine.

Maintains a room's ordered list of billing-period records. Every record's
usage and bill are derived from its own meter readings and those of the record
immediately before it, so inserting, editing or deleting a record also
recalculates its neighbour:

* appending computes usage against the last record (or a zero baseline);
* editing recomputes the edited record and the one right after it, and
  nothing further along the list;
* deleting recomputes the record that moves into the freed position.

When a room is vacated (checkout or removing every tenant), the active history
moves in one piece to the archive and is never recalculated again.

All functions are pure: they take a :class:`Room` and return a new one.
Inputs are validated before anything is built, so a failure leaves the caller's
state exactly as it was.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from motel.core.calculations import (
    DEFAULT_RATES,
    ZERO,
    Rates,
    calculate_bill,
    calculate_usage,
)
from motel.core.domain import Room, Tenant, UsageRecord


class LedgerError(Exception):
    """Base class for usage ledger errors."""


class ValidationError(LedgerError):
    """Raised for malformed or out-of-order readings, amounts and periods."""


class NotFoundError(LedgerError):
    """Raised when a record id is not present in a room's active history."""


def parse_amount(value: Any, label: str) -> Decimal:
    """Converts a reading or money value to a finite, non-negative Decimal."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} must be a number, got {value!r}.")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError(f"{label} must be a number, got {value!r}.") from None
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a finite number, got {value!r}.")
    if amount < ZERO:
        raise ValidationError(f"{label} cannot be negative, got {amount}.")
    return amount


def parse_date(value: Any, label: str) -> date:
    """Accepts a date, a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            raise ValidationError(f"{label} is not a valid date: {value!r}.") from None
    raise ValidationError(f"{label} is not a valid date: {value!r}.")


def parse_period(start_date: Any, end_date: Any) -> tuple[date, date]:
    start = parse_date(start_date, "Start date")
    end = parse_date(end_date, "End date")
    if start > end:
        raise ValidationError(f"Billing period starts ({start}) after it ends ({end}).")
    return start, end


def _check_order(
    electric: Decimal,
    water: Decimal,
    previous: UsageRecord | None,
    following: UsageRecord | None,
) -> None:
    """Readings must sit between the neighbouring records' readings."""
    if previous is not None:
        if electric < previous.electric_reading:
            raise ValidationError(
                f"Electric reading {electric} is lower than the previous "
                f"reading {previous.electric_reading}."
            )
        if water < previous.water_reading:
            raise ValidationError(
                f"Water reading {water} is lower than the previous "
                f"reading {previous.water_reading}."
            )
    if following is not None:
        if electric > following.electric_reading:
            raise ValidationError(
                f"Electric reading {electric} is higher than the next "
                f"reading {following.electric_reading}."
            )
        if water > following.water_reading:
            raise ValidationError(
                f"Water reading {water} is higher than the next "
                f"reading {following.water_reading}."
            )


def _require_occupied(room: Room) -> None:
    if not room.is_occupied:
        raise ValidationError(f"Room {room.name} has no tenants.")


def _locate(room: Room, record_id: str) -> int:
    for index, record in enumerate(room.usage_history):
        if record.id == record_id:
            return index
    raise NotFoundError(f"Record {record_id} not found in room {room.name}.")


def _recalculated(
    record: UsageRecord,
    previous: UsageRecord | None,
    base_rent: Decimal,
    rates: Rates,
) -> UsageRecord:
    """Returns ``record`` with usage and bill derived from ``previous``."""
    electric_usage = calculate_usage(
        record.electric_reading, previous.electric_reading if previous else ZERO
    )
    water_usage = calculate_usage(
        record.water_reading, previous.water_reading if previous else ZERO
    )
    return record.model_copy(
        update={
            "electric_usage": electric_usage,
            "water_usage": water_usage,
            "bill_amount": calculate_bill(base_rent, electric_usage, water_usage, rates),
            "bill_overridden": False,
        }
    )


def _new_record(
    room: Room,
    electric_reading: Any,
    water_reading: Any,
    start_date: Any,
    end_date: Any,
    base_rent: Decimal,
    rates: Rates,
) -> UsageRecord:
    electric = parse_amount(electric_reading, "Electric reading")
    water = parse_amount(water_reading, "Water reading")
    start, end = parse_period(start_date, end_date)
    previous = room.last_record
    _check_order(electric, water, previous, None)

    electric_usage = calculate_usage(
        electric, previous.electric_reading if previous else ZERO
    )
    water_usage = calculate_usage(water, previous.water_reading if previous else ZERO)
    return UsageRecord(
        start_date=start,
        end_date=end,
        electric_reading=electric,
        water_reading=water,
        electric_usage=electric_usage,
        water_usage=water_usage,
        bill_amount=calculate_bill(base_rent, electric_usage, water_usage, rates),
        is_paid=False,
        tenants_snapshot=room.tenants,
    )


def append_record(
    room: Room,
    electric_reading: Any,
    water_reading: Any,
    start_date: Any,
    end_date: Any,
    rates: Rates = DEFAULT_RATES,
) -> Room:
    """
    Adds a new billing period at the end of the room's active history.

    Raises:
        ValidationError: if the room is vacant, a reading is negative,
            non-numeric or below the last recorded reading, or the period
            is inverted.
    """
    _require_occupied(room)
    record = _new_record(
        room, electric_reading, water_reading, start_date, end_date, room.base_rent, rates
    )
    return room.model_copy(update={"usage_history": room.usage_history + (record,)})


def edit_record(
    room: Room,
    record_id: str,
    electric_reading: Any,
    water_reading: Any,
    start_date: Any,
    end_date: Any,
    bill_amount: Any = None,
    is_paid: bool | None = None,
    rates: Rates = DEFAULT_RATES,
) -> Room:
    """
    Changes a record's readings and period, then recalculates it and the
    record immediately after it.

    An explicit ``bill_amount`` replaces the computed bill of the edited
    record. ``is_paid`` sets the payment flag directly when given.

    Raises:
        NotFoundError: if ``record_id`` is not in the active history.
        ValidationError: if the readings fall outside the neighbouring
            readings, or any value is malformed.
    """
    index = _locate(room, record_id)
    electric = parse_amount(electric_reading, "Electric reading")
    water = parse_amount(water_reading, "Water reading")
    start, end = parse_period(start_date, end_date)
    override = None if bill_amount is None else parse_amount(bill_amount, "Bill amount")
    if is_paid is not None and not isinstance(is_paid, bool):
        raise ValidationError(f"Paid flag must be a boolean, got {is_paid!r}.")

    history = list(room.usage_history)
    previous = history[index - 1] if index > 0 else None
    following = history[index + 1] if index + 1 < len(history) else None
    _check_order(electric, water, previous, following)

    edited = history[index].model_copy(
        update={
            "start_date": start,
            "end_date": end,
            "electric_reading": electric,
            "water_reading": water,
        }
    )
    edited = _recalculated(edited, previous, room.base_rent, rates)
    if override is not None:
        edited = edited.model_copy(update={"bill_amount": override, "bill_overridden": True})
    if is_paid is not None:
        edited = edited.model_copy(update={"is_paid": is_paid})
    history[index] = edited

    # Only the immediate successor follows the edit.
    if following is not None:
        history[index + 1] = _recalculated(following, edited, room.base_rent, rates)

    return room.model_copy(update={"usage_history": tuple(history)})


def delete_record(room: Room, record_id: str, rates: Rates = DEFAULT_RATES) -> Room:
    """
    Removes a record; the record that took its place is recalculated against
    its new predecessor (or a zero baseline when it becomes the first).

    Raises:
        NotFoundError: if ``record_id`` is not in the active history.
    """
    index = _locate(room, record_id)
    history = list(room.usage_history)
    del history[index]

    if index < len(history):
        previous = history[index - 1] if index > 0 else None
        history[index] = _recalculated(history[index], previous, room.base_rent, rates)

    return room.model_copy(update={"usage_history": tuple(history)})


def mark_paid(room: Room, record_id: str) -> Room:
    """Flags a record as paid. Calling it again changes nothing."""
    index = _locate(room, record_id)
    record = room.usage_history[index]
    if record.is_paid:
        return room

    history = list(room.usage_history)
    history[index] = record.model_copy(update={"is_paid": True})
    return room.model_copy(update={"usage_history": tuple(history)})


def checkout(
    room: Room,
    electric_reading: Any,
    water_reading: Any,
    start_date: Any,
    end_date: Any,
    final_base_rent: Any = None,
    rates: Rates = DEFAULT_RATES,
) -> Room:
    """
    Closes the current tenancy.

    Appends a final record (billed with ``final_base_rent`` when given,
    otherwise the room's rent), archives the whole active history including
    that record, and removes every tenant.

    Raises:
        ValidationError: under the same conditions as :func:`append_record`,
            or if ``final_base_rent`` is malformed.
    """
    _require_occupied(room)
    base_rent = (
        room.base_rent
        if final_base_rent is None
        else parse_amount(final_base_rent, "Final base rent")
    )
    final_record = _new_record(
        room, electric_reading, water_reading, start_date, end_date, base_rent, rates
    )
    return room.model_copy(
        update={
            "tenants": (),
            "usage_history": (),
            "archived_usage_history": (
                room.archived_usage_history + room.usage_history + (final_record,)
            ),
        }
    )


def replace_tenants(room: Room, tenants: Iterable[Tenant]) -> Room:
    """
    Sets the room's tenant list.

    Going from occupied to empty archives the active history; every other
    change leaves the history alone.
    """
    new_tenants = tuple(tenants)
    for tenant in new_tenants:
        if not isinstance(tenant, Tenant):
            raise ValidationError(f"Expected a Tenant, got {tenant!r}.")

    update: dict[str, Any] = {"tenants": new_tenants}
    if room.is_occupied and not new_tenants:
        update["usage_history"] = ()
        update["archived_usage_history"] = (
            room.archived_usage_history + room.usage_history
        )
    return room.model_copy(update=update)


def find_record(room: Room, record_id: str) -> UsageRecord:
    """Looks a record up in the active history, then in the archive."""
    for record in room.usage_history + room.archived_usage_history:
        if record.id == record_id:
            return record
    raise NotFoundError(f"Record {record_id} not found in room {room.name}.")


def check_consistency(room: Room, rates: Rates = DEFAULT_RATES) -> list[str]:
    """
    Returns human-readable problems found in the room's active history.

    Checks reading order, derived usage and, for records whose bill was not
    set by hand, the bill amount. Archived records are not inspected.
    """
    issues: list[str] = []
    previous: UsageRecord | None = None

    for position, record in enumerate(room.usage_history, start=1):
        prefix = f"Room {room.name}, record #{position} ({record.id})"
        if record.start_date > record.end_date:
            issues.append(f"{prefix}: period starts after it ends.")

        prev_electric = previous.electric_reading if previous else ZERO
        prev_water = previous.water_reading if previous else ZERO
        if record.electric_reading < prev_electric:
            issues.append(
                f"{prefix}: electric reading {record.electric_reading} is below "
                f"the previous reading {prev_electric}."
            )
        if record.water_reading < prev_water:
            issues.append(
                f"{prefix}: water reading {record.water_reading} is below "
                f"the previous reading {prev_water}."
            )

        electric_usage = calculate_usage(record.electric_reading, prev_electric)
        water_usage = calculate_usage(record.water_reading, prev_water)
        if record.electric_usage != electric_usage:
            issues.append(
                f"{prefix}: electric usage is {record.electric_usage}, "
                f"expected {electric_usage}."
            )
        if record.water_usage != water_usage:
            issues.append(
                f"{prefix}: water usage is {record.water_usage}, expected {water_usage}."
            )

        if not record.bill_overridden:
            expected_bill = calculate_bill(room.base_rent, electric_usage, water_usage, rates)
            if record.bill_amount != expected_bill:
                issues.append(
                    f"{prefix}: bill amount is {record.bill_amount}, "
                    f"expected {expected_bill}."
                )
        previous = record

    return issues
