"""Core business logic for calculations."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class Rates:
    """Unit prices applied to metered usage."""

    electric: Decimal = Decimal("5000")  # VND per kWh
    water: Decimal = Decimal("10000")  # VND per m³


DEFAULT_RATES = Rates()


def calculate_usage(current_reading: Decimal, previous_reading: Decimal) -> Decimal:
    """
    Calculates the consumption between two cumulative meter readings.

    Args:
        current_reading: The reading at the end of the period.
        previous_reading: The reading of the preceding period, or 0 for the
            first period of a tenancy.

    Returns:
        The difference between the two readings. Ordering of readings is
        enforced by the ledger, so no clamping happens here.
    """
    return current_reading - previous_reading


def calculate_cost(consumption: Decimal, rate: Decimal) -> Decimal:
    """
    Calculates the monetary cost based on consumption and a tariff rate.

    Args:
        consumption: The amount of resource consumed.
        rate: The monetary rate per unit of consumption.

    Returns:
        The calculated cost.
    """
    return consumption * rate


def calculate_bill(
    base_rent: Decimal,
    electric_usage: Decimal,
    water_usage: Decimal,
    rates: Rates = DEFAULT_RATES,
) -> Decimal:
    """Rent plus metered electricity and water for one period."""
    return (
        base_rent
        + calculate_cost(electric_usage, rates.electric)
        + calculate_cost(water_usage, rates.water)
    )
