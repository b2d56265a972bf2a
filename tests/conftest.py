"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from tortoise import Tortoise

from motel.core.domain import Room, Tenant


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """
    Provides a clean in-memory SQLite database for each test function.
    """
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["motel.core.models"]},
    )
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


@pytest.fixture
def tenant() -> Tenant:
    return Tenant(
        id="tenant-1",
        name="Nguyễn Văn An",
        phone="0901234567",
        move_in_date=date(2024, 1, 1),
        id_number="012345678910",
        occupation="Kỹ sư phần mềm",
    )


@pytest.fixture
def room(tenant: Tenant) -> Room:
    """An occupied room with an empty ledger and 2,000,000 VND rent."""
    return Room(
        id="room-1", name="Phòng 101", base_rent=Decimal("2000000"), tenants=(tenant,)
    )
