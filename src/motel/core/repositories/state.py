"""Repository for StateEntry documents."""

from __future__ import annotations

from typing import Any

from motel.core.models import StateEntry


class StateRepository:
    """Reads and writes whole JSON documents by key."""

    def __init__(self) -> None:
        self.model = StateEntry

    async def load(self, key: str) -> Any | None:
        """Return the stored document for ``key``, or None if it was never saved."""
        entry = await self.model.get_or_none(key=key)
        return entry.value if entry else None

    async def save(self, key: str, value: Any) -> None:
        """Replace the document stored under ``key``."""
        await self.model.update_or_create(defaults={"value": value}, key=key)
