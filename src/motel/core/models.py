"""Storage models for the motel application."""

from __future__ import annotations

import uuid

from tortoise import fields, models

ROOMS_KEY = "motelRooms"


class BaseModel(models.Model):
    """Abstract base model with common fields."""

    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True


class StateEntry(BaseModel):
    """A named JSON document holding a serialized slice of application state."""

    key = fields.CharField(max_length=64, unique=True)
    value = fields.JSONField(default=list)

    def __str__(self) -> str:
        return f"State entry {self.key}"
