"""Database configuration for Tortoise-ORM."""

import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")


TORTOISE_ORM = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {
            "models": ["motel.core.models", "aerich.models"],
            "default_connection": "default",
        },
    },
}
