"""Bank-transfer details for paying a bill through a VietQR code."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from urllib.parse import quote, urlencode

from motel.config import Settings
from motel.core.domain import Room, UsageRecord

VIETQR_BASE_URL = "https://img.vietqr.io/image"


@dataclass(frozen=True)
class BankAccount:
    """Where tenants send their payments."""

    bank_name: str
    bank_bin: str
    account_number: str
    account_holder: str

    @classmethod
    def from_settings(cls, settings: Settings) -> BankAccount:
        return cls(
            bank_name=settings.BANK_NAME,
            bank_bin=settings.BANK_BIN,
            account_number=settings.BANK_ACCOUNT,
            account_holder=settings.ACCOUNT_HOLDER,
        )


def room_number(room: Room) -> str:
    """The first run of digits in the room name, e.g. 'Phòng 101' -> '101'."""
    match = re.search(r"\d+", room.name)
    return match.group(0) if match else room.name


def transfer_memo(room: Room, record: UsageRecord) -> str:
    """Payment description in plain ASCII so every banking app accepts it."""
    end = record.end_date
    return f"TT tien nha P{room_number(room)} T{end.month} {end.year}"


def vietqr_url(room: Room, record: UsageRecord, account: BankAccount) -> str:
    """Image URL of a QR code pre-filled with the amount and memo."""
    amount = record.bill_amount.quantize(Decimal("1"))
    query = urlencode(
        {
            "amount": str(amount),
            "addInfo": transfer_memo(room, record),
            "accountName": account.account_holder,
        },
        quote_via=quote,
    )
    return (
        f"{VIETQR_BASE_URL}/{account.bank_bin}-{account.account_number}"
        f"-compact2.png?{query}"
    )
