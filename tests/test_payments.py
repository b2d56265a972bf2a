"""Tests for VietQR payment details."""

from datetime import date
from decimal import Decimal

from motel.core import ledger
from motel.core.domain import Room
from motel.services.payments import BankAccount, room_number, transfer_memo, vietqr_url

ACCOUNT = BankAccount(
    bank_name="Ngân hàng Vietcombank",
    bank_bin="970436",
    account_number="1234567890",
    account_holder="CHỦ NHÀ TRỌ",
)


def test_room_number_falls_back_to_name():
    assert room_number(Room(name="Phòng 101", base_rent=Decimal("1"))) == "101"
    assert room_number(Room(name="Gác mái", base_rent=Decimal("1"))) == "Gác mái"


def test_transfer_memo_and_qr_url(room):
    room = ledger.append_record(room, 100, 10, date(2024, 1, 1), date(2024, 2, 1))
    record = room.usage_history[0]

    assert transfer_memo(room, record) == "TT tien nha P101 T2 2024"
    assert vietqr_url(room, record, ACCOUNT) == (
        "https://img.vietqr.io/image/970436-1234567890-compact2.png"
        "?amount=2600000"
        "&addInfo=TT%20tien%20nha%20P101%20T2%202024"
        "&accountName=CH%E1%BB%A6%20NH%C3%80%20TR%E1%BB%8C"
    )
