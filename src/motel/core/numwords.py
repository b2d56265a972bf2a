"""Spelling out amounts in Vietnamese for printed invoices."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

DIGITS = ["không", "một", "hai", "ba", "bốn", "năm", "sáu", "bảy", "tám", "chín"]
SCALES = ["", "nghìn", "triệu"]


def _read_block(number: int, full: bool) -> list[str]:
    """
    Reads a number below 1000.

    ``full`` is set for every block except the leading one, so that e.g.
    1_005 reads "một nghìn không trăm linh năm".
    """
    hundreds, rest = divmod(number, 100)
    tens, units = divmod(rest, 10)
    words: list[str] = []

    if hundreds or full:
        words += [DIGITS[hundreds], "trăm"]
        if tens == 0 and units:
            words.append("linh")

    if tens == 1:
        words.append("mười")
    elif tens > 1:
        words += [DIGITS[tens], "mươi"]

    if units == 1 and tens > 1:
        words.append("mốt")
    elif units == 5 and tens > 0:
        words.append("lăm")
    elif units == 4 and tens > 1:
        words.append("tư")
    elif units:
        words.append(DIGITS[units])
    return words


def number_to_words(number: int) -> str:
    """
    Reads a non-negative integer aloud in Vietnamese, capitalised.

    >>> number_to_words(2_600_000)
    'Hai triệu sáu trăm nghìn'
    """
    if number < 0:
        raise ValueError("Only non-negative numbers can be spelled out.")
    if number == 0:
        return "Không"

    blocks: list[int] = []
    while number:
        number, block = divmod(number, 1000)
        blocks.append(block)

    words: list[str] = []
    for position in range(len(blocks) - 1, -1, -1):
        block = blocks[position]
        if block == 0:
            continue
        words += _read_block(block, full=bool(words))
        # Past a billion the scale words stack: "nghìn tỷ", "triệu tỷ", ...
        scale = [SCALES[position % 3]] + ["tỷ"] * (position // 3)
        words += [word for word in scale if word]

    text = " ".join(words)
    return text[0].upper() + text[1:]


def amount_in_words(amount: Decimal | int) -> str:
    """Spells out a VND amount, rounding to whole đồng."""
    whole = int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return f"{number_to_words(whole)} đồng"
