"""Service for exporting invoices to HTML, PDF and Excel."""

from __future__ import annotations

import re
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from weasyprint import HTML

from motel.config import Settings
from motel.core.calculations import Rates, calculate_cost
from motel.core.dates import format_date, format_period
from motel.core.domain import Room, UsageRecord
from motel.core.numwords import amount_in_words
from motel.services.payments import BankAccount, transfer_memo


class ExportError(Exception):
    """Raised when there is nothing to export."""


# Spreadsheet columns and their widths in characters.
INVOICE_COLUMNS = [
    ("Kỳ Thanh Toán", 25),
    ("Tên Người Thuê", 25),
    ("CS Điện Cũ", 12),
    ("CS Điện Mới", 12),
    ("Sử Dụng Điện (kWh)", 20),
    ("CS Nước Cũ", 12),
    ("CS Nước Mới", 12),
    ("Sử Dụng Nước (m³)", 20),
    ("Tiền Phòng (VND)", 16),
    ("Tiền Điện (VND)", 16),
    ("Tiền Nước (VND)", 16),
    ("Điều Chỉnh (VND)", 16),
    ("Tổng Tiền (VND)", 16),
    ("Trạng Thái", 16),
]


def workbook_filename(room: Room) -> str:
    """Default file name for a room's workbook, e.g. 'Hoa_Don_Phòng_101.xlsx'."""
    stem = re.sub(r"\s+", "_", room.name.strip())
    return f"Hoa_Don_{stem}.xlsx"


def format_vnd(amount: Decimal | int) -> str:
    """Formats money with dots between thousands, e.g. '2.600.000'."""
    whole = int(Decimal(amount).quantize(Decimal("1")))
    return f"{whole:,}".replace(",", ".")


class ExportService:
    """Renders printable invoices ("phiếu báo tiền nhà")."""

    def __init__(self, settings: Settings, rates: Rates):
        template_dir = Path(__file__).parent.parent / "templates"
        self._env = Environment(
            loader=FileSystemLoader(template_dir), autoescape=select_autoescape()
        )
        self._env.filters["vnd"] = format_vnd
        self._settings = settings
        self._rates = rates

    def _line_amounts(
        self, room: Room, record: UsageRecord
    ) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        """Splits a bill into rent, electricity, water and manual adjustment."""
        electric_cost = calculate_cost(record.electric_usage, self._rates.electric)
        water_cost = calculate_cost(record.water_usage, self._rates.water)
        if record.bill_overridden:
            rent = room.base_rent
            adjustment = record.bill_amount - rent - electric_cost - water_cost
        else:
            # Checkout bills may carry their own rent, so derive it from the total.
            rent = record.bill_amount - electric_cost - water_cost
            adjustment = Decimal("0")
        return rent, electric_cost, water_cost, adjustment

    def _context(self, room: Room, record: UsageRecord) -> dict:
        rent, electric_cost, water_cost, adjustment = self._line_amounts(room, record)

        return {
            "landlord": {
                "name": self._settings.LANDLORD_NAME,
                "address": self._settings.LANDLORD_ADDRESS,
                "phone": self._settings.LANDLORD_PHONE,
            },
            "account": BankAccount.from_settings(self._settings),
            "room": room,
            "record": record,
            "tenant_names": ", ".join(t.name for t in record.tenants_snapshot),
            "issued": format_date(record.end_date),
            "period": format_period(record.start_date, record.end_date),
            "previous_electric": record.electric_reading - record.electric_usage,
            "previous_water": record.water_reading - record.water_usage,
            "rates": self._rates,
            "rent": rent,
            "electric_cost": electric_cost,
            "water_cost": water_cost,
            "adjustment": adjustment,
            "amount_in_words": amount_in_words(record.bill_amount),
            "memo": transfer_memo(room, record),
        }

    def render_invoice_html(self, room: Room, record: UsageRecord) -> str:
        """Renders the invoice for one usage record as an HTML document."""
        template = self._env.get_template("invoice.html")
        return template.render(**self._context(room, record))

    def generate_pdf_invoice(
        self, room: Room, record: UsageRecord, output_path: Path | str
    ) -> Path:
        """
        Generates a PDF invoice for one usage record.

        Args:
            room: The room the record belongs to.
            record: The billing period to print.
            output_path: The path where the PDF file will be saved.

        Returns:
            The path to the generated PDF file.
        """
        rendered_html = self.render_invoice_html(room, record)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        HTML(string=rendered_html).write_pdf(output_path)

        return output_path

    def export_room_invoices_xlsx(self, room: Room, output_path: Path | str) -> Path:
        """
        Writes one row per active-history record of a room to an Excel sheet.

        Rows are ordered by period start. Amounts are written as numbers so
        the sheet can be summed.

        Raises:
            ExportError: if the room has no records to export.
        """
        records = sorted(room.usage_history, key=lambda r: r.start_date)
        if not records:
            raise ExportError(f"Room {room.name} has no invoices to export.")

        workbook = Workbook()
        sheet = workbook.active
        # Sheet titles are capped at 31 characters and reject some punctuation.
        sheet.title = re.sub(r"[\[\]:*?/\\]", "", f"Hóa đơn {room.name}")[:31]

        sheet.append([title for title, _ in INVOICE_COLUMNS])
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        for index, (_, width) in enumerate(INVOICE_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        for record in records:
            rent, electric_cost, water_cost, adjustment = self._line_amounts(room, record)
            sheet.append(
                [
                    format_period(record.start_date, record.end_date),
                    ", ".join(t.name for t in record.tenants_snapshot),
                    record.electric_reading - record.electric_usage,
                    record.electric_reading,
                    record.electric_usage,
                    record.water_reading - record.water_usage,
                    record.water_reading,
                    record.water_usage,
                    rent,
                    electric_cost,
                    water_cost,
                    adjustment,
                    record.bill_amount,
                    "Đã thanh toán" if record.is_paid else "Chưa thanh toán",
                ]
            )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output_path)

        return output_path
