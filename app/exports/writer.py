"""
Запись экспорта в файл (XLSX или CSV).
"""

import csv
import io
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from app.exports.product_export import ProductDataGridExport
from app.schemas.export import ExportFormat

logger = logging.getLogger(__name__)

MEDIA_TYPES: Dict[ExportFormat, str] = {
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv; charset=utf-8",
}

# Ограничения ширины колонок при автоподборе
MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 60


def _cell_text(value: Any) -> str:
    """Текстовое представление ячейки для CSV и расчета ширины."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat(sep=" ") if isinstance(value, datetime) else value.isoformat()
    return str(value)


def _xlsx_value(value: Any) -> Any:
    """Удалить управляющие символы, которые нельзя записать в XLSX."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def write_xlsx(export: ProductDataGridExport) -> bytes:
    """
    Записать экспорт в XLSX.

    Заголовок выделяется жирным и закрепляется, ширина колонок
    подбирается по содержимому.
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Products"

    headings = export.headings()
    sheet.append([_xlsx_value(heading) for heading in headings])
    widths = [len(str(heading)) for heading in headings]

    rows_written = 0
    for row in export.rows():
        sheet.append([_xlsx_value(value) for value in row])
        rows_written += 1
        for position, value in enumerate(row):
            widths[position] = max(widths[position], len(_cell_text(value)))

    header_font = Font(bold=True)
    for cell in sheet[1]:
        cell.font = header_font
    sheet.freeze_panes = "A2"

    for position, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(position)].width = min(
            max(width + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
        )

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.info(f"XLSX export written: {rows_written} rows, {len(headings)} columns")
    return buffer.getvalue()


def write_csv(export: ProductDataGridExport) -> bytes:
    """Записать экспорт в CSV (UTF-8 с BOM для корректного открытия в Excel)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(export.headings())
    rows_written = 0
    for row in export.rows():
        writer.writerow([_cell_text(value) for value in row])
        rows_written += 1

    logger.info(f"CSV export written: {rows_written} rows")
    return buffer.getvalue().encode("utf-8-sig")


def write_export(export: ProductDataGridExport, export_format: ExportFormat) -> bytes:
    if export_format == ExportFormat.CSV:
        return write_csv(export)
    return write_xlsx(export)
