"""Tests for the XLSX and CSV export writers."""

import csv
import io

from openpyxl import load_workbook

from app.exports import write_csv, write_export, write_xlsx
from app.schemas.export import ExportFormat


class TestXlsx:
    def test_header_and_rows(self, catalog, make_export):
        content = write_xlsx(make_export())

        sheet = load_workbook(io.BytesIO(content)).active
        rows = list(sheet.iter_rows(values_only=True))

        assert rows[0][:3] == ("ID", "SKU", "Name")
        assert rows[0][-2:] == ("Images", "Videos")
        assert len(rows) == 4
        assert rows[1][1] == "shirt"

    def test_header_is_bold_and_frozen(self, catalog, make_export):
        sheet = load_workbook(io.BytesIO(write_xlsx(make_export()))).active

        assert sheet["A1"].font.b
        assert sheet.freeze_panes == "A2"

    def test_sanitized_value_is_stored_as_text(self, catalog, make_export):
        export = make_export()
        author_column = export.headings().index("Author") + 1
        sheet = load_workbook(io.BytesIO(write_xlsx(export))).active

        assert sheet.cell(row=3, column=author_column).value == "'=HYPERLINK(\"x\")"

    def test_control_characters_are_removed(self, catalog, db, make_export):
        from app.db.models import ProductAttributeValue

        value = db.query(ProductAttributeValue).filter_by(product_id=2, attribute_id=5).one()
        value.text_value = "bad\x01char"
        db.commit()

        export = make_export()
        author_column = export.headings().index("Author") + 1
        sheet = load_workbook(io.BytesIO(write_xlsx(export))).active

        assert sheet.cell(row=3, column=author_column).value == "badchar"

    def test_empty_export_has_only_header(self, db, make_export):
        sheet = load_workbook(io.BytesIO(write_xlsx(make_export()))).active

        assert sheet.max_row == 1


class TestCsv:
    def test_bom_and_rows(self, catalog, make_export):
        content = write_csv(make_export())

        assert content.startswith(b"\xef\xbb\xbf")
        rows = list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))
        assert rows[0][0] == "ID"
        assert len(rows) == 4

    def test_blank_cells_and_booleans(self, catalog, make_export):
        export = make_export()
        headings = export.headings()
        content = write_csv(export)

        rows = list(csv.reader(io.StringIO(content.decode("utf-8-sig"))))
        shirt = rows[1]
        assert shirt[headings.index("Author")] == ""
        assert shirt[headings.index("Status")] == "1"
        assert shirt[headings.index("Price")] == "10"

    def test_write_export_dispatches_on_format(self, catalog, make_export):
        assert write_export(make_export(), ExportFormat.CSV).startswith(b"\xef\xbb\xbf")
        assert write_export(make_export(), ExportFormat.XLSX)[:2] == b"PK"
