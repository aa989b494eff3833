"""
Tests for CSV and printable report exports
"""

import csv
import io
from datetime import date

from conftest import permit_record
from services.registry_service.exports import (
    REPORT_HEADERS,
    build_report_csv,
    build_report_html,
    export_success_message,
    report_filename,
)
from services.registry_service.models import Permit


class TestCsvExport:
    """Test the CSV artifact"""

    def test_header_line(self):
        text = build_report_csv([])

        assert text == "Permit Number,Operator Name,Company ID,Vehicle Reg,Route,Issue Date,Expiry Date,Status\n"

    def test_row_values(self):
        permit = Permit.from_record(permit_record(3, "XYZ789", route="Route 9", company="C-3"))

        lines = build_report_csv([permit]).splitlines()

        assert lines[1] == "PTA-2024-0003,Metro Cabs,C-3,XYZ789,Route 9,2024-01-15,2024-12-31,ACTIVE"

    def test_operator_with_comma_and_quotes_survives_csv_reader(self):
        """Quotes are doubled and the field wrapped, so a standard reader recovers the name"""
        name = 'O\'Brien, "Fast" Transit'
        permit = Permit.from_record(permit_record(1, operator=name))

        text = build_report_csv([permit])

        assert '"O\'Brien, ""Fast"" Transit"' in text
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[0] == REPORT_HEADERS
        assert rows[1][1] == name

    def test_filename(self):
        assert report_filename(date(2024, 6, 1)) == "PTA_Report_2024-06-01.csv"
        assert report_filename(date(2024, 6, 1), extension="html") == "PTA_Report_2024-06-01.html"


class TestPrintableReport:
    def test_contains_rows_and_count(self):
        permits = [Permit.from_record(permit_record(1, "AAA111")), Permit.from_record(permit_record(2, "BBB222"))]

        document = build_report_html(permits, date(2024, 6, 1))

        assert "2 records" in document
        assert "AAA111" in document and "BBB222" in document
        for header in REPORT_HEADERS:
            assert f"<th>{header}</th>" in document

    def test_values_are_escaped(self):
        permit = Permit.from_record(permit_record(1, operator="<script>alert(1)</script>"))

        document = build_report_html([permit], date(2024, 6, 1))

        assert "<script>alert" not in document
        assert "&lt;script&gt;" in document


def test_success_message():
    assert export_success_message("CSV", 4) == "Successfully generated CSV report for 4 records."
    assert export_success_message("PDF", 0) == "Successfully generated PDF report for 0 records."
