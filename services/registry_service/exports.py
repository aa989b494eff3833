"""
Report exports - CSV artifact and printable HTML report built from filtered permits.
"""

import csv
import html
import io
from datetime import date
from typing import Iterable, List, Sequence

from services.registry_service.models import Permit

REPORT_HEADERS = [
    "Permit Number",
    "Operator Name",
    "Company ID",
    "Vehicle Reg",
    "Route",
    "Issue Date",
    "Expiry Date",
    "Status",
]

CSV_MODE = "CSV"
PDF_MODE = "PDF"


def report_row(permit: Permit) -> List[str]:
    return [
        permit.permit_number,
        permit.operator_name,
        permit.company_id,
        permit.vehicle_reg,
        permit.route,
        permit.issue_date,
        permit.expiry_date,
        permit.status.value,
    ]


def build_report_csv(permits: Iterable[Permit]) -> str:
    """
    Render permits as CSV text with the report header.

    Fields containing commas, quotes or newlines are quoted and embedded
    quotes doubled, so the output reads back with csv.reader.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    for permit in permits:
        writer.writerow(report_row(permit))
    return buffer.getvalue()


def report_filename(today: date, prefix: str = "PTA_Report", extension: str = "csv") -> str:
    return f"{prefix}_{today.isoformat()}.{extension}"


def build_report_html(permits: Sequence[Permit], today: date,
                      authority_name: str = "Public Transport Authority") -> str:
    """Self-contained report page meant to be printed to PDF from the browser"""
    header_cells = "".join(f"<th>{html.escape(h)}</th>" for h in REPORT_HEADERS)
    body_rows = []
    for permit in permits:
        cells = "".join(f"<td>{html.escape(value)}</td>" for value in report_row(permit))
        body_rows.append(f"<tr>{cells}</tr>")
    rows_html = "\n".join(body_rows)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{html.escape(authority_name)} - Permit Report {today.isoformat()}</title>
<style>
body {{ font-family: Helvetica, Arial, sans-serif; color: #0f172a; margin: 2rem; }}
h1 {{ font-size: 1.25rem; margin-bottom: 0.25rem; }}
p.meta {{ color: #64748b; font-size: 0.8rem; margin-top: 0; }}
table {{ border-collapse: collapse; width: 100%; font-size: 0.75rem; }}
th {{ background: #0f172a; color: #fff; text-align: left; padding: 6px; }}
td {{ border-bottom: 1px solid #e2e8f0; padding: 6px; }}
</style>
</head>
<body onload="window.print()">
<h1>{html.escape(authority_name)} - Permit Report</h1>
<p class="meta">Generated {today.isoformat()} | {len(permits)} records</p>
<table>
<thead><tr>{header_cells}</tr></thead>
<tbody>
{rows_html}
</tbody>
</table>
</body>
</html>
"""


def export_success_message(mode: str, count: int) -> str:
    return f"Successfully generated {mode} report for {count} records."
