"""
Security discs - the printed credential derived from an active permit.
"""

import html
from dataclasses import dataclass
from typing import List, Tuple

import barcode
from barcode.writer import SVGWriter

from services.registry_service.models import Permit

BARCODE_OPTIONS = {
    "write_text": False,
    "module_width": 0.25,
    "module_height": 12.0,
    "quiet_zone": 2.0,
}


@dataclass(frozen=True)
class DiscRecord:
    """What is printed on a disc; every field comes straight from one permit"""
    vehicle_reg: str
    operator_name: str
    expiry_date: str
    barcode_value: str
    label: str

    @classmethod
    def from_permit(cls, permit: Permit) -> 'DiscRecord':
        return cls(
            vehicle_reg=permit.vehicle_reg,
            operator_name=permit.operator_name,
            expiry_date=permit.expiry_date,
            barcode_value=permit.permit_number,
            label=permit.permit_number
        )


def render_barcode_svg(value: str) -> str:
    """
    Render a Code128 barcode as inline SVG markup.

    Args:
        value: Text to encode, normally the permit number

    Returns:
        The <svg> element without the XML prolog, ready to embed in HTML
    """
    code = barcode.Code128(value, writer=SVGWriter())
    rendered = code.render(writer_options=BARCODE_OPTIONS)
    if isinstance(rendered, bytes):
        rendered = rendered.decode("utf-8")
    start = rendered.find("<svg")
    return rendered[start:] if start >= 0 else rendered


def permit_detail_rows(permit: Permit) -> List[Tuple[str, str]]:
    """Label/value pairs for the printing page detail panel"""
    return [
        ("Record UUID", permit.id),
        ("Permit Reference", permit.permit_number),
        ("Authorized Holder", permit.operator_name),
        ("Entity Registration", permit.company_id or "N/A"),
        ("Vehicle Plate", permit.vehicle_reg),
        ("Route Allocation", permit.route or "Global Permission"),
        ("Date of Activation", permit.issue_date),
        ("Threshold Expiry", permit.expiry_date),
        ("Operational Status", permit.status.value),
        ("System Timestamp", permit.created_at),
    ]


def render_disc_html(disc: DiscRecord, authority_name: str = "Public Transport Authority") -> str:
    """Circular disc preview: authority, plate, operator, expiry and barcode"""
    barcode_svg = render_barcode_svg(disc.barcode_value)
    return f"""
<div class="pta-disc" style="width:340px;height:340px;border-radius:50%;border:10px double #0f172a;
     display:flex;flex-direction:column;align-items:center;justify-content:center;
     text-align:center;background:#fff;margin:auto;font-family:Helvetica,Arial,sans-serif;">
  <div style="font-size:0.6rem;font-weight:700;letter-spacing:0.2em;color:#64748b;">
    {html.escape(authority_name.upper())}
  </div>
  <div style="font-size:2rem;font-weight:900;color:#0f172a;margin:0.25rem 0;">
    {html.escape(disc.vehicle_reg)}
  </div>
  <div style="font-size:0.75rem;font-weight:600;color:#334155;">{html.escape(disc.operator_name)}</div>
  <div style="font-size:0.7rem;color:#dc2626;font-weight:700;margin-top:0.25rem;">
    EXPIRES {html.escape(disc.expiry_date)}
  </div>
  <div style="width:200px;margin-top:0.5rem;">{barcode_svg}</div>
  <div style="font-family:monospace;font-size:0.7rem;letter-spacing:0.15em;">{html.escape(disc.label)}</div>
</div>
"""
