# This project was developed with assistance from AI tools.
"""Render a printed negative record as a one-page PDF (pymupdf)."""

import fitz  # pymupdf

from ..core.billing import PrintResult

_FIELDS = (
    ("Type", "type"),
    ("First name", "first_name"),
    ("Middle name", "middle_name"),
    ("Last name", "last_name"),
    ("Company", "company_name"),
    ("Alias", "alias"),
    ("Case no.", "case_no"),
    ("Plaintiff", "plaintiff"),
    ("Case type", "case_type"),
    ("Court", "court_type"),
    ("Branch", "branch"),
    ("City", "city"),
    ("Date filed", "date_filed"),
    ("Source", "source"),
    ("Details", "details"),
)


def _format(value) -> str:
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def render_record_pdf(result: PrintResult) -> bytes:
    """Lay out the record's non-empty fields and the print footer."""
    record = result.record
    lines = [f"Negative Record #{record.id}", ""]
    for label, name in _FIELDS:
        value = getattr(record, name)
        if value not in (None, ""):
            lines.append(f"{label}: {_format(value)}")
    lines += [
        "",
        f"Printed by user {result.printed_by} at {result.printed_at.isoformat()}",
    ]

    doc = fitz.open()
    page = doc.new_page()
    box = fitz.Rect(54, 54, page.rect.width - 54, page.rect.height - 54)
    page.insert_textbox(box, "\n".join(lines), fontsize=10)
    pdf_bytes = doc.tobytes()
    doc.close()
    return pdf_bytes
