from __future__ import annotations

from datetime import date as _date
from datetime import datetime
from pathlib import Path
import sys

# Ensure we can import the invoicer package when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoicer.core.settings import Settings
from invoicer.data.worklog import aggregate_worklog, apply_worklog
from invoicer.pdf.pdf_draw import build_invoice_pdf


def _worklog_rows() -> list[list[str]]:
    # A short week of billable work
    return [
        ["Date", "Start", "End", "Worked", "Titles"],
        ["2024-03-04", "09:00", "12:30", "3:30", "Discovery workshop"],
        ["2024-03-05", "09:15", "17:00", "7:45", "Wireframes"],
        ["2024-03-06", "10:00", "12:00", "2:00", "Client review"],
        ["2024-03-07", "09:00", "15:20", "6:20", "Design system tokens"],
        ["2024-03-08", "13:00", "14:30", "1:30", "Handover"],
    ]


def main() -> None:
    settings = Settings.defaults(_date.today()).merged({
        "from": "Project Folded, Inc.\\nDesign Studio",
        "fromDetails": {"Email": "hello@folded.example", "VAT": "GB000111"},
        "toDetails": {"Contact": "A. Buyer", "PO": "4711"},
        "rates": [85],
        "tax": 0.2,
        "taxName": "VAT",
        "discount": 0.05,
        "currency": "GBP",
        "note": "Thank you for your business\\nPayment by bank transfer within 14 days",
    })
    document = apply_worklog(settings.to_document(), aggregate_worklog(_worklog_rows()))

    # Write under repository assets/samples to avoid permission or file-lock issues
    out_dir = ROOT / "assets" / "samples"
    out_pdf = out_dir / f"SAMPLE_{document.id}.pdf"

    try:
        build_invoice_pdf(out_pdf, document)
        print(f"Wrote sample to: {out_pdf}")
    except PermissionError:
        # If the file is open/locked, write to a timestamped file instead
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        alt_pdf = out_dir / f"SAMPLE_{document.id}-{ts}.pdf"
        build_invoice_pdf(alt_pdf, document)
        print(f"Wrote sample to: {alt_pdf}")


if __name__ == "__main__":
    main()
