"""Command line entry point: ``invoicer generate`` and ``invoicer totals``."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from invoicer.core.currency import currency_symbol, fmt_money
from invoicer.core.errors import InvoiceError
from invoicer.core.settings import load_settings
from invoicer.core.totals import compute_totals
from invoicer.data.models import InvoiceDocument
from invoicer.data.worklog import apply_worklog, read_worklog_csv
from invoicer.pdf.blocks import tax_label
from invoicer.pdf.pdf_draw import build_invoice_pdf

logger = logging.getLogger(__name__)


def _csv_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",")]


def _float_list(raw: str) -> List[float]:
    try:
        return [float(part) for part in _csv_list(raw)]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected numbers, got {raw!r}") from exc


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by every command that needs an invoice document.

    Overrides default to SUPPRESS so only flags actually given end up in the
    namespace and win over the config file.
    """
    parser.add_argument("--config", help="Config file (.json, .yaml or .yml)")
    parser.add_argument("--worklog", help="Worklog file (.csv)")

    o = argparse.SUPPRESS
    parser.add_argument("--id", dest="id", default=o, help="ID")
    parser.add_argument("--id-prefix", dest="id_prefix", default=o, help="ID prefix")
    parser.add_argument("--title", default=o, help="Title")
    parser.add_argument("-r", "--rate", dest="rates", type=_float_list, action="extend", default=o, help="Rates")
    parser.add_argument("-q", "--quantity", dest="quantities", type=_float_list, action="extend", default=o, help="Quantities")
    parser.add_argument("-i", "--item", dest="items", type=_csv_list, action="extend", default=o,
                        help="Items, comma separated; repeatable")
    parser.add_argument("-l", "--logo", default=o, help="Company logo")
    parser.add_argument("--logo-size", dest="logo_size", type=float, default=o, help="Logo width in points")
    parser.add_argument("-f", "--from", dest="issuer", default=o, help="Issuing company")
    parser.add_argument("--from-address", dest="issuer_address", type=_csv_list, action="extend", default=o,
                        help="Issuing company address")
    parser.add_argument("-t", "--to", dest="recipient", default=o, help="Recipient company")
    parser.add_argument("-a", "--to-address", dest="recipient_address", type=_csv_list, action="extend", default=o,
                        help="Receiving company address")
    parser.add_argument("--date", default=o, help="Date")
    parser.add_argument("--due", default=o, help="Payment due date")
    parser.add_argument("--due-days", dest="due_days", type=int, default=o, help="Payment due days after generation date")
    parser.add_argument("--rates-tax-inclusive", dest="rates_tax_inclusive", action="store_true", default=o,
                        help="Rates already include tax")
    parser.add_argument("--tax", type=float, default=o, help="Tax rate, e.g. 0.1")
    parser.add_argument("--tax-name", dest="tax_name", default=o, help="Tax name")
    parser.add_argument("-d", "--discount", type=float, default=o, help="Discount rate, e.g. 0.05")
    parser.add_argument("-c", "--currency", default=o, help="Currency code")
    parser.add_argument("-n", "--note", default=o, help="Note")
    parser.add_argument("--protect", action="store_true", default=o, help="Restrict the PDF to printing")


OVERRIDE_FIELDS = (
    "id", "id_prefix", "title", "rates", "quantities", "items", "logo", "logo_size",
    "issuer", "issuer_address", "recipient", "recipient_address", "date", "due", "due_days",
    "rates_tax_inclusive", "tax", "tax_name", "discount", "currency", "note", "protect",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="invoicer", description="Generate invoices from the command line.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate an invoice PDF")
    _add_input_arguments(generate)
    generate.add_argument("-o", "--output", default="invoice.pdf", help="Output file (.pdf)")
    generate.add_argument("--fonts-dir", dest="fonts_dir", help="Directory with DejaVuSans.ttf and DejaVuSans-Bold.ttf")

    totals = subparsers.add_parser("totals", help="Print the invoice totals without rendering")
    _add_input_arguments(totals)
    return parser


def load_document(args: argparse.Namespace, today: date) -> InvoiceDocument:
    """Defaults, then config file, then flags given on the command line, then the worklog."""
    settings = load_settings(args.config, today)
    overrides: Dict[str, Any] = {name: getattr(args, name) for name in OVERRIDE_FIELDS if hasattr(args, name)}
    document = settings.merged(overrides).to_document()
    if args.worklog:
        document = apply_worklog(document, read_worklog_csv(args.worklog))
    return document


def output_path(output: str, invoice_id: str) -> Path:
    return Path(f"{output.removesuffix('.pdf')}_{invoice_id}.pdf")


def cmd_generate(args: argparse.Namespace, today: date) -> int:
    document = load_document(args, today)
    out = output_path(args.output, document.id)
    logger.info("Building PDF: %s", out)
    build_invoice_pdf(out, document, fonts_dir=Path(args.fonts_dir) if args.fonts_dir else None)
    print(f"Generated {out}")
    return 0


def cmd_totals(args: argparse.Namespace, today: date) -> int:
    document = load_document(args, today)
    totals = compute_totals(
        document.items,
        document.quantities,
        document.rates,
        tax_rate=document.tax,
        tax_inclusive=document.rates_tax_inclusive,
        discount_rate=document.discount,
    )
    symbol = currency_symbol(document.currency)

    rows = [("Total Hours", f"{totals.total_hours:.2f}"), ("Subtotal", fmt_money(totals.display_subtotal, symbol))]
    if totals.show_tax:
        rows.append((tax_label(document.tax_name, document.tax), fmt_money(totals.tax, symbol)))
    if totals.show_discount:
        rows.append(("Discount", fmt_money(totals.discount, symbol)))
    rows.append(("Total Due", fmt_money(totals.total, symbol)))

    label_w = max(len(label) for label, _ in rows)
    value_w = max(len(value) for _, value in rows)
    for label, value in rows:
        print(f"{label.ljust(label_w)}  {value.rjust(value_w)}")
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "totals": cmd_totals,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return COMMANDS[args.command](args, date.today())
    except InvoiceError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
