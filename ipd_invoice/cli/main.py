"""CLI interface for IPD invoice generation."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_app_version, get_default_output_dir
from ..config.profile_loader import list_available_profiles
from ..config.profile_manager import activate_profile, get_profile
from ..export.excel_export import export_billing_summary
from ..export.invoice_pdf import generate_invoice_pdf
from ..models.billing_record import (
    BillingRecord,
    BillingRecordError,
    load_billing_record,
    parse_billing_record,
)
from ..models.source_bitmap import SourceBitmap
from ..pipeline.paginator import paginate
from ..pipeline.reader import read_pdf
from ..run_summary import RunSummary

logger = logging.getLogger(__name__)


def _load_records(input_path: Path) -> List[BillingRecord]:
    """Load billing records from a JSON file (object or list) or a directory of JSON files."""
    if input_path.is_dir():
        files = sorted(input_path.glob("*.json"))
        if not files:
            raise BillingRecordError(f"No JSON records found in {input_path}")
        return [load_billing_record(p) for p in files]

    if not input_path.exists():
        raise BillingRecordError(f"Billing record not found: {input_path}")
    with open(input_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise BillingRecordError(f"Failed to read {input_path}: {e}") from e
    if isinstance(data, list):
        return [parse_billing_record(item) for item in data]
    return [parse_billing_record(data)]


def _handle_generate(args: argparse.Namespace) -> int:
    record = load_billing_record(args.input)
    output_dir = Path(args.output) if args.output else get_default_output_dir()
    result = generate_invoice_pdf(
        record,
        output_dir,
        letterhead=args.letterhead,
        scale=args.scale,
        profile=get_profile(),
        save_summary=args.summary,
    )
    print(f"Invoice: {result.pdf_path}")
    print(f"Pages: {result.page_count}")
    if result.summary.due_amount > 0:
        print(f"Due amount: {result.summary.due_amount:,.2f}")
    return 0


def _handle_plan(args: argparse.Namespace) -> int:
    geometry = get_profile().geometry()
    result = paginate(SourceBitmap(width=args.width, height=args.height), geometry)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def _handle_inspect(args: argparse.Namespace) -> int:
    doc = read_pdf(args.pdf)
    print(f"{doc.filename}: {doc.page_count} page(s)")
    for page in doc.pages:
        print(f"  page {page.page_number}: {page.width:.0f} x {page.height:.0f} pt, {page.image_count} image(s)")
    summary_path = Path(args.pdf).with_suffix(".json")
    if summary_path.is_file():
        run = RunSummary.load(summary_path)
        print(f"Run {run.run_id}: {run.status}, profile {run.profile_name}")
        for stage, seconds in run.durations.items():
            print(f"  {stage}: {seconds:.3f}s")
    return 0


def _handle_export(args: argparse.Namespace) -> int:
    records = _load_records(Path(args.input))
    path = export_billing_summary(records, args.output)
    print(f"Excel: {path} ({len(records)} record(s))")
    return 0


def _handle_check_deps(args: argparse.Namespace) -> int:
    from .check_deps import run_check
    return 0 if run_check(verbose=True) else 1


def _handle_profiles(args: argparse.Namespace) -> int:
    active = get_profile().name
    for name in list_available_profiles():
        marker = "*" if name == active else " "
        print(f"{marker} {name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ipd-invoice",
        description="IPD Invoice - generate paginated, letterheaded invoice PDFs from billing records"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    parser.add_argument(
        "--profile",
        type=str,
        default="default",
        help="Layout profile name (default: default)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate the invoice PDF for a billing record")
    generate.add_argument("--input", required=True, help="Billing record JSON file")
    generate.add_argument("--output", help="Output directory (default: out/ or IPD_INVOICE_OUTPUT_DIR)")
    generate.add_argument("--letterhead", help="Letterhead image drawn beneath every page")
    generate.add_argument("--scale", type=int, help="Render scale in pixels per layout unit")
    generate.add_argument("--summary", action="store_true", help="Write a run summary JSON next to the PDF")
    generate.set_defaults(handler=_handle_generate)

    plan = subparsers.add_parser("plan", help="Print the page plan for a source of the given size")
    plan.add_argument("--width", type=int, required=True, help="Source width in pixels")
    plan.add_argument("--height", type=int, required=True, help="Source height in pixels")
    plan.set_defaults(handler=_handle_plan)

    inspect = subparsers.add_parser("inspect", help="Show page count and sizes of a PDF")
    inspect.add_argument("--pdf", required=True, help="PDF file to inspect")
    inspect.set_defaults(handler=_handle_inspect)

    export = subparsers.add_parser("export", help="Export billing summaries to Excel")
    export.add_argument("--input", required=True, help="Billing record JSON file or directory")
    export.add_argument("--output", required=True, help="Output .xlsx path")
    export.set_defaults(handler=_handle_export)

    profiles = subparsers.add_parser("profiles", help="List available layout profiles")
    profiles.set_defaults(handler=_handle_profiles)

    check = subparsers.add_parser("check-deps", help="Check that required libraries are installed")
    check.set_defaults(handler=_handle_check_deps)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        activate_profile(args.profile)
        exit_code = args.handler(args)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
