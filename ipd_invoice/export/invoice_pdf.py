"""Generate an invoice PDF for a billing record.

Stages run strictly in sequence: summarize, render the body into one tall
bitmap, paginate it, write the pages, then deliver the file to the output
directory. Pagination only starts once the bitmap exists.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..config import get_default_output_dir, get_font_path, get_letterhead_path, get_render_scale
from ..config.settings import DEFAULT_RENDER_SCALE
from ..config.profile_loader import LayoutProfile
from ..config.profile_manager import get_profile
from ..models.billing_record import BillingRecord
from ..models.page_geometry import PageGeometry
from ..models.page_slice import HeaderImage, PaginationResult
from ..pipeline.invoice_renderer import DEFAULT_WIDTH_PX, render_invoice
from ..pipeline.invoice_summary import InvoiceSummary, invoice_filename, summarize
from ..pipeline.page_writer import write_pages
from ..pipeline.paginator import paginate
from ..run_summary import RunSummary

logger = logging.getLogger(__name__)


class InvoiceGenerationError(Exception):
    """Raised when invoice generation fails at any stage."""
    pass


@dataclass
class InvoiceRunResult:
    """Outcome of generating one invoice PDF."""
    pdf_path: Path
    page_count: int
    summary: InvoiceSummary
    pagination: PaginationResult
    durations: Dict[str, float] = field(default_factory=dict)
    run_summary: Optional[RunSummary] = None


def deliver_local(pdf_path: Path, output_dir: Path, filename: str) -> Path:
    """Move the written PDF to its final name in output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / filename
    if pdf_path != target:
        pdf_path.replace(target)
    return target


def _resolve_letterhead(
    letterhead: Optional[HeaderImage], profile: LayoutProfile
) -> Optional[HeaderImage]:
    if letterhead is not None:
        return letterhead
    env_letterhead = get_letterhead_path()
    if env_letterhead is not None:
        return env_letterhead
    return profile.letterhead_path()


def generate_invoice_pdf(
    record: BillingRecord,
    output_dir: Optional[Union[str, Path]] = None,
    *,
    geometry: Optional[PageGeometry] = None,
    letterhead: Optional[HeaderImage] = None,
    scale: Optional[int] = None,
    profile: Optional[LayoutProfile] = None,
    save_summary: bool = False,
    deliver: Callable[[Path, Path, str], Path] = deliver_local,
) -> InvoiceRunResult:
    """Render, paginate and write the invoice PDF for a billing record.

    Args:
        record: Validated billing record
        output_dir: Output directory (default from config)
        geometry: Page geometry override (default from profile)
        letterhead: Letterhead path or image (default from config, then profile)
        scale: Render scale override (default from config, then profile)
        profile: Layout profile (default: active profile)
        save_summary: Also write a run summary JSON next to the PDF
        deliver: Delivery step receiving (written_pdf, output_dir, filename)

    Returns:
        InvoiceRunResult with the delivered path and page count

    Raises:
        InvoiceGenerationError: If any stage fails (original error chained)
    """
    profile = profile or get_profile()
    output_path = Path(output_dir) if output_dir else get_default_output_dir()
    geometry = geometry or profile.geometry()
    scale = scale or get_render_scale() or profile.render_scale or DEFAULT_RENDER_SCALE
    width_px = profile.render_width or DEFAULT_WIDTH_PX
    header = _resolve_letterhead(letterhead, profile)

    run_summary = RunSummary.create(record.ipd_id, str(output_path))
    run_summary.profile_name = profile.name
    run_summary.letterhead = str(header) if isinstance(header, (str, Path)) else None
    durations: Dict[str, float] = {}
    stage = "summarize"
    written: Optional[Path] = None

    try:
        start = time.time()
        summary = summarize(record)
        durations["summarize"] = time.time() - start

        stage = "render"
        logger.info(f"Rendering invoice {record.ipd_id} at scale {scale}")
        start = time.time()
        source = render_invoice(
            record, summary, width_px=width_px, scale=scale, font_path=get_font_path()
        )
        durations["render"] = time.time() - start

        stage = "paginate"
        start = time.time()
        pagination = paginate(source, geometry, header_image=header)
        durations["paginate"] = time.time() - start
        logger.info(f"Invoice {record.ipd_id}: {pagination.page_count} page(s)")

        stage = "write"
        filename = invoice_filename(record)
        start = time.time()
        written = write_pages(source, pagination, output_path / f".{filename}.partial")
        durations["write"] = time.time() - start

        stage = "deliver"
        start = time.time()
        pdf_path = deliver(written, output_path, filename)
        durations["deliver"] = time.time() - start
    except Exception as e:
        logger.error(f"Invoice {record.ipd_id} failed at {stage}: {e}")
        if written is not None and written.exists():
            written.unlink()
        run_summary.add_error(stage, e)
        run_summary.complete("FAILED")
        if save_summary:
            output_path.mkdir(parents=True, exist_ok=True)
            run_summary.save(output_path / f"run_summary_{record.ipd_id}.json")
        raise InvoiceGenerationError(f"Invoice generation failed at {stage}: {str(e)}") from e

    logger.info(f"Invoice saved to {pdf_path}")

    run_summary.pdf_path = str(pdf_path)
    run_summary.page_count = pagination.page_count
    run_summary.slices = [s.to_dict() for s in pagination.slices]
    run_summary.durations = durations
    run_summary.totals = {
        "hospital_service_total": summary.hospital_service_total,
        "consultant_charge_total": summary.consultant_charge_total,
        "discount": summary.discount,
        "total_bill": summary.total_bill,
        "deposit": summary.deposit,
        "due_amount": summary.due_amount,
    }
    run_summary.complete()
    if save_summary:
        run_summary.save(pdf_path.with_suffix(".json"))

    return InvoiceRunResult(
        pdf_path=pdf_path,
        page_count=pagination.page_count,
        summary=summary,
        pagination=pagination,
        durations=durations,
        run_summary=run_summary,
    )
