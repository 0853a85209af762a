"""Unit tests for writing paginated slices to PDF and reading them back."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import fitz
import pytest
from PIL import Image

from ipd_invoice.models.page_geometry import PageGeometry
from ipd_invoice.models.source_bitmap import SourceBitmap
from ipd_invoice.pipeline.invoice_renderer import render_invoice
from ipd_invoice.pipeline.page_writer import PageWriteError, write_pages
from ipd_invoice.pipeline.paginator import paginate
from ipd_invoice.pipeline.reader import PDFReadError, read_pdf


@pytest.fixture
def tall_source():
    """555 px wide so the scale is 1.0 on A4: 642 rows per page, 4 pages for 2000 rows."""
    return SourceBitmap.from_image(Image.new("RGBA", (555, 2000), (10, 20, 30, 255)))


@pytest.fixture
def letterhead_png(tmp_path):
    path = tmp_path / "letterhead.png"
    Image.new("RGB", (595, 842), (240, 248, 255)).save(path)
    return path


def test_one_pdf_page_per_slice(tall_source, tmp_path):
    result = paginate(tall_source, PageGeometry.a4())
    out = write_pages(tall_source, result, tmp_path / "out" / "invoice.pdf")

    assert out.exists()
    doc = read_pdf(out)
    assert result.page_count == 4
    assert doc.page_count == 4
    assert doc.has_uniform_page_size()
    assert doc.pages[0].size == pytest.approx((595, 842))


def test_letterhead_drawn_on_every_page(tall_source, letterhead_png, tmp_path):
    result = paginate(tall_source, PageGeometry.a4(), header_image=letterhead_png)
    plain = paginate(tall_source, PageGeometry.a4())

    with_header = read_pdf(write_pages(tall_source, result, tmp_path / "with.pdf"))
    without_header = read_pdf(write_pages(tall_source, plain, tmp_path / "without.pdf"))

    for headed, bare in zip(with_header.pages, without_header.pages):
        assert bare.image_count >= 1
        assert headed.image_count > bare.image_count


def test_letterhead_drawn_full_page_beneath_slice(tall_source, letterhead_png, tmp_path):
    result = paginate(tall_source, PageGeometry.a4(), header_image=letterhead_png)
    fake_fitz = MagicMock()
    fake_fitz.Rect.side_effect = lambda *args: args

    with patch("ipd_invoice.pipeline.page_writer.fitz", fake_fitz):
        write_pages(tall_source, result, tmp_path / "inv.pdf")

    page = fake_fitz.open.return_value.new_page.return_value
    rects = [c.args[0] for c in page.insert_image.call_args_list]
    assert len(rects) == 2 * result.page_count
    for i, page_slice in enumerate(result.slices):
        assert rects[2 * i] == (0, 0, 595, 842)
        assert rects[2 * i + 1] == page_slice.placement.as_rect()


def test_slice_covers_letterhead_inside_placement(tall_source, tmp_path):
    letterhead = Image.new("RGB", (595, 842), (255, 0, 0))
    result = paginate(tall_source, PageGeometry.a4())
    out = write_pages(tall_source, result, tmp_path / "inv.pdf", header_image=letterhead)

    with fitz.open(str(out)) as pdf:
        pix = pdf[0].get_pixmap()
        top_margin = pix.pixel(297, 40)
        content = pix.pixel(297, 400)

    assert top_margin[:3] == pytest.approx((255, 0, 0), abs=3)
    assert content[:3] == pytest.approx((10, 20, 30), abs=3)


def test_header_override_accepts_pillow_image(tall_source, tmp_path):
    result = paginate(tall_source, PageGeometry.a4())
    header = Image.new("RGB", (595, 842), (255, 255, 255))
    out = write_pages(tall_source, result, tmp_path / "inv.pdf", header_image=header)
    assert read_pdf(out).page_count == 4


def test_rendered_invoice_round_trip(sample_record, tmp_path):
    bitmap = render_invoice(sample_record, scale=1, bill_date=datetime(2024, 3, 3))
    result = paginate(bitmap, PageGeometry.a4())
    doc = read_pdf(write_pages(bitmap, result, tmp_path / "inv.pdf"))
    assert doc.page_count == result.page_count


def test_missing_letterhead_fails_before_writing(tall_source, tmp_path):
    result = paginate(tall_source, PageGeometry.a4(), header_image=tmp_path / "nope.png")
    out = tmp_path / "inv.pdf"
    with pytest.raises(FileNotFoundError, match="Letterhead"):
        write_pages(tall_source, result, out)
    assert not out.exists()


def test_source_without_pixels_rejected(tmp_path):
    source = SourceBitmap(width=555, height=100)
    result = paginate(source, PageGeometry.a4())
    with pytest.raises(ValueError, match="no pixel buffer"):
        write_pages(source, result, tmp_path / "inv.pdf")


def test_writer_failure_wrapped(tall_source, tmp_path):
    result = paginate(tall_source, PageGeometry.a4())
    fake_fitz = MagicMock()
    fake_fitz.open.return_value.save.side_effect = RuntimeError("disk full")

    with patch("ipd_invoice.pipeline.page_writer.fitz", fake_fitz):
        with pytest.raises(PageWriteError, match="disk full") as excinfo:
            write_pages(tall_source, result, tmp_path / "inv.pdf")

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    fake_fitz.open.return_value.close.assert_called_once()


def test_read_missing_pdf(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_pdf(tmp_path / "missing.pdf")


def test_read_corrupt_pdf(tmp_path):
    path = tmp_path / "corrupt.pdf"
    path.write_bytes(b"not a pdf at all")
    with pytest.raises(PDFReadError):
        read_pdf(path)
