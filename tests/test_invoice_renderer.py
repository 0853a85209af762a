"""Unit tests for rendering the invoice body to a bitmap."""

from datetime import datetime

import pytest

from ipd_invoice.models.billing_record import BillingRecord, ServiceItem
from ipd_invoice.pipeline.invoice_renderer import render_invoice

BILL_DATE = datetime(2024, 3, 3, 10, 0)


def test_render_width_follows_scale(sample_record):
    bitmap = render_invoice(sample_record, scale=2, bill_date=BILL_DATE)
    assert bitmap.width == 595 * 2
    assert bitmap.height > 0
    assert bitmap.image.size == (bitmap.width, bitmap.height)


def test_render_is_transparent_rgba_with_content(sample_record):
    bitmap = render_invoice(sample_record, scale=1, bill_date=BILL_DATE)
    assert bitmap.image.mode == "RGBA"
    # Corner stays transparent; something is drawn inside
    assert bitmap.image.getpixel((0, 0))[3] == 0
    assert bitmap.image.getchannel("A").getbbox() is not None


def test_height_grows_with_charges(sample_record_data):
    short = BillingRecord.model_validate(sample_record_data)
    long_data = dict(sample_record_data)
    long_data["services"] = sample_record_data["services"] + [
        {"serviceName": f"Procedure {i}", "type": "service", "amount": 100 + i}
        for i in range(40)
    ]
    long = BillingRecord.model_validate(long_data)

    short_bitmap = render_invoice(short, scale=1, bill_date=BILL_DATE)
    long_bitmap = render_invoice(long, scale=1, bill_date=BILL_DATE)
    assert long_bitmap.height > short_bitmap.height


def test_render_is_deterministic_for_fixed_bill_date(sample_record):
    first = render_invoice(sample_record, scale=1, bill_date=BILL_DATE)
    second = render_invoice(sample_record, scale=1, bill_date=BILL_DATE)
    assert first.image.tobytes() == second.image.tobytes()


def test_render_empty_record():
    record = BillingRecord(patient_id="P1", ipd_id="I1", name="Ravi")
    bitmap = render_invoice(record, scale=1, bill_date=BILL_DATE)
    assert bitmap.width == 595
    assert bitmap.height > 0


def test_render_rejects_bad_scale(sample_record):
    with pytest.raises(ValueError, match="scale"):
        render_invoice(sample_record, scale=0)


def test_render_rejects_narrow_width(sample_record):
    with pytest.raises(ValueError, match="width_px"):
        render_invoice(sample_record, width_px=20)


def test_missing_font_file_propagates(sample_record, tmp_path):
    with pytest.raises(OSError):
        render_invoice(sample_record, scale=1, font_path=str(tmp_path / "missing.ttf"))
