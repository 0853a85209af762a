"""Unit tests for invoice totals and grouped charge lines."""

from datetime import datetime

import pytest

from ipd_invoice.models.billing_record import BillingRecord, ServiceItem
from ipd_invoice.pipeline.invoice_summary import (
    format_rupees,
    group_consultant_charges,
    group_hospital_services,
    invoice_filename,
    summarize,
)


def test_hospital_services_grouped_by_name(sample_record):
    groups = group_hospital_services(sample_record.services)

    assert [g.label for g in groups] == ["X-Ray", "Blood Test"]
    xray = groups[0]
    assert xray.quantity == 2
    assert xray.unit_amount == 500
    assert xray.total_amount == 1000
    assert xray.last_charged == datetime(2024, 3, 2, 10, 0)


def test_group_total_uses_first_unit_amount():
    services = [
        ServiceItem(service_name="Dressing", amount=200),
        ServiceItem(service_name="Dressing", amount=250),
    ]
    (group,) = group_hospital_services(services)
    assert group.quantity == 2
    assert group.total_amount == 400


def test_consultants_grouped_by_doctor(sample_record):
    groups = group_consultant_charges(sample_record.services)

    assert [g.label for g in groups] == ["Dr. Rao", "NoName"]
    assert groups[0].quantity == 2
    assert groups[0].total_amount == 1600
    assert groups[1].quantity == 1


def test_summary_totals(sample_record):
    summary = summarize(sample_record)

    assert summary.hospital_service_total == 1350
    assert summary.consultant_charge_total == 2200
    assert summary.discount == 300
    assert summary.total_bill == 3250
    assert summary.deposit == 5000
    assert summary.total_paid == 5000
    assert summary.due_amount == 0
    assert summary.refund_amount == 1750
    assert not summary.is_final
    assert summary.status_label == "Provisional"


def test_due_amount_when_deposit_short(sample_record_data):
    sample_record_data["amount"] = 1000
    record = BillingRecord.model_validate(sample_record_data)
    summary = summarize(record)
    assert summary.due_amount == 2250
    assert summary.refund_amount == 0


def test_summary_of_empty_record():
    summary = summarize(BillingRecord(patient_id="P1", ipd_id="I1", name="Ravi"))
    assert summary.total_bill == 0
    assert summary.hospital_services == []
    assert summary.consultant_charges == []
    assert summary.due_amount == 0


def test_final_status(discharged_record):
    summary = summarize(discharged_record)
    assert summary.is_final
    assert summary.status_label == "Final"


def test_invoice_filename(sample_record, discharged_record):
    assert invoice_filename(sample_record) == "Provisional_Invoice_Asha Verma_IPD-2024-0042.pdf"
    assert invoice_filename(discharged_record) == "Final_Invoice_Asha Verma_IPD-2024-0042.pdf"


def test_invoice_filename_strips_path_separators():
    record = BillingRecord(patient_id="P1", ipd_id="I/1", name="A/B")
    assert invoice_filename(record) == "Provisional_Invoice_A_B_I_1.pdf"


@pytest.mark.parametrize(
    "value, expected",
    [(12345, "Rs. 12,345"), (0, "Rs. 0"), (12.5, "Rs. 12.50"), (1234567.891, "Rs. 1,234,567.89")],
)
def test_format_rupees(value, expected):
    assert format_rupees(value) == expected
