"""Shared fixtures: billing records in the store's JSON shape."""

import pytest

from ipd_invoice.models.billing_record import parse_billing_record


@pytest.fixture
def sample_record_data():
    """An admitted (not yet discharged) patient with services, visits and payments."""
    return {
        "patientId": "P-1001",
        "ipdId": "IPD-2024-0042",
        "name": "Asha Verma",
        "mobileNumber": "9876543210",
        "amount": 5000,
        "discount": 300,
        "roomType": "General Ward",
        "bed": "B-12",
        "createdAt": "2024-03-01T09:30:00",
        "dischargeDate": "",
        "services": [
            {"serviceName": "X-Ray", "type": "service", "amount": 500, "createdAt": "2024-03-01T10:00:00"},
            {"serviceName": "Blood Test", "type": "service", "amount": 350, "createdAt": "2024-03-01T11:00:00"},
            {"serviceName": "X-Ray", "type": "service", "amount": 500, "createdAt": "2024-03-02T10:00:00"},
            {"serviceName": "Consultation", "doctorName": "Dr. Rao", "type": "doctorvisit", "amount": 800, "createdAt": "2024-03-01T12:00:00"},
            {"serviceName": "Consultation", "doctorName": "Dr. Rao", "type": "doctorvisit", "amount": 800, "createdAt": "2024-03-02T12:00:00"},
            {"serviceName": "Consultation", "type": "doctorvisit", "amount": 600, "createdAt": "2024-03-02T15:00:00"},
        ],
        "payments": {
            "-NpA1": {"amount": 3000, "paymentType": "cash", "date": "2024-03-01T09:45:00"},
            "-NpA2": {"amount": 2000, "paymentType": "online", "date": "2024-03-02T09:00:00"},
        },
    }


@pytest.fixture
def sample_record(sample_record_data):
    return parse_billing_record(sample_record_data)


@pytest.fixture
def discharged_record(sample_record_data):
    data = dict(sample_record_data)
    data["dischargeDate"] = "2024-03-05T16:00:00"
    return parse_billing_record(data)
