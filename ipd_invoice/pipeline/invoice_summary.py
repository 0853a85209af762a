"""Invoice totals and grouped charge lines for a billing record."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.billing_record import (
    DOCTOR_VISIT_TYPE,
    SERVICE_TYPE,
    BillingRecord,
    ServiceItem,
)

UNNAMED_DOCTOR = "NoName"


@dataclass
class ChargeGroup:
    """Repeated charges of one service (or one consultant) folded into a line.

    ``unit_amount`` is the first charge's amount; ``total_amount`` is
    ``unit_amount * quantity`` as printed on the invoice.
    """

    label: str
    quantity: int
    unit_amount: float
    total_amount: float
    last_charged: Optional[datetime] = None


@dataclass
class InvoiceSummary:
    """Amounts shown on an invoice.

    Attributes:
        hospital_services: Grouped hospital service lines
        consultant_charges: Grouped consultant visit lines
        hospital_service_total: Sum of service item amounts
        consultant_charge_total: Sum of consultant visit amounts
        discount: Discount in rupees
        total_bill: Services + consultants - discount
        deposit: Deposit collected (the record's amount)
        total_paid: Sum of recorded payments
        due_amount: What the patient still owes (never negative)
        refund_amount: Deposit in excess of the bill (never negative)
        is_final: True once the patient is discharged
    """

    hospital_services: List[ChargeGroup] = field(default_factory=list)
    consultant_charges: List[ChargeGroup] = field(default_factory=list)
    hospital_service_total: float = 0.0
    consultant_charge_total: float = 0.0
    discount: float = 0.0
    total_bill: float = 0.0
    deposit: float = 0.0
    total_paid: float = 0.0
    due_amount: float = 0.0
    refund_amount: float = 0.0
    is_final: bool = False

    @property
    def status_label(self) -> str:
        return "Final" if self.is_final else "Provisional"


def _group(items: Iterable[ServiceItem], key_fn) -> List[ChargeGroup]:
    groups: Dict[str, ChargeGroup] = {}
    for item in items:
        key = key_fn(item)
        group = groups.get(key)
        if group is None:
            groups[key] = ChargeGroup(
                label=key,
                quantity=1,
                unit_amount=item.amount,
                total_amount=item.amount,
                last_charged=item.created_at,
            )
            continue
        group.quantity += 1
        group.total_amount = group.unit_amount * group.quantity
        if item.created_at is not None and (
            group.last_charged is None or item.created_at > group.last_charged
        ):
            group.last_charged = item.created_at
    return list(groups.values())


def group_hospital_services(services: Iterable[ServiceItem]) -> List[ChargeGroup]:
    """Group hospital service items by service name, in first-seen order."""
    return _group(
        (s for s in services if s.type == SERVICE_TYPE),
        lambda s: s.service_name,
    )


def group_consultant_charges(services: Iterable[ServiceItem]) -> List[ChargeGroup]:
    """Group consultant visits by doctor name, in first-seen order."""
    return _group(
        (s for s in services if s.type == DOCTOR_VISIT_TYPE),
        lambda s: s.doctor_name or UNNAMED_DOCTOR,
    )


def summarize(record: BillingRecord) -> InvoiceSummary:
    """Compute grouped lines and totals for a billing record."""
    hospital_total = sum(s.amount for s in record.services if s.type == SERVICE_TYPE)
    consultant_total = sum(
        s.amount for s in record.services if s.type == DOCTOR_VISIT_TYPE
    )
    discount = record.discount or 0.0
    total_bill = hospital_total + consultant_total - discount

    return InvoiceSummary(
        hospital_services=group_hospital_services(record.services),
        consultant_charges=group_consultant_charges(record.services),
        hospital_service_total=hospital_total,
        consultant_charge_total=consultant_total,
        discount=discount,
        total_bill=total_bill,
        deposit=record.amount,
        total_paid=sum(p.amount for p in record.payments),
        due_amount=max(total_bill - record.amount, 0.0),
        refund_amount=max(record.amount - total_bill, 0.0),
        is_final=record.is_discharged,
    )


def invoice_filename(record: BillingRecord) -> str:
    """File name for the invoice PDF (Final once discharged, else Provisional)."""
    prefix = "Final_Invoice" if record.is_discharged else "Provisional_Invoice"
    name = re.sub(r"[\\/:*?\"<>|]+", "_", record.name.strip()) or "patient"
    ipd_id = re.sub(r"[\\/:*?\"<>|]+", "_", record.ipd_id)
    return f"{prefix}_{name}_{ipd_id}.pdf"


def format_rupees(value: float) -> str:
    """Format an amount like ``Rs. 12,345`` (two decimals when not whole)."""
    if float(value).is_integer():
        return f"Rs. {value:,.0f}"
    return f"Rs. {value:,.2f}"
