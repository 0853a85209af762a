"""Excel export of billing summaries, one row per admission."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import pandas as pd

from ..models.billing_record import BillingRecord
from ..pipeline.invoice_summary import summarize

logger = logging.getLogger(__name__)

COLUMNS = [
    "IPD ID",
    "Patient",
    "Mobile",
    "Registration",
    "Discharge",
    "Hospital Services",
    "Consultant Charges",
    "Discount",
    "Total Bill",
    "Deposit",
    "Due",
    "Status",
]


def _date_cell(value) -> str:
    # Excel rejects tz-aware datetimes; store a plain string
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else ""


def billing_summary_rows(records: Iterable[BillingRecord]) -> List[Dict[str, Any]]:
    """Build one summary row per billing record."""
    rows = []
    for record in records:
        summary = summarize(record)
        rows.append({
            "IPD ID": record.ipd_id,
            "Patient": record.name,
            "Mobile": record.mobile_number,
            "Registration": _date_cell(record.created_at),
            "Discharge": _date_cell(record.discharge_date),
            "Hospital Services": summary.hospital_service_total,
            "Consultant Charges": summary.consultant_charge_total,
            "Discount": summary.discount,
            "Total Bill": summary.total_bill,
            "Deposit": summary.deposit,
            "Due": summary.due_amount,
            "Status": summary.status_label,
        })
    return rows


def export_billing_summary(
    records: Iterable[BillingRecord],
    output_path: Union[str, Path],
) -> str:
    """Export billing summaries to an Excel file.

    Args:
        records: Billing records to summarize
        output_path: Path to output .xlsx file

    Returns:
        Path to created Excel file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(billing_summary_rows(records), columns=COLUMNS)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Billing")
        worksheet = writer.sheets["Billing"]
        for column_cells in worksheet.columns:
            width = max(len(str(cell.value or "")) for cell in column_cells)
            worksheet.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 40)

    logger.info(f"Exported {len(df)} billing record(s) to {output_path}")
    return str(output_path)
