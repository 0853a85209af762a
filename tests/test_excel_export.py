"""Unit tests for the billing summary Excel export."""

import openpyxl

from ipd_invoice.export.excel_export import COLUMNS, billing_summary_rows, export_billing_summary


def test_summary_rows(sample_record, discharged_record):
    rows = billing_summary_rows([sample_record, discharged_record])

    assert len(rows) == 2
    assert rows[0]["Total Bill"] == 3250
    assert rows[0]["Status"] == "Provisional"
    assert rows[0]["Discharge"] == ""
    assert rows[1]["Status"] == "Final"
    assert rows[1]["Discharge"] == "2024-03-05 16:00"


def test_export_writes_sheet(sample_record, discharged_record, tmp_path):
    output = tmp_path / "reports" / "billing.xlsx"
    path = export_billing_summary([sample_record, discharged_record], output)

    assert path == str(output)
    workbook = openpyxl.load_workbook(output)
    sheet = workbook["Billing"]
    header = [cell.value for cell in sheet[1]]
    assert header == COLUMNS
    assert sheet.max_row == 3
    values = {h: sheet.cell(row=2, column=i + 1).value for i, h in enumerate(header)}
    assert values["IPD ID"] == "IPD-2024-0042"
    assert values["Hospital Services"] == 1350
    assert values["Due"] == 0


def test_export_empty(tmp_path):
    output = tmp_path / "empty.xlsx"
    export_billing_summary([], output)
    sheet = openpyxl.load_workbook(output)["Billing"]
    assert [cell.value for cell in sheet[1]] == COLUMNS
    assert sheet.max_row == 1
