# loancheck/exporters/excel_builder.py

from __future__ import annotations

from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from loancheck.core.models import DistributionEntry, TableRow
from loancheck.exporters.csv_builder import EXPORT_HEADERS, export_cells

EXPORT_XLSX_FILENAME = "veritec_results.xlsx"
DISTRIBUTION_HEADERS = ["Response Code", "Description", "Count"]


def _autosize_columns(ws) -> None:
    for col in ws.columns:
        max_length = 0
        column = col[0].column_letter
        for cell in col:
            if cell.value is not None and len(str(cell.value)) > max_length:
                max_length = len(str(cell.value))
        ws.column_dimensions[column].width = min(max_length + 2, 60)


def _apply_table_header(ws, headers: list[str]) -> Border:
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_alignment = Alignment(horizontal="center", vertical="center")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )
    ws.append(headers)
    for col, _ in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment
        cell.border = thin_border
    return thin_border


def build_xlsx_from_results(rows: Iterable[TableRow], distribution: Iterable[DistributionEntry]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Results"
    thin_border = _apply_table_header(ws, EXPORT_HEADERS)
    for row in rows:
        ws.append(export_cells(row))
        for cell in ws[ws.max_row]:
            cell.border = thin_border
    ws.freeze_panes = "A2"
    _autosize_columns(ws)

    dist_ws = wb.create_sheet("Distribution")
    thin_border = _apply_table_header(dist_ws, DISTRIBUTION_HEADERS)
    for entry in distribution:
        dist_ws.append([entry.response_code, entry.description, entry.count])
        for cell in dist_ws[dist_ws.max_row]:
            cell.border = thin_border
    _autosize_columns(dist_ws)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
