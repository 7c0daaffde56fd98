from __future__ import annotations

from typing import Iterable

from loancheck.core.models import TableRow

EXPORT_FILENAME = "veritec_results.csv"

EXPORT_HEADERS = [
    "First Name",
    "Last Name",
    "Phone",
    "Email",
    "Purpose ID",
    "Eligibility Code",
    "Eligibility Description",
]


def csv_escape(value: str) -> str:
    if any(ch in value for ch in [",", "\"", "\n", "\r"]):
        return '"' + value.replace('"', '""') + '"'
    return value


def export_cells(row: TableRow) -> list[str]:
    return [
        row.first_name,
        row.last_name,
        row.phone,
        row.email,
        row.purpose_id,
        row.eligibility_code,
        row.eligibility_description,
    ]


def csv_text_from_table_rows(rows: Iterable[TableRow]) -> str:
    lines = [",".join(csv_escape(h) for h in EXPORT_HEADERS)]
    for row in rows:
        lines.append(",".join(csv_escape(str(cell or "")) for cell in export_cells(row)))
    return "\r\n".join(lines) + "\r\n"
