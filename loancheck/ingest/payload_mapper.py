from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping, Optional

from loancheck.core.errors import CsvParseError
from loancheck.core.models import CsvRow, EligibilityRequest, RowMeta

# Source keys per request field, CSV header first, camelCase alias second.
PAYLOAD_SOURCE_KEYS: dict[str, tuple[str, ...]] = {
    "purposeId": ("p_purpose_id", "purposeId"),
    "grossIncomePerCheck": ("p_gross_pay_per_check_one", "grossIncomePerCheck"),
    "grossMonthlyIncome": ("p_gross_monthly_income_one", "grossMonthlyIncome"),
    "payFrequencyTypeCode": ("p_pay_freq_t", "payFrequencyTypeCode"),
    "csoFeeAmount": ("csoFeeAmount",),
    "csoId": ("csoId",),
    "loanAmount": ("p_requestedLoanAmount", "loanAmount"),
    "loanTypeCode": ("p_product_type", "loanTypeCode"),
}

PAYLOAD_DEFAULTS: dict[str, str] = {
    "purposeId": "",
    "grossIncomePerCheck": "0.00",
    "grossMonthlyIncome": "0.00",
    "payFrequencyTypeCode": "BI",
    "csoFeeAmount": "0",
    "csoId": "1",
    "loanAmount": "1000",
    "loanTypeCode": "ILP",
}

META_SOURCE_KEYS: dict[str, str] = {
    "firstName": "p_Fname",
    "lastName": "p_LastName",
    "phone": "p_PhoneNumber",
    "email": "p_emailID",
}

TRIMMED_FIELDS = {"purposeId"}


def _first_present(record: Mapping[str, Any], keys: Iterable[str], *, trim: bool = False) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value)
        if trim:
            text = text.strip()
        if text:
            return text
    return None


def map_row(record: Mapping[str, Any]) -> EligibilityRequest:
    values: dict[str, Any] = {}
    for field, keys in PAYLOAD_SOURCE_KEYS.items():
        value = _first_present(record, keys, trim=field in TRIMMED_FIELDS)
        values[field] = value if value is not None else PAYLOAD_DEFAULTS[field]
    # Not sourced from the upload.
    values["isMilitary"] = False
    return EligibilityRequest.model_validate(values)


def map_meta(record: Mapping[str, Any]) -> RowMeta:
    return RowMeta.model_validate(
        {field: str(record.get(key) or "") for field, key in META_SOURCE_KEYS.items()}
    )


def _decode(content: bytes | str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CsvParseError() from exc


def parse_csv_records(content: bytes | str) -> list[dict[str, str]]:
    text = _decode(content)
    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        header = reader.fieldnames
        if not header or not any((name or "").strip() for name in header):
            raise CsvParseError()
        records: list[dict[str, str]] = []
        for raw in reader:
            # Empty lines never reach here; rows of blank cells still count.
            records.append({str(k): v for k, v in raw.items() if k is not None and v is not None})
    except csv.Error as exc:
        raise CsvParseError() from exc
    return records


def parse_csv_rows(content: bytes | str) -> list[CsvRow]:
    records = parse_csv_records(content)
    return [
        CsvRow(id=idx, payload=map_row(record), meta=map_meta(record))
        for idx, record in enumerate(records, start=1)
    ]
