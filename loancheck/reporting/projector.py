from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loancheck.core.models import DistributionEntry, EligibilityOutcome, TableRow
from loancheck.core.responses import ErrorEnvelope, SuccessResponse, decode_response

# errors[0].status values the remote service uses for both ineligible and bad customer data.
DATA_ERROR_STATUSES = {"200", "400"}
DATA_ERROR_CODE = "DATA_ERROR"
UNKNOWN_CODE = "UNKNOWN"
GENERIC_DESCRIPTION = "Unable to determine eligibility"

ERROR_CODE_MESSAGES: Dict[str, str] = {
    DATA_ERROR_CODE: "Customer not eligible or customer data invalid",
    "401": "Authorization failed",
    "403": "Access denied by eligibility service",
    "404": "Customer record not found",
    "500": "Eligibility service error",
    "502": "Eligibility service unavailable",
    "503": "Eligibility service unavailable",
}


def _clean(value: Optional[str]) -> str:
    return str(value or "").strip()


def classify_outcome(outcome: EligibilityOutcome) -> tuple[str, str]:
    """Returns the (response code, description) an outcome is reported under."""
    decoded = decode_response(outcome.response)

    if isinstance(decoded, SuccessResponse):
        if decoded.complete:
            code = _clean(decoded.code) or UNKNOWN_CODE
            return code, _clean(decoded.description) or GENERIC_DESCRIPTION
        code = _clean(decoded.status) or UNKNOWN_CODE
        return code, _describe(code, _clean(decoded.description))

    if isinstance(decoded, ErrorEnvelope):
        status = _clean(decoded.status)
        code = DATA_ERROR_CODE if status in DATA_ERROR_STATUSES else (status or UNKNOWN_CODE)
        return code, _describe(code, _clean(decoded.detail), _clean(decoded.title))

    return UNKNOWN_CODE, _describe(UNKNOWN_CODE, _clean(decoded.message))


def _describe(code: str, *fallbacks: str) -> str:
    known = ERROR_CODE_MESSAGES.get(code)
    if known:
        return known
    for text in fallbacks:
        if text:
            return text
    return GENERIC_DESCRIPTION


def to_distribution(outcomes: Iterable[EligibilityOutcome]) -> List[DistributionEntry]:
    buckets: Dict[str, DistributionEntry] = {}
    for outcome in outcomes:
        code, description = classify_outcome(outcome)
        entry = buckets.get(code)
        if entry is None:
            buckets[code] = DistributionEntry(response_code=code, description=description, count=1)
        else:
            entry.count += 1
    return list(buckets.values())


def to_table_rows(outcomes: Iterable[EligibilityOutcome]) -> List[TableRow]:
    rows: List[TableRow] = []
    for outcome in outcomes:
        code, description = classify_outcome(outcome)
        rows.append(
            TableRow(
                row_id=outcome.row_id,
                first_name=outcome.meta.first_name,
                last_name=outcome.meta.last_name,
                phone=outcome.meta.phone,
                email=outcome.meta.email,
                purpose_id=outcome.purpose_id,
                status=outcome.status,
                eligibility_code=code,
                eligibility_description=description,
            )
        )
    return rows
