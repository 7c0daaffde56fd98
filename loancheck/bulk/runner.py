from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Protocol, Sequence

from loancheck.clients.eligibility import check_one
from loancheck.core.config import config
from loancheck.core.errors import AuthExpired, RequestFailed, TokenFetchFailed
from loancheck.core.models import CsvRow, EligibilityCheck, EligibilityOutcome, EligibilityRequest

logger = logging.getLogger(__name__)

RunSignal = Literal["missing_token", "auth_expired"]
CheckFn = Callable[[str, EligibilityRequest], EligibilityCheck]


class TokenSource(Protocol):
    def get_token(self) -> Optional[str]: ...

    def invalidate(self) -> None: ...


@dataclass(frozen=True)
class BulkRunResult:
    outcomes: List[EligibilityOutcome] = field(default_factory=list)
    signal: Optional[RunSignal] = None
    attempted: int = 0

    @property
    def completed(self) -> bool:
        return self.signal is None


def _outcome(row: CsvRow, check: EligibilityCheck) -> EligibilityOutcome:
    return EligibilityOutcome(
        row_id=row.id,
        purpose_id=row.payload.purpose_id,
        meta=row.meta,
        status=check.status,
        response=check.response,
    )


def _request_failed_outcome(row: CsvRow, exc: RequestFailed) -> EligibilityOutcome:
    # Non-2xx bodies usually already carry the errors envelope; synthesize one otherwise.
    try:
        body = json.loads(exc.body_text)
    except ValueError:
        body = None
    if not (isinstance(body, dict) and isinstance(body.get("errors"), list) and body["errors"]):
        body = {
            "errors": [
                {"status": str(exc.status_code), "title": "Eligibility check failed", "detail": exc.body_text}
            ]
        }
    return EligibilityOutcome(
        row_id=row.id,
        purpose_id=row.payload.purpose_id,
        meta=row.meta,
        status="error",
        response=body,
    )


def run_all(
    rows: Sequence[CsvRow],
    token_source: TokenSource,
    *,
    check: CheckFn = check_one,
    keep_partial_on_auth_expiry: Optional[bool] = None,
) -> BulkRunResult:
    """Submits every row one at a time, in input order.

    Per-row failures become ``error`` outcomes and the run moves on. A 401 stops
    the run at that row, invalidates the token and reports ``auth_expired``;
    whether the outcomes gathered before it are returned follows
    ``keep_partial_on_auth_expiry`` (config default when None).
    """
    if keep_partial_on_auth_expiry is None:
        keep_partial_on_auth_expiry = config.bulk.keep_partial_on_auth_expiry

    try:
        token = token_source.get_token()
    except TokenFetchFailed:
        token = None
    if not token:
        logger.warning("Bulk run aborted before start: no valid token (rows=%s)", len(rows))
        return BulkRunResult(signal="missing_token")

    outcomes: List[EligibilityOutcome] = []
    attempted = 0
    for row in rows:
        attempted += 1
        try:
            result = check(token, row.payload)
        except AuthExpired:
            token_source.invalidate()
            logger.warning(
                "Bulk run stopped on expired token (row_id=%s attempted=%s total=%s)",
                row.id,
                attempted,
                len(rows),
            )
            kept = outcomes if keep_partial_on_auth_expiry else []
            return BulkRunResult(outcomes=kept, signal="auth_expired", attempted=attempted)
        except RequestFailed as exc:
            outcomes.append(_request_failed_outcome(row, exc))
            continue
        outcomes.append(_outcome(row, result))

    logger.info("Bulk run finished (rows=%s outcomes=%s)", len(rows), len(outcomes))
    return BulkRunResult(outcomes=outcomes, signal=None, attempted=attempted)
