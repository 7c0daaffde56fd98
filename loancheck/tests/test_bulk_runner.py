from __future__ import annotations

import json
from typing import Optional

from loancheck.bulk import runner
from loancheck.bulk.runner import run_all
from loancheck.core.errors import AuthExpired, RequestFailed, TokenFetchFailed
from loancheck.core.models import CsvRow, EligibilityCheck, EligibilityRequest, RowMeta


class FakeTokenSource:
    def __init__(self, token: Optional[str] = "jwt-abc", fail: bool = False) -> None:
        self.token = token
        self.fail = fail
        self.invalidated = 0
        self.requests = 0

    def get_token(self) -> Optional[str]:
        self.requests += 1
        if self.fail:
            raise TokenFetchFailed()
        return self.token

    def invalidate(self) -> None:
        self.invalidated += 1


class ScriptedCheck:
    """Returns a scripted result per purpose id, recording every call."""

    def __init__(self, script: Optional[dict] = None) -> None:
        self.script = script or {}
        self.calls: list[str] = []

    def __call__(self, token: str, request: EligibilityRequest) -> EligibilityCheck:
        self.calls.append(request.purpose_id)
        action = self.script.get(request.purpose_id)
        if isinstance(action, Exception):
            raise action
        if action == "transport":
            return EligibilityCheck(status="error", response={"message": "Network or server error"})
        return EligibilityCheck(
            status="success",
            response={"data": {"Status": "CE", "responsecode": "1", "responsedescription": "Eligible"}},
            http_status=200,
        )


def _rows(count: int) -> list[CsvRow]:
    return [
        CsvRow(
            id=i,
            payload=EligibilityRequest(purpose_id=f"PUR-{i}"),
            meta=RowMeta(first_name=f"First{i}"),
        )
        for i in range(1, count + 1)
    ]


def test_run_all_processes_rows_sequentially_in_input_order():
    check = ScriptedCheck()
    result = run_all(_rows(4), FakeTokenSource(), check=check)

    assert result.signal is None
    assert result.completed
    assert [o.row_id for o in result.outcomes] == [1, 2, 3, 4]
    assert all(o.status == "success" for o in result.outcomes)
    assert check.calls == ["PUR-1", "PUR-2", "PUR-3", "PUR-4"]
    assert result.outcomes[0].meta.first_name == "First1"
    assert result.outcomes[0].purpose_id == "PUR-1"


def test_run_all_records_transport_error_and_continues():
    check = ScriptedCheck({"PUR-3": "transport"})
    result = run_all(_rows(5), FakeTokenSource(), check=check)

    assert [o.status for o in result.outcomes] == ["success", "success", "error", "success", "success"]
    assert result.outcomes[2].response == {"message": "Network or server error"}
    assert len(check.calls) == 5


def test_run_all_records_request_failed_as_error_envelope_and_continues():
    check = ScriptedCheck(
        {
            "PUR-2": RequestFailed(500, "upstream exploded"),
            "PUR-4": RequestFailed(400, json.dumps({"errors": [{"status": "400", "detail": "bad income"}]})),
        }
    )
    result = run_all(_rows(5), FakeTokenSource(), check=check)

    assert [o.status for o in result.outcomes] == ["success", "error", "success", "error", "success"]
    assert result.outcomes[1].response["errors"][0]["status"] == "500"
    assert result.outcomes[1].response["errors"][0]["detail"] == "upstream exploded"
    assert result.outcomes[3].response == {"errors": [{"status": "400", "detail": "bad income"}]}


def test_run_all_stops_on_auth_expired_and_keeps_partial_outcomes():
    check = ScriptedCheck({"PUR-2": AuthExpired()})
    tokens = FakeTokenSource()

    result = run_all(_rows(5), tokens, check=check, keep_partial_on_auth_expiry=True)

    assert result.signal == "auth_expired"
    assert [o.row_id for o in result.outcomes] == [1]
    assert result.attempted == 2
    assert check.calls == ["PUR-1", "PUR-2"]
    assert tokens.invalidated == 1


def test_run_all_discards_partial_outcomes_when_configured():
    check = ScriptedCheck({"PUR-2": AuthExpired()})

    result = run_all(_rows(5), FakeTokenSource(), check=check, keep_partial_on_auth_expiry=False)

    assert result.signal == "auth_expired"
    assert result.outcomes == []
    assert check.calls == ["PUR-1", "PUR-2"]


def test_run_all_uses_config_default_for_partial_outcomes(monkeypatch):
    monkeypatch.setattr(runner.config.bulk, "keep_partial_on_auth_expiry", False)
    check = ScriptedCheck({"PUR-3": AuthExpired()})

    result = run_all(_rows(3), FakeTokenSource(), check=check)

    assert result.outcomes == []


def test_run_all_aborts_without_token():
    check = ScriptedCheck()

    missing = run_all(_rows(3), FakeTokenSource(token=None), check=check)
    failed = run_all(_rows(3), FakeTokenSource(fail=True), check=check)

    for result in (missing, failed):
        assert result.signal == "missing_token"
        assert result.outcomes == []
    assert check.calls == []


def test_run_all_is_not_cached_between_runs():
    check = ScriptedCheck()
    tokens = FakeTokenSource()
    rows = _rows(2)

    run_all(rows, tokens, check=check)
    run_all(rows, tokens, check=check)

    assert check.calls == ["PUR-1", "PUR-2", "PUR-1", "PUR-2"]
    assert tokens.requests == 2
