# loancheck/tests/test_integration.py

import csv
import io
import json

import httpx
import pytest
from fastapi.testclient import TestClient

import loancheck.api.app as api_app_module
from loancheck.api.app import app
from loancheck.clients import auth, eligibility
from loancheck.clients.auth import TokenProvider
from loancheck.core.stores import InMemoryKeyValueStore
from loancheck.core.token_cache import TokenCache
from loancheck.core.workspace import Workspace
from loancheck.exporters.csv_builder import EXPORT_HEADERS

client = TestClient(app)

CSV_CONTENT = (
    "p_purpose_id,p_Fname,p_LastName,p_PhoneNumber,p_emailID,p_requestedLoanAmount\n"
    "PUR-1,Ada,Lovelace,555-0100,ada@example.com,800\n"
    "PUR-2,Alan,Turing,555-0101,alan@example.com,\n"
    "PUR-3,Grace,Hopper,555-0102,grace@example.com,1200\n"
)


class RemoteStub:
    """Routes fake httpx.post calls to scripted token and eligibility responses."""

    def __init__(self) -> None:
        self.token_calls = 0
        self.eligibility_calls: list[dict] = []
        self.token_body: dict = {"data": {"jwtToken": "jwt-new", "expiresIn": 3600}}
        self.token_status = 200
        self.eligibility_script: dict = {}

    def post(self, url, json, headers, timeout):
        request = httpx.Request("POST", url)
        if url == api_app_module.config.remote.auth_url:
            self.token_calls += 1
            return httpx.Response(self.token_status, json=self.token_body, request=request)

        self.eligibility_calls.append({"json": json, "headers": headers})
        action = self.eligibility_script.get(json.get("purposeId"))
        if action == "network":
            raise httpx.ConnectError("network down", request=request)
        if isinstance(action, tuple):
            status_code, body = action
            return httpx.Response(status_code, json=body, request=request)
        return httpx.Response(
            200,
            json={"data": {"Status": "CE", "responsecode": "1", "responsedescription": "Eligible"}},
            request=request,
        )


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    stub = RemoteStub()
    monkeypatch.setattr(auth.httpx, "post", stub.post)
    monkeypatch.setattr(eligibility.httpx, "post", stub.post)
    monkeypatch.setattr(api_app_module, "TOKEN_PROVIDER", TokenProvider(TokenCache(InMemoryKeyValueStore())))
    monkeypatch.setattr(api_app_module, "WORKSPACE", Workspace())
    monkeypatch.delenv("LOANCHECK_API_KEY", raising=False)
    monkeypatch.delenv("LOANCHECK_REQUIRE_AUTH_FOR_READS", raising=False)
    return stub


def _upload(content: str = CSV_CONTENT):
    return client.post("/csv", files={"file": ("customers.csv", content.encode("utf-8"), "text/csv")})


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"]
    assert body["diagnostics"]["token_store"]["mode"] in {"inmem", "sqlite", "none"}
    assert isinstance(body["diagnostics"]["auth"]["api_key_configured"], bool)


def test_console_page_is_served():
    response = client.get("/")
    assert response.status_code == 200
    assert "LoanCheck Console" in response.text
    assert "Submit All Rows" in response.text


def test_token_endpoint_generates_then_reuses_cached_token(fresh_state):
    first = client.post("/token")
    second = client.post("/token")

    assert first.status_code == 200
    assert first.json() == {"status": "generated", "message": "New token generated successfully."}
    assert second.json() == {"status": "cached", "message": "Using cached token."}
    assert fresh_state.token_calls == 1


def test_token_endpoint_reports_fetch_failure(fresh_state):
    fresh_state.token_status = 500
    response = client.post("/token")
    assert response.status_code == 502
    assert response.json()["detail"] == "Token fetch failed"


def test_csv_upload_lists_rows_and_payloads():
    response = _upload()
    assert response.status_code == 200
    assert response.json()["row_count"] == 3

    rows = client.get("/rows").json()
    assert rows["row_count"] == 3
    assert [row["id"] for row in rows["rows"]] == [1, 2, 3]
    assert rows["rows"][1]["payload"]["loanAmount"] == "1000"
    assert rows["rows"][0]["meta"]["firstName"] == "Ada"

    payload = client.get("/rows/1/payload").json()
    assert payload["payload"]["purposeId"] == "PUR-1"
    assert json.loads(payload["payload_text"])["loanAmount"] == "800"

    assert client.get("/rows/99/payload").status_code == 404


def test_csv_upload_rejects_malformed_file_and_keeps_previous_rows():
    _upload()
    response = client.post("/csv", files={"file": ("broken.csv", b"\xff\xfe\x00", "text/csv")})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid CSV file."
    assert client.get("/rows").json()["row_count"] == 3


def test_single_check_requires_token():
    response = client.post("/check", json={"payload": "{}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "No valid token. Please click Get Token."


def test_single_check_flow_and_error_mapping(fresh_state):
    client.post("/token")

    ok = client.post("/check", json={"payload": json.dumps({"purposeId": "PUR-1"})})
    assert ok.status_code == 200
    assert ok.json()["status"] == "success"
    assert fresh_state.eligibility_calls[-1]["headers"]["Authorization"] == "Bearer jwt-new"

    bad_json = client.post("/check", json={"payload": "{oops"})
    assert bad_json.status_code == 400
    assert "Invalid JSON payload" in bad_json.json()["detail"]

    fresh_state.eligibility_script["PUR-500"] = (500, {"errors": [{"status": "500"}]})
    failed = client.post("/check", json={"payload": json.dumps({"purposeId": "PUR-500"})})
    assert failed.status_code == 502
    assert failed.json()["detail"].startswith("Eligibility check failed: 500")

    fresh_state.eligibility_script["PUR-NET"] = "network"
    network = client.post("/check", json={"payload": json.dumps({"purposeId": "PUR-NET"})})
    assert network.status_code == 502
    assert network.json()["detail"] == "Eligibility check failed (network or parse error)"

    fresh_state.eligibility_script["PUR-401"] = (401, {"message": "expired"})
    expired = client.post("/check", json={"payload": json.dumps({"purposeId": "PUR-401"})})
    assert expired.status_code == 401
    assert expired.json()["detail"] == "Token expired. Please click 'Get Token' again."

    again = client.post("/check", json={"payload": json.dumps({"purposeId": "PUR-1"})})
    assert again.status_code == 401


def test_bulk_run_results_distribution_and_export(fresh_state):
    _upload()
    fresh_state.eligibility_script["PUR-2"] = (200, {"errors": [{"status": "400", "detail": "bad income"}]})

    run = client.post("/bulk")
    assert run.status_code == 200
    assert run.json() == {
        "status": "done",
        "message": None,
        "row_count": 3,
        "attempted": 3,
        "outcome_count": 3,
    }
    assert fresh_state.token_calls == 1

    results = client.get("/results").json()
    assert [r["status"] for r in results["rows"]] == ["success", "invalid", "success"]
    assert results["rows"][1]["eligibilityCode"] == "DATA_ERROR"

    dist = client.get("/results/distribution").json()
    assert dist["total"] == 3
    assert {e["responseCode"]: e["count"] for e in dist["entries"]} == {"1": 2, "DATA_ERROR": 1}

    exported = client.get("/export?format=csv")
    assert exported.status_code == 200
    assert "veritec_results.csv" in exported.headers["content-disposition"]
    parsed = list(csv.reader(io.StringIO(exported.text, newline="")))
    assert parsed[0] == EXPORT_HEADERS
    assert parsed[1][:5] == ["Ada", "Lovelace", "555-0100", "ada@example.com", "PUR-1"]
    assert parsed[2][5] == "DATA_ERROR"

    xlsx = client.get("/export?format=xlsx")
    assert xlsx.status_code == 200
    assert xlsx.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    assert client.get("/export?format=pdf").status_code == 400


def test_bulk_run_stops_on_expired_token(fresh_state):
    _upload()
    fresh_state.eligibility_script["PUR-2"] = (401, {"message": "expired"})

    run = client.post("/bulk").json()

    assert run["status"] == "auth_expired"
    assert run["message"] == "Token expired. Please click 'Get Token' again."
    assert run["attempted"] == 2
    assert [c["json"]["purposeId"] for c in fresh_state.eligibility_calls] == ["PUR-1", "PUR-2"]
    assert api_app_module.TOKEN_PROVIDER.cached() is None
    assert client.get("/results").json()["last_run_status"] == "auth_expired"


def test_bulk_run_without_obtainable_token(fresh_state):
    _upload()
    fresh_state.token_body = {"data": {}}

    run = client.post("/bulk").json()

    assert run["status"] == "missing_token"
    assert run["message"] == "Token missing or expired. Please click 'Get Token' again."
    assert fresh_state.eligibility_calls == []
    assert client.get("/export?format=csv").status_code == 409


def test_mutating_routes_honour_api_key(monkeypatch):
    monkeypatch.setenv("LOANCHECK_API_KEY", "local-key")

    assert client.post("/token").status_code == 401
    assert client.post("/token", headers={"X-API-Key": "local-key"}).status_code == 200
    assert client.get("/rows").status_code == 200


def test_read_routes_require_api_key_when_reads_are_protected(monkeypatch, fresh_state):
    monkeypatch.setenv("LOANCHECK_API_KEY", "local-key")
    monkeypatch.setenv("LOANCHECK_REQUIRE_AUTH_FOR_READS", "true")
    headers = {"X-API-Key": "local-key"}
    client.post("/csv", headers=headers, files={"file": ("customers.csv", CSV_CONTENT.encode("utf-8"), "text/csv")})
    assert client.post("/bulk", headers=headers).json()["status"] == "done"

    for path in ("/rows", "/rows/1/payload", "/results", "/results/distribution", "/export?format=csv"):
        assert client.get(path).status_code == 401
        assert client.get(path, headers={"X-API-Key": "wrong"}).status_code == 401
        assert client.get(path, headers=headers).status_code == 200

    assert client.get("/health").json()["diagnostics"]["auth"]["read_auth_required"] is True


def test_read_routes_stay_open_unless_reads_are_protected(monkeypatch, fresh_state):
    monkeypatch.setenv("LOANCHECK_API_KEY", "local-key")
    monkeypatch.setenv("LOANCHECK_REQUIRE_AUTH_FOR_READS", "false")

    assert client.get("/rows").status_code == 200
    assert client.get("/results").status_code == 200
    assert client.get("/health").json()["diagnostics"]["auth"]["read_auth_required"] is False
