from __future__ import annotations

import io
import json
from typing import Any, Dict

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, StreamingResponse

from loancheck.api.console_ui import render_console_html
from loancheck.api.schemas import (
    BulkRunPublicResponse,
    CheckPublicResponse,
    CheckRequest,
    CsvUploadPublicResponse,
    DistributionPublicResponse,
    ResultsPublicResponse,
    RowPayloadPublicResponse,
    RowsListPublicResponse,
    TokenPublicResponse,
)
from loancheck.api.security import (
    api_key_configured,
    install_openapi_api_key_security,
    read_auth_required,
    require_api_key_if_configured,
)
from loancheck.bulk.runner import run_all
from loancheck.clients.auth import TokenProvider
from loancheck.clients.eligibility import check_payload_text
from loancheck.core.config import config
from loancheck.core.errors import (
    AuthExpired,
    CsvParseError,
    MissingToken,
    PayloadParseError,
    RequestFailed,
    TokenFetchFailed,
    TransportError,
)
from loancheck.core.models import CsvRow
from loancheck.core.stores import create_token_store_from_env
from loancheck.core.token_cache import TokenCache
from loancheck.core.version import __version__
from loancheck.core.workspace import Workspace
from loancheck.exporters.csv_builder import EXPORT_FILENAME, csv_text_from_table_rows
from loancheck.exporters.excel_builder import EXPORT_XLSX_FILENAME, build_xlsx_from_results
from loancheck.ingest.payload_mapper import parse_csv_rows
from loancheck.reporting.projector import to_distribution, to_table_rows

app = FastAPI(
    title="LoanCheck API",
    description="Operator console for single and bulk loan-eligibility checks",
    version=__version__,
)

TOKEN_STORE = create_token_store_from_env()
TOKEN_PROVIDER = TokenProvider(TokenCache(TOKEN_STORE))
WORKSPACE = Workspace()

BULK_MISSING_TOKEN_MESSAGE = "Token missing or expired. Please click 'Get Token' again."

install_openapi_api_key_security(app)


def _public_row(row: CsvRow) -> Dict[str, Any]:
    return {
        "id": row.id,
        "payload": row.payload.to_wire(),
        "meta": row.meta.model_dump(by_alias=True),
    }


@app.get("/", response_class=HTMLResponse)
def console():
    return render_console_html()


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "diagnostics": {
            "token_store": {"mode": getattr(TOKEN_STORE, "mode", "inmem")},
            "auth": {
                "api_key_configured": bool(api_key_configured()),
                "read_auth_required": read_auth_required(),
            },
            "bulk": {"keep_partial_on_auth_expiry": config.bulk.keep_partial_on_auth_expiry},
        },
    }


@app.post("/token", response_model=TokenPublicResponse)
def get_token(request: Request):
    require_api_key_if_configured(request)
    cached = TOKEN_PROVIDER.cached()
    if cached:
        WORKSPACE.set_session_token(cached)
        return {"status": "cached", "message": "Using cached token."}

    try:
        token = TOKEN_PROVIDER.refresh()
    except TokenFetchFailed as exc:
        raise HTTPException(status_code=502, detail=exc.user_message) from exc
    WORKSPACE.set_session_token(token)
    return {"status": "generated", "message": "New token generated successfully."}


@app.post("/csv", response_model=CsvUploadPublicResponse)
async def upload_csv(request: Request, file: UploadFile = File(...)):
    require_api_key_if_configured(request)
    content = await file.read()
    try:
        rows = parse_csv_rows(content)
    except CsvParseError as exc:
        raise HTTPException(status_code=400, detail=exc.user_message) from exc

    WORKSPACE.replace_rows(rows)
    return {"status": "loaded", "filename": file.filename, "row_count": len(rows)}


@app.get("/rows", response_model=RowsListPublicResponse)
def list_rows(request: Request):
    require_api_key_if_configured(request, for_read=True)
    rows = WORKSPACE.rows()
    return {"row_count": len(rows), "rows": [_public_row(row) for row in rows]}


@app.get("/rows/{row_id}/payload", response_model=RowPayloadPublicResponse)
def row_payload(row_id: int, request: Request):
    require_api_key_if_configured(request, for_read=True)
    row = WORKSPACE.row(row_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Row not found")
    payload = row.payload.to_wire()
    return {"row_id": row.id, "payload": payload, "payload_text": json.dumps(payload, indent=2)}


@app.post("/check", response_model=CheckPublicResponse)
def check_eligibility(req: CheckRequest, request: Request):
    require_api_key_if_configured(request)
    token = WORKSPACE.session_token() or TOKEN_PROVIDER.cached()
    if not token:
        raise HTTPException(status_code=401, detail=MissingToken.user_message)

    try:
        result = check_payload_text(token, req.payload)
    except PayloadParseError as exc:
        raise HTTPException(status_code=400, detail=exc.user_message) from exc
    except AuthExpired as exc:
        WORKSPACE.set_session_token(None)
        TOKEN_PROVIDER.invalidate()
        raise HTTPException(status_code=401, detail=exc.user_message) from exc
    except RequestFailed as exc:
        raise HTTPException(status_code=502, detail=exc.user_message) from exc

    if result.status == "error":
        raise HTTPException(status_code=502, detail=TransportError.user_message)
    return {"status": result.status, "response": result.response}


@app.post("/bulk", response_model=BulkRunPublicResponse)
def run_bulk(request: Request):
    require_api_key_if_configured(request)
    rows = WORKSPACE.rows()
    result = run_all(rows, TOKEN_PROVIDER)

    if result.signal == "missing_token":
        return {
            "status": "missing_token",
            "message": BULK_MISSING_TOKEN_MESSAGE,
            "row_count": len(rows),
            "attempted": 0,
            "outcome_count": 0,
        }

    WORKSPACE.record_run(result.outcomes, result.signal)
    if result.signal == "auth_expired":
        WORKSPACE.set_session_token(None)
        return {
            "status": "auth_expired",
            "message": AuthExpired.user_message,
            "row_count": len(rows),
            "attempted": result.attempted,
            "outcome_count": len(result.outcomes),
        }

    return {
        "status": "done",
        "row_count": len(rows),
        "attempted": result.attempted,
        "outcome_count": len(result.outcomes),
    }


@app.get("/results", response_model=ResultsPublicResponse)
def list_results(request: Request):
    require_api_key_if_configured(request, for_read=True)
    outcomes = WORKSPACE.outcomes()
    return {
        "outcome_count": len(outcomes),
        "last_run_status": WORKSPACE.last_signal(),
        "rows": [row.model_dump(by_alias=True) for row in to_table_rows(outcomes)],
    }


@app.get("/results/distribution", response_model=DistributionPublicResponse)
def results_distribution(request: Request):
    require_api_key_if_configured(request, for_read=True)
    outcomes = WORKSPACE.outcomes()
    return {
        "total": len(outcomes),
        "entries": [entry.model_dump(by_alias=True) for entry in to_distribution(outcomes)],
    }


@app.get("/export")
def export_results(request: Request, format: str = "csv"):
    require_api_key_if_configured(request, for_read=True)
    fmt = (format or "").lower()
    outcomes = WORKSPACE.outcomes()
    if not outcomes:
        raise HTTPException(status_code=409, detail="No results to export")

    table_rows = to_table_rows(outcomes)
    if fmt == "csv":
        data = csv_text_from_table_rows(table_rows).encode("utf-8")
        return StreamingResponse(
            io.BytesIO(data),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
        )

    if fmt == "xlsx":
        data = build_xlsx_from_results(table_rows, to_distribution(outcomes))
        return StreamingResponse(
            io.BytesIO(data),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f"attachment; filename={EXPORT_XLSX_FILENAME}"},
        )

    raise HTTPException(status_code=400, detail="Unsupported format")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.api_host, port=config.api_port, reload=config.debug)
