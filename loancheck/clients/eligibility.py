from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from loancheck.core.config import RemoteConfig, config
from loancheck.core.errors import AuthExpired, PayloadParseError, RequestFailed
from loancheck.core.models import EligibilityCheck, EligibilityRequest

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_MESSAGE = "Network or server error"


def _headers(token: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


def post_eligibility(token: str, body: Dict[str, Any], remote: Optional[RemoteConfig] = None) -> httpx.Response:
    remote = remote or config.remote
    return httpx.post(remote.eligibility_url, json=body, headers=_headers(token), timeout=remote.timeout_s)


def classify_body(body: Any) -> str:
    # A null or blank `data` next to an errors envelope is not a success.
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, (dict, list)) or bool(data):
        return "success"
    return "invalid"


def check_body(token: str, body: Dict[str, Any], remote: Optional[RemoteConfig] = None) -> EligibilityCheck:
    """Sends one request body; see check_one for the outcome contract."""
    try:
        response = post_eligibility(token, body, remote)
    except httpx.RequestError as exc:
        logger.warning("Eligibility request failed (purpose_id=%s): %s", body.get("purposeId", ""), exc)
        return EligibilityCheck(status="error", response={"message": TRANSPORT_ERROR_MESSAGE})

    if response.status_code == 401:
        raise AuthExpired()
    if not 200 <= response.status_code < 300:
        logger.warning(
            "Eligibility request returned HTTP %s (purpose_id=%s)",
            response.status_code,
            body.get("purposeId", ""),
        )
        raise RequestFailed(response.status_code, response.text)

    try:
        parsed = response.json()
    except ValueError:
        return EligibilityCheck(status="invalid", response={"message": response.text}, http_status=response.status_code)
    if not isinstance(parsed, dict):
        return EligibilityCheck(status="invalid", response={"message": response.text}, http_status=response.status_code)
    return EligibilityCheck(status=classify_body(parsed), response=parsed, http_status=response.status_code)


def check_one(token: str, request: EligibilityRequest, remote: Optional[RemoteConfig] = None) -> EligibilityCheck:
    """Submits one eligibility request.

    Transport failures come back as an ``error`` check and never raise. A 401
    raises AuthExpired; any other non-2xx raises RequestFailed with the status
    code and body text. A 2xx JSON body carrying ``data`` is a ``success``,
    anything else is ``invalid``.
    """
    return check_body(token, request.to_wire(), remote)


def parse_payload_text(text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadParseError(f"Invalid JSON payload: {exc.msg}") from exc
    if not isinstance(parsed, dict):
        raise PayloadParseError("Payload must be a JSON object")
    return parsed


def check_payload_text(token: str, text: str, remote: Optional[RemoteConfig] = None) -> EligibilityCheck:
    """Single-check path: operator-edited JSON is sent as-is after parsing."""
    return check_body(token, parse_payload_text(text), remote)
