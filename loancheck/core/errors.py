from __future__ import annotations

from typing import Optional


class LoanCheckError(Exception):
    """Base class for workflow errors that map to an operator-facing message."""

    user_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class TokenFetchFailed(LoanCheckError):
    user_message = "Token fetch failed"


class MissingToken(LoanCheckError):
    user_message = "No valid token. Please click Get Token."


class AuthExpired(LoanCheckError):
    user_message = "Token expired. Please click 'Get Token' again."


class RequestFailed(LoanCheckError):
    def __init__(self, status_code: int, body_text: str) -> None:
        self.status_code = status_code
        self.body_text = body_text
        super().__init__(f"Eligibility check failed: {status_code} {body_text}")


class TransportError(LoanCheckError):
    user_message = "Eligibility check failed (network or parse error)"


class CsvParseError(LoanCheckError):
    user_message = "Invalid CSV file."


class PayloadParseError(LoanCheckError):
    user_message = "Invalid JSON payload."
