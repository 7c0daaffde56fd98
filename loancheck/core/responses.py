from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

COMPLETE_STATUS = "CE"


def _as_text(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _DataBody(BaseModel):
    status: Optional[str] = Field(None, validation_alias="Status")
    status_lower: Optional[str] = Field(None, validation_alias="status")
    responsecode: Optional[str] = None
    responsedescription: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("status", "status_lower", "responsecode", "responsedescription", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class _ErrorItem(BaseModel):
    status: Optional[str] = None
    detail: Optional[str] = None
    title: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("status", "detail", "title", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class SuccessResponse(BaseModel):
    kind: Literal["success"] = "success"
    status: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.status == COMPLETE_STATUS


class ErrorEnvelope(BaseModel):
    kind: Literal["error"] = "error"
    status: Optional[str] = None
    detail: Optional[str] = None
    title: Optional[str] = None


class UnrecognizedResponse(BaseModel):
    kind: Literal["unrecognized"] = "unrecognized"
    message: Optional[str] = None


RemoteResponse = Union[SuccessResponse, ErrorEnvelope, UnrecognizedResponse]


def decode_response(raw: Any) -> RemoteResponse:
    """Decodes a raw eligibility response body into one of the known variants."""
    if not isinstance(raw, dict):
        return UnrecognizedResponse()

    data = raw.get("data")
    if isinstance(data, dict):
        try:
            body = _DataBody.model_validate(data)
        except ValidationError:
            return UnrecognizedResponse(message=_message_of(raw))
        return SuccessResponse(
            status=body.status if body.status is not None else body.status_lower,
            code=body.responsecode,
            description=body.responsedescription,
        )

    errors = raw.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        try:
            item = _ErrorItem.model_validate(errors[0])
        except ValidationError:
            return UnrecognizedResponse(message=_message_of(raw))
        return ErrorEnvelope(status=item.status, detail=item.detail, title=item.title)

    return UnrecognizedResponse(message=_message_of(raw))


def _message_of(raw: dict) -> Optional[str]:
    message = raw.get("message")
    if message is None:
        return None
    return str(message)
