from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class TokenPublicResponse(BaseModel):
    status: Literal["cached", "generated"]
    message: str


class CsvUploadPublicResponse(BaseModel):
    status: str
    filename: Optional[str] = None
    row_count: int


class CsvRowPublicResponse(BaseModel):
    id: int
    payload: Dict[str, Any]
    meta: Dict[str, str]


class RowsListPublicResponse(BaseModel):
    row_count: int
    rows: List[CsvRowPublicResponse]


class RowPayloadPublicResponse(BaseModel):
    row_id: int
    payload: Dict[str, Any]
    payload_text: str


class CheckRequest(BaseModel):
    payload: str

    model_config = ConfigDict(extra="forbid")


class CheckPublicResponse(BaseModel):
    status: str
    response: Dict[str, Any]


class BulkRunPublicResponse(BaseModel):
    status: Literal["done", "auth_expired", "missing_token"]
    message: Optional[str] = None
    row_count: int
    attempted: int
    outcome_count: int


class TableRowPublicResponse(BaseModel):
    rowId: int
    firstName: str
    lastName: str
    phone: str
    email: str
    purposeId: str
    status: str
    eligibilityCode: str
    eligibilityDescription: str


class ResultsPublicResponse(BaseModel):
    outcome_count: int
    last_run_status: Optional[str] = None
    rows: List[TableRowPublicResponse]


class DistributionEntryPublicResponse(BaseModel):
    responseCode: str
    description: str
    count: int


class DistributionPublicResponse(BaseModel):
    total: int
    entries: List[DistributionEntryPublicResponse]
