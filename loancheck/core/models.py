# loancheck/core/models.py
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OutcomeStatus = Literal["success", "invalid", "error"]


class EligibilityRequest(BaseModel):
    """Fixed request shape expected by the remote eligibility endpoint."""

    purpose_id: str = Field("", alias="purposeId")
    gross_income_per_check: str = Field("0.00", alias="grossIncomePerCheck")
    gross_monthly_income: str = Field("0.00", alias="grossMonthlyIncome")
    pay_frequency_type_code: str = Field("BI", alias="payFrequencyTypeCode")
    is_military: bool = Field(False, alias="isMilitary")
    cso_fee_amount: str = Field("0", alias="csoFeeAmount")
    cso_id: str = Field("1", alias="csoId")
    loan_amount: str = Field("1000", alias="loanAmount")
    loan_type_code: str = Field("ILP", alias="loanTypeCode")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RowMeta(BaseModel):
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    phone: str = ""
    email: str = ""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CsvRow(BaseModel):
    id: int
    payload: EligibilityRequest
    meta: RowMeta = RowMeta()

    model_config = ConfigDict(frozen=True)


class EligibilityCheck(BaseModel):
    """Classified result of one eligibility call."""

    status: OutcomeStatus
    response: Dict[str, Any]
    http_status: Optional[int] = None


class EligibilityOutcome(BaseModel):
    row_id: int = Field(alias="rowId")
    purpose_id: str = Field("", alias="purposeId")
    meta: RowMeta = RowMeta()
    status: OutcomeStatus
    response: Dict[str, Any]

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DistributionEntry(BaseModel):
    response_code: str = Field(alias="responseCode")
    description: str = ""
    count: int = 0

    model_config = ConfigDict(populate_by_name=True)


class TableRow(BaseModel):
    row_id: int = Field(alias="rowId")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    phone: str = ""
    email: str = ""
    purpose_id: str = Field("", alias="purposeId")
    status: OutcomeStatus
    eligibility_code: str = Field("", alias="eligibilityCode")
    eligibility_description: str = Field("", alias="eligibilityDescription")

    model_config = ConfigDict(populate_by_name=True, frozen=True)
