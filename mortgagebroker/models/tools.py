from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mortgagebroker.services.errors import MalformedInputError

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoanPurpose(str, Enum):
    PURCHASE = "purchase"
    REFINANCE = "refinance"
    CASHOUT = "cashout"
    SECOND_HOME = "secondhome"
    INVESTMENT = "investment"


class Occupancy(str, Enum):
    PRIMARY = "primary"
    SECOND_HOME = "secondhome"
    INVESTMENT = "investment"


class PropertyType(str, Enum):
    SINGLE_FAMILY = "singlefamily"
    CONDO = "condo"
    TOWNHOME = "townhome"
    MULTI_UNIT = "multiunit"


class FunnelStep(str, Enum):
    ADVISOR = "advisor"
    HANDOFF = "handoff"


class MortgageAdvisorRequest(CamelModel):
    question: str = Field(..., description="Mortgage question from the user")

    @field_validator("question")
    @classmethod
    def require_full_question(cls, value: str) -> str:
        if len(value.strip()) < 4:
            raise MalformedInputError("Ask a full question so I can help")
        return value


class CalculatorRequest(CamelModel):
    loan_amount: float = Field(..., ge=50000, description="Loan principal")
    rate: float = Field(..., gt=0, le=20, description="Annual interest rate in %")
    term_years: int = Field(..., gt=0, le=40, description="Loan term in years")


class CalculatorResult(CamelModel):
    monthly_payment: float
    total_paid: float
    total_interest: float
    payoff_date_months: int


class IntakeRequest(CamelModel):
    purpose: LoanPurpose
    occupancy: Occupancy
    property_type: PropertyType
    est_price: int | None = Field(default=None, gt=0)
    est_down_payment: int | None = Field(default=None, ge=0)


class LeadRequest(CamelModel):
    full_name: str = Field(..., min_length=2)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    phone: str = Field(..., min_length=7)
    consent: bool = Field(..., description="Explicit TCPA contact consent")
    intake: IntakeRequest | None = None

    @field_validator("consent")
    @classmethod
    def require_consent(cls, value: bool) -> bool:
        if value is not True:
            raise MalformedInputError("Consent is required")
        return value


class LeadRecord(CamelModel):
    full_name: str
    email: str
    phone: str
    consent: bool
    created_at: datetime


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResponse(CamelModel):
    content: list[TextContent]
    structured_content: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def text(cls, text: str, **structured: Any) -> "ToolResponse":
        return cls(content=[TextContent(text=text)], structured_content=structured)


class ToolDescriptor(CamelModel):
    name: str
    title: str
    description: str
    invoking: str
    invoked: str


class HealthResponse(BaseModel):
    status: str = Field(default="ok")
