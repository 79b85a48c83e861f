"""Models for the advisor answer pipeline"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TopicCategory(str, Enum):
    CITIZENSHIP = "citizenship"
    INCOME_VERIFICATION = "income_verification"
    CREDIT = "credit"
    DOWNPAYMENT = "downpayment"
    DOCUMENTS = "documents"
    PMI = "pmi"
    DTI = "dti"
    CLOSING = "closing"
    RATES = "rates"
    PREAPPROVAL = "preapproval"
    FIRST_TIME = "firsttime"
    SELF_EMPLOYED = "selfemployed"
    CREDIT_ISSUES = "credit_issues"
    GENERAL = "general"


class Sentiment(str, Enum):
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


class IndicatorIntent(str, Enum):
    MORTGAGE_RATES = "mortgage_rates"
    HOUSING_MARKET = "housing_market"
    ECONOMIC_INDICATORS = "economic_indicators"


class IndicatorReading(BaseModel):
    series_id: str = Field(..., description="FRED series identifier")
    series_label: str = Field(..., description="Human readable series name")
    value: float
    observed_on: date
    formatted_value: str = Field(..., description="Value rendered for display")


class IndicatorBundle(BaseModel):
    intent: IndicatorIntent
    heading: str
    readings: list[IndicatorReading] = Field(..., min_length=1)

    def digest(self) -> str:
        """Render the bundle as the markdown block that leads an answer."""
        lines = [f"**{self.heading}**:", ""]
        for reading in self.readings:
            lines.append(
                f"• **{reading.series_label}**: {reading.formatted_value} "
                f"(as of {reading.observed_on.isoformat()})"
            )
        return "\n".join(lines)


class QuestionAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: TopicCategory
    keywords: frozenset[str] = Field(default_factory=frozenset)
    is_edge_case: bool = False
    sentiment: Sentiment = Sentiment.NEUTRAL


class CuratedAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., min_length=1)
    highlights: tuple[str, ...] = Field(..., min_length=3, max_length=6)


class AnswerSource(BaseModel):
    title: str
    snippet: str


class AdvisorAnswer(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str = Field(..., min_length=1)
    highlights: list[str] = Field(default_factory=list)
    sources: list[AnswerSource] = Field(default_factory=list)
    follow_ups: list[str] = Field(default_factory=list, max_length=3)
