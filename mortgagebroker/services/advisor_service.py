"""Answer composition for the mortgageAdvisor tool using an ordered stage chain"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from mortgagebroker.config import Settings
from mortgagebroker.models.advisor import (
    AdvisorAnswer,
    AnswerSource,
    IndicatorBundle,
    QuestionAnalysis,
    TopicCategory,
)
from mortgagebroker.services.generative_fallback import GuardedGenerativeFallback
from mortgagebroker.services.indicator_service import IndicatorLookupService
from mortgagebroker.services.knowledge_base import TopicKnowledgeBase
from mortgagebroker.services.question_classifier import analyze
from mortgagebroker.utils.logger import LoggerMixin
from mortgagebroker.utils.prompts import (
    ACKNOWLEDGMENT_PROMPT,
    ADDITIONAL_CONTEXT_HEADING,
    COMPLIANCE_HIGHLIGHTS,
    RATE_LIMIT_MESSAGE,
    TIMEOUT_MESSAGE,
)

INDICATOR_SOURCES = (
    AnswerSource(
        title="FRED (Federal Reserve Economic Data)",
        snippet="Official real-time data from the St. Louis Federal Reserve - PRIMARY SOURCE",
    ),
    AnswerSource(
        title="Market Analysis",
        snippet="Current economic conditions and mortgage market trends",
    ),
)

GENERATIVE_SOURCES = (
    AnswerSource(
        title="MortgageBroker AI Assistant",
        snippet="Answer generated under mortgage and real estate guardrails",
    ),
    AnswerSource(
        title="Licensed Loan Officer Review",
        snippet="Confirm program details and pricing with a licensed loan officer",
    ),
)

GENERIC_SOURCES = (
    AnswerSource(title="Industry Guidelines", snippet="Standard mortgage lending practices"),
    AnswerSource(
        title="Federal Requirements", snippet="CFPB and federal lending regulations"
    ),
)

# Indicator digests already cover these categories.
NO_SUPPLEMENT_CATEGORIES = frozenset({TopicCategory.RATES, TopicCategory.GENERAL})

MAX_HIGHLIGHTS = 3


def clean_question(question: str) -> str:
    """Replace characters that cannot be encoded as UTF-8, such as lone surrogates."""
    return question.encode("utf-8", "replace").decode("utf-8")


def curated_sources(category: TopicCategory) -> list[AnswerSource]:
    return [
        AnswerSource(
            title="Mortgage Guidelines",
            snippet=f"Industry-standard practices for {category.value}",
        ),
        AnswerSource(
            title="Lender Requirements",
            snippet="Common requirements across major lenders",
        ),
    ]


@dataclass
class AdvisorRequest:
    """Per-request state shared between stages"""

    question: str
    indicator: IndicatorBundle | None = None
    analysis: QuestionAnalysis | None = None


Stage = Callable[[AdvisorRequest], Awaitable[AdvisorAnswer | None]]


class AdvisorService(LoggerMixin):
    """Runs the advisor stages in priority order until one produces an answer"""

    def __init__(
        self,
        indicators: IndicatorLookupService,
        knowledge_base: TopicKnowledgeBase,
        fallback: GuardedGenerativeFallback,
        trusted_only: bool = False,
    ):
        self.indicators = indicators
        self.knowledge_base = knowledge_base
        self.fallback = fallback
        self.trusted_only = trusted_only

    @property
    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("indicator", self.indicator_stage),
            ("curated", self.curated_stage),
            ("generative", self.generative_stage),
        ]

    async def answer(self, question: str) -> AdvisorAnswer:
        """Compose an answer; never raises."""
        request = AdvisorRequest(question=clean_question(question))

        for name, stage in self.stages:
            try:
                result = await stage(request)
            except Exception as e:
                self.logger.error(
                    "Advisor stage failed, falling through", stage=name, error=str(e)
                )
                continue
            if result is not None:
                self.logger.info(
                    "Advisor answer composed",
                    stage=name,
                    category=request.analysis.category.value
                    if request.analysis
                    else None,
                )
                return result

        self.logger.info("Advisor answer composed", stage="guidance")
        return self.guidance_stage(request)

    def _analysis(self, request: AdvisorRequest) -> QuestionAnalysis:
        if request.analysis is None:
            request.analysis = analyze(request.question)
            self.logger.debug(
                "Question analyzed",
                category=request.analysis.category.value,
                is_edge_case=request.analysis.is_edge_case,
                sentiment=request.analysis.sentiment.value,
            )
        return request.analysis

    async def indicator_stage(self, request: AdvisorRequest) -> AdvisorAnswer | None:
        request.indicator = await self.indicators.lookup(request.question)
        if request.indicator is None:
            return None

        analysis = self._analysis(request)
        summary = request.indicator.digest()
        highlights: list[str] = []

        curated = None
        if analysis.category not in NO_SUPPLEMENT_CATEGORIES:
            curated = self.knowledge_base.lookup(analysis.category)

        if curated is not None:
            summary += f"\n\n{ADDITIONAL_CONTEXT_HEADING}\n{curated.summary}"
            highlights = list(curated.highlights[:MAX_HIGHLIGHTS])
        else:
            highlights = self.knowledge_base.relevant_insights(
                analysis.keywords, limit=MAX_HIGHLIGHTS
            )

        return AdvisorAnswer(
            summary=summary,
            highlights=highlights,
            sources=list(INDICATOR_SOURCES),
            follow_ups=self.knowledge_base.follow_ups(analysis.category),
        )

    async def curated_stage(self, request: AdvisorRequest) -> AdvisorAnswer | None:
        analysis = self._analysis(request)
        # GENERAL is left to the generative and guidance stages.
        if analysis.category == TopicCategory.GENERAL:
            return None

        curated = self.knowledge_base.lookup(analysis.category)
        if curated is None:
            return None

        return AdvisorAnswer(
            summary=curated.summary,
            highlights=list(curated.highlights),
            sources=curated_sources(analysis.category),
            follow_ups=self.knowledge_base.follow_ups(analysis.category),
        )

    async def generative_stage(self, request: AdvisorRequest) -> AdvisorAnswer | None:
        if self.trusted_only or not self.fallback.available():
            return None

        analysis = self._analysis(request)
        context_parts = []
        if request.indicator is not None:
            context_parts.append(request.indicator.digest())
        context_parts.append(self.knowledge_base.general().summary)

        generated = await self.fallback.ask(
            request.question, context="\n\n".join(context_parts)
        )
        if generated in (RATE_LIMIT_MESSAGE, TIMEOUT_MESSAGE):
            self.logger.warning(
                "Generative fallback unavailable, falling through", reply=generated
            )
            return None

        return AdvisorAnswer(
            summary=generated,
            highlights=list(COMPLIANCE_HIGHLIGHTS),
            sources=list(GENERATIVE_SOURCES),
            follow_ups=self.knowledge_base.follow_ups(analysis.category),
        )

    def guidance_stage(self, request: AdvisorRequest) -> AdvisorAnswer:
        general = self.knowledge_base.general()
        return AdvisorAnswer(
            summary=ACKNOWLEDGMENT_PROMPT.format(
                question=request.question.strip(), summary=general.summary
            ),
            highlights=list(general.highlights),
            sources=list(GENERIC_SOURCES),
            follow_ups=self.knowledge_base.follow_ups(TopicCategory.GENERAL),
        )


def build_advisor_service(settings: Settings) -> AdvisorService:
    """Wire the advisor pipeline from application settings."""
    return AdvisorService(
        indicators=IndicatorLookupService.from_settings(settings),
        knowledge_base=TopicKnowledgeBase(),
        fallback=GuardedGenerativeFallback.from_settings(settings),
        trusted_only=settings.advisor_trusted_only,
    )
