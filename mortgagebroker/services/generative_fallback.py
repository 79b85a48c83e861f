"""
Guarded OpenAI fallback for mortgage and real estate questions.

The model is only consulted after a keyword pre-filter accepts the question,
always runs under a fixed system prompt that restricts it to mortgage and real
estate topics, and its reply is checked for the off-topic refusal before it is
handed back.
"""

import asyncio
import time
from typing import Any

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from mortgagebroker.config import Settings
from mortgagebroker.services.errors import (
    NotConfiguredError,
    UpstreamError,
    UpstreamTimeoutError,
)
from mortgagebroker.utils.logger import LoggerMixin, log_llm_interaction
from mortgagebroker.utils.prompts import (
    CONTEXT_PROMPT,
    MORTGAGE_SYSTEM_PROMPT,
    OFF_TOPIC_MARKER,
    OFF_TOPIC_REFUSAL,
    RATE_LIMIT_MESSAGE,
    TIMEOUT_MESSAGE,
)

MORTGAGE_KEYWORDS = (
    # Loan types
    "mortgage",
    "loan",
    "refinance",
    "fha",
    "va",
    "usda",
    "conventional",
    "jumbo",
    "pmi",
    "mip",
    # Transaction terms
    "home",
    "house",
    "property",
    "real estate",
    "buyer",
    "seller",
    "purchase",
    "down payment",
    "closing",
    "escrow",
    "title",
    "appraisal",
    "inspection",
    "listing",
    "offer",
    "contract",
    "short sale",
    "foreclosure",
    "rental",
    "housing",
    "investment",
    "equity",
    # Qualification terms
    "rate",
    "interest",
    "credit",
    "pre-approval",
    "pre-qualification",
    "dti",
    "debt",
    "income",
)


def is_mortgage_related(question: str) -> bool:
    """Keyword gate applied before the model is called."""
    lowered = question.lower()

    if any(keyword in lowered for keyword in MORTGAGE_KEYWORDS):
        return True

    if "buy" in lowered and ("property" in lowered or "home" in lowered):
        return True
    if "sell" in lowered and ("property" in lowered or "home" in lowered):
        return True
    if "finance" in lowered and "home" in lowered:
        return True

    return False


def is_off_topic_reply(answer: str) -> bool:
    return OFF_TOPIC_MARKER in answer


def build_user_message(question: str, context: str | None = None) -> str:
    if context:
        return CONTEXT_PROMPT.format(context=context, question=question)
    return question


def _is_rate_limit(error: Exception) -> bool:
    return isinstance(error, openai.RateLimitError) or "rate limit" in str(error).lower()


def _is_timeout(error: Exception) -> bool:
    return (
        isinstance(error, (openai.APITimeoutError, UpstreamTimeoutError))
        or "timeout" in str(error).lower()
        or "timed out" in str(error).lower()
    )


class GuardedGenerativeFallback(LoggerMixin):
    """Mortgage-only wrapper around a LangChain chat model"""

    def __init__(self, llm: Any | None = None, timeout_seconds: float = 10.0):
        self.llm = llm
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "GuardedGenerativeFallback":
        if not settings.openai_api_key:
            return cls(llm=None, timeout_seconds=settings.openai_timeout_seconds)

        llm = ChatOpenAI(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.max_tokens,
            top_p=settings.openai_top_p,
            frequency_penalty=settings.openai_frequency_penalty,
            presence_penalty=settings.openai_presence_penalty,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
        return cls(llm=llm, timeout_seconds=settings.openai_timeout_seconds)

    @property
    def model_name(self) -> str | None:
        return getattr(self.llm, "model_name", None)

    def available(self) -> bool:
        return self.llm is not None

    async def ask(self, question: str, context: str | None = None) -> str:
        """
        Answer a mortgage or real estate question.

        Args:
            question: The user's literal question
            context: Optional indicator digest and/or guidance text

        Returns:
            The model's answer, the off-topic refusal, or a retry message
            when the provider is rate limited or times out

        Raises:
            NotConfiguredError: No chat model is configured
            UpstreamError: The provider call failed for any other reason
        """
        if not self.available():
            raise NotConfiguredError(
                "OpenAI client not initialized. Set OPENAI_API_KEY environment variable."
            )

        if not is_mortgage_related(question):
            self.logger.info(
                "Question rejected by mortgage pre-filter", question=question[:100]
            )
            return OFF_TOPIC_REFUSAL

        messages = [
            SystemMessage(content=MORTGAGE_SYSTEM_PROMPT),
            HumanMessage(content=build_user_message(question, context)),
        ]

        start_time = time.time()
        try:
            answer = await self._invoke(messages)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            llm_logger = log_llm_interaction(
                model=self.model_name, response_time_ms=duration_ms
            )
            if _is_rate_limit(e):
                llm_logger.warning("OpenAI rate limit reached", error=str(e))
                return RATE_LIMIT_MESSAGE
            if _is_timeout(e):
                llm_logger.warning("OpenAI request timed out", error=str(e))
                return TIMEOUT_MESSAGE
            llm_logger.error("OpenAI request failed", error=str(e))
            if isinstance(e, UpstreamError):
                raise
            raise UpstreamError(str(e)) from e

        llm_logger = log_llm_interaction(
            model=self.model_name,
            response_time_ms=(time.time() - start_time) * 1000,
        )
        if is_off_topic_reply(answer):
            llm_logger.info("Model reply indicates off-topic question")
        else:
            llm_logger.info("Generated mortgage answer", answer_length=len(answer))

        return answer

    async def _invoke(self, messages: list) -> str:
        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke(messages), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(
                f"OpenAI request exceeded {self.timeout_seconds}s"
            ) from e

        content = response.content
        answer = content.strip() if isinstance(content, str) else ""
        if not answer:
            raise UpstreamError("OpenAI returned empty response")
        return answer
