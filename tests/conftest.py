"""Pytest configuration and fixtures for the MortgageBroker advisor."""

import asyncio
import json
import os
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

# Settings are read at import time, so the test environment is pinned first.
os.environ["ENABLE_RATE_LIMITING"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = ""
os.environ["FRED_API_KEY"] = ""
os.environ["LOG_FORMAT"] = "console"

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage

from mortgagebroker.main import (
    app,
    get_advisor_service,
    get_notification_service,
)
from mortgagebroker.services.advisor_service import AdvisorService
from mortgagebroker.services.generative_fallback import GuardedGenerativeFallback
from mortgagebroker.services.indicator_service import IndicatorLookupService
from mortgagebroker.services.knowledge_base import TopicKnowledgeBase

FRED_TEST_BASE_URL = "https://fred.test/fred"

# Latest observation per series, as FRED returns them.
FRED_OBSERVATIONS = {
    "MORTGAGE30US": {"date": "2025-01-16", "value": "7.04"},
    "MORTGAGE15US": {"date": "2025-01-16", "value": "6.27"},
    "FEDFUNDS": {"date": "2024-12-01", "value": "4.48"},
    "MSPUS": {"date": "2024-07-01", "value": "420400"},
    "HOUST": {"date": "2024-12-01", "value": "1499"},
    "EXHOSLUSM495S": {"date": "2024-12-01", "value": "4240000"},
    "CPIAUCSL": {"date": "2024-12-01", "value": "317.603"},
    "UNRATE": {"date": "2024-12-01", "value": "4.1"},
    "GDP": {"date": "2024-07-01", "value": "29374.914"},
}


class FakeChatModel:
    """Stands in for ChatOpenAI: records calls and replies with a fixed message."""

    model_name = "fake-chat-model"

    def __init__(
        self,
        reply: str = "An FHA loan lets you buy a home with 3.5% down.",
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[list] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def ainvoke(self, messages: list) -> AIMessage:
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


def fred_transport(
    observations: dict[str, dict[str, str]] | None = None,
    failing: frozenset[str] = frozenset(),
    slow: frozenset[str] = frozenset(),
    requests: list[httpx.Request] | None = None,
) -> httpx.AsyncBaseTransport:
    """
    Build a MockTransport that answers /series/observations like FRED.

    Args:
        observations: Latest observation per series id
        failing: Series ids that answer with HTTP 500
        slow: Series ids that never answer within a test deadline
        requests: Optional list that collects every request made
    """
    observations = FRED_OBSERVATIONS if observations is None else observations

    async def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        series_id = request.url.params["series_id"]
        if series_id in slow:
            await asyncio.sleep(5)
        if series_id in failing:
            return httpx.Response(500, json={"error_message": "Internal error"})
        observation = observations.get(series_id)
        payload = {"observations": [observation] if observation else []}
        return httpx.Response(200, content=json.dumps(payload))

    return httpx.MockTransport(handler)


@pytest.fixture
def make_indicator_service() -> Callable[..., IndicatorLookupService]:
    """Factory for an indicator service wired to a fake FRED."""

    def factory(
        api_key: str | None = "test-fred-key",
        bundle_timeout_seconds: float = 6.0,
        **transport_kwargs: Any,
    ) -> IndicatorLookupService:
        return IndicatorLookupService(
            api_key=api_key,
            base_url=FRED_TEST_BASE_URL,
            timeout_seconds=5.0,
            bundle_timeout_seconds=bundle_timeout_seconds,
            transport=fred_transport(**transport_kwargs),
        )

    return factory


@pytest.fixture
def fake_llm_factory() -> type[FakeChatModel]:
    return FakeChatModel


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def knowledge_base() -> TopicKnowledgeBase:
    return TopicKnowledgeBase()


@pytest.fixture
def make_advisor(
    make_indicator_service, knowledge_base
) -> Callable[..., AdvisorService]:
    """Factory for an advisor pipeline with fake upstreams."""

    def factory(
        llm: FakeChatModel | None = None,
        fred_key: str | None = None,
        trusted_only: bool = False,
        **transport_kwargs: Any,
    ) -> AdvisorService:
        return AdvisorService(
            indicators=make_indicator_service(api_key=fred_key, **transport_kwargs),
            knowledge_base=knowledge_base,
            fallback=GuardedGenerativeFallback(llm=llm, timeout_seconds=1.0),
            trusted_only=trusted_only,
        )

    return factory


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Notification service double so API tests never touch SMTP or the lead log."""
    notifier = MagicMock()
    notifier.notify.return_value = False
    return notifier


@pytest_asyncio.fixture
async def client(make_advisor, mock_notifier) -> AsyncClient:
    """Create an HTTP client for testing the API."""
    # Trigger app startup event to create database tables
    from mortgagebroker.main import startup_event

    await startup_event()

    app.dependency_overrides[get_advisor_service] = lambda: make_advisor()
    app.dependency_overrides[get_notification_service] = lambda: mock_notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_intake() -> dict[str, Any]:
    return {
        "purpose": "purchase",
        "occupancy": "primary",
        "propertyType": "singlefamily",
        "estPrice": 450000,
        "estDownPayment": 90000,
    }


@pytest.fixture
def sample_lead(sample_intake) -> dict[str, Any]:
    return {
        "fullName": "Jordan Rivera",
        "email": "jordan.rivera@example.com",
        "phone": "555-867-5309",
        "consent": True,
        "intake": sample_intake,
    }
