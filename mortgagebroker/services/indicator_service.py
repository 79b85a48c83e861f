"""FRED (Federal Reserve Economic Data) lookups for rate and market questions"""

import asyncio
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import httpx

from mortgagebroker.config import Settings
from mortgagebroker.models.advisor import (
    IndicatorBundle,
    IndicatorIntent,
    IndicatorReading,
)
from mortgagebroker.utils.logger import LoggerMixin, log_indicator_fetch


def format_percent(value: float) -> str:
    return f"{value:g}%"


def format_dollars(value: float) -> str:
    return f"${value:,.0f}"


def format_units(value: float) -> str:
    return f"{value:,.0f} units"


def format_count(value: float) -> str:
    return f"{value:,.0f}"


def format_index(value: float) -> str:
    return f"{value:.1f}"


def format_trillions(value: float) -> str:
    # FRED reports GDP in billions of dollars
    return f"${value / 1000:.2f}T"


@dataclass(frozen=True)
class SeriesSpec:
    series_id: str
    label: str
    formatter: Callable[[float], str]


@dataclass(frozen=True)
class IntentSpec:
    intent: IndicatorIntent
    heading: str
    triggers: tuple[str, ...]
    series: tuple[SeriesSpec, ...]


# Checked in order; the first intent whose trigger appears in the question wins.
INTENTS: tuple[IntentSpec, ...] = (
    IntentSpec(
        intent=IndicatorIntent.MORTGAGE_RATES,
        heading="Current Mortgage Rates (from FRED)",
        triggers=("mortgage rate", "interest rate", "current rate"),
        series=(
            SeriesSpec("MORTGAGE30US", "30-Year Fixed", format_percent),
            SeriesSpec("MORTGAGE15US", "15-Year Fixed", format_percent),
            SeriesSpec("FEDFUNDS", "Federal Funds Rate", format_percent),
        ),
    ),
    IntentSpec(
        intent=IndicatorIntent.HOUSING_MARKET,
        heading="Housing Market Data (from FRED)",
        triggers=("home price", "housing market", "housing start"),
        series=(
            SeriesSpec("MSPUS", "Median Home Price", format_dollars),
            SeriesSpec("HOUST", "Housing Starts", format_units),
            SeriesSpec("EXHOSLUSM495S", "Existing Home Sales", format_count),
        ),
    ),
    IntentSpec(
        intent=IndicatorIntent.ECONOMIC_INDICATORS,
        heading="Economic Indicators (from FRED)",
        triggers=("inflation", "cpi", "economy", "unemployment"),
        series=(
            SeriesSpec("CPIAUCSL", "CPI (Inflation)", format_index),
            SeriesSpec("UNRATE", "Unemployment Rate", format_percent),
            SeriesSpec("GDP", "GDP", format_trillions),
        ),
    ),
)


def match_intent(question: str) -> IntentSpec | None:
    lowered = question.lower()
    for spec in INTENTS:
        if any(trigger in lowered for trigger in spec.triggers):
            return spec
    return None


class IndicatorLookupService(LoggerMixin):
    """Fetches the latest FRED observations relevant to a question"""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.stlouisfed.org/fred",
        timeout_seconds: float = 5.0,
        bundle_timeout_seconds: float = 6.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.bundle_timeout_seconds = bundle_timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "IndicatorLookupService":
        return cls(
            api_key=settings.fred_api_key,
            base_url=settings.fred_base_url,
            timeout_seconds=settings.fred_timeout_seconds,
            bundle_timeout_seconds=settings.fred_bundle_timeout_seconds,
        )

    def configured(self) -> bool:
        return bool(self.api_key)

    async def lookup(self, question: str) -> IndicatorBundle | None:
        """
        Return the indicator bundle for the question's intent.

        Returns None when the question matches no intent, the API key is
        missing, or every series in the bundle failed.
        """
        spec = match_intent(question)
        if spec is None:
            return None

        if not self.configured():
            self.logger.warning(
                "FRED API key not configured, skipping indicator lookup",
                intent=spec.intent.value,
            )
            return None

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_seconds),
            transport=self._transport,
        ) as client:
            tasks = [
                asyncio.create_task(self._fetch_reading(client, series, spec.intent))
                for series in spec.series
            ]
            done, pending = await asyncio.wait(
                tasks, timeout=self.bundle_timeout_seconds
            )
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
                self.logger.warning(
                    "Indicator bundle deadline reached",
                    intent=spec.intent.value,
                    abandoned=len(pending),
                )

        readings = []
        for task in tasks:
            if task not in done or task.cancelled():
                continue
            if task.exception() is not None:
                self.logger.error(
                    "Indicator fetch raised", intent=spec.intent.value, error=str(task.exception())
                )
                continue
            if task.result() is not None:
                readings.append(task.result())

        if not readings:
            self.logger.info("No indicator data available", intent=spec.intent.value)
            return None

        return IndicatorBundle(intent=spec.intent, heading=spec.heading, readings=readings)

    async def _fetch_reading(
        self,
        client: httpx.AsyncClient,
        series: SeriesSpec,
        intent: IndicatorIntent,
    ) -> IndicatorReading | None:
        logger = log_indicator_fetch(series_id=series.series_id, intent=intent.value)
        params = {
            "series_id": series.series_id,
            "api_key": self.api_key,
            "file_type": "json",
            "limit": "1",
            "sort_order": "desc",
        }

        try:
            response = await client.get("/series/observations", params=params)
            response.raise_for_status()
            observations = response.json().get("observations") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("FRED request failed", error=str(e))
            return None

        if not observations:
            logger.warning("FRED returned no observations")
            return None

        observation = observations[0]
        try:
            value = float(observation["value"])
            observed_on = date.fromisoformat(observation["date"])
            if not math.isfinite(value):
                raise ValueError(value)
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "FRED observation is not numeric", observation=observation
            )
            return None

        logger.info("FRED observation fetched", value=value, observed_on=str(observed_on))
        return IndicatorReading(
            series_id=series.series_id,
            series_label=series.label,
            value=value,
            observed_on=observed_on,
            formatted_value=series.formatter(value),
        )
