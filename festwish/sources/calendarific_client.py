"""
Calendarific Holiday Source
==========================

Fetches the holidays for a single date and country from the Calendarific
API and normalizes them into ``EventRecord`` objects.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import aiohttp
import certifi

from ..models import EventRecord, EventFetchResult, FetchStatus
from ..utils.exceptions import ErrorCode, EventSourceError
from ..utils.logging import get_logger_for_component

CALENDARIFIC_URL = "https://calendarific.com/api/v2/holidays"


class CalendarificClient:
    """Holiday lookup against the Calendarific v2 API."""

    def __init__(self, api_key: Optional[str], country: str = "IN", timeout: int = 20):
        """Initialize client.

        Args:
            api_key: Calendarific API key (None disables lookups)
            country: ISO 3166 country code
            timeout: Total request timeout in seconds
        """
        self.api_key = api_key
        self.country = country
        self.timeout = timeout
        self.logger = get_logger_for_component("calendarific")
        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        """Get configured aiohttp session."""
        connector = aiohttp.TCPConnector(ssl=self.ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        headers = {"User-Agent": "FestWish/1.0", "Accept": "application/json"}

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout, headers=headers
        ) as session:
            yield session

    async def _request_json(self, params: Dict[str, str]) -> Any:
        async with self.get_session() as session:
            async with session.get(CALENDARIFIC_URL, params=params) as response:
                if response.status != 200:
                    raise EventSourceError(
                        f"Calendarific returned HTTP {response.status} {response.reason or ''}".strip(),
                        provider="calendarific",
                        error_code=ErrorCode.EVENT_SOURCE_BAD_RESPONSE,
                        context={"status": response.status},
                    )
                return await response.json(content_type=None)

    async def fetch_holidays(self, year: int, month: int, day: int) -> EventFetchResult:
        """Fetch holidays for one date.

        Args:
            year: Calendar year
            month: Month (1-12)
            day: Day of month

        Returns:
            EventFetchResult; transport and parse failures yield an ERROR status
        """
        if not self.api_key:
            self.logger.warning("Calendarific API key not configured; no events fetched")
            return EventFetchResult(status=FetchStatus.ERROR, error="Calendarific API key not configured")

        params = {
            "api_key": self.api_key,
            "country": self.country,
            "year": str(year),
            "month": str(month),
            "day": str(day),
        }
        date_label = f"{year:04d}-{month:02d}-{day:02d}"

        try:
            payload = await self._request_json(params)
        except asyncio.TimeoutError:
            error_msg = f"Request timeout after {self.timeout}s"
            self.logger.warning(f"Holiday fetch for {date_label} failed: {error_msg}")
            return EventFetchResult(status=FetchStatus.ERROR, error=error_msg)
        except (EventSourceError, aiohttp.ClientError, ValueError) as e:
            self.logger.warning(f"Holiday fetch for {date_label} failed: {e}")
            return EventFetchResult(status=FetchStatus.ERROR, error=str(e))

        holidays = self._extract_holidays(payload)
        if holidays is None:
            self.logger.warning(f"Unexpected Calendarific response shape for {date_label}")
            return EventFetchResult(status=FetchStatus.ERROR, error="Malformed provider response")

        events = self._parse_holidays(holidays)
        self.logger.info(
            f"Fetched {len(events)} holidays for {self.country} on {date_label}"
        )
        if not events:
            return EventFetchResult(status=FetchStatus.EMPTY)
        return EventFetchResult(status=FetchStatus.OK, events=events)

    async def fetch_events(self, year: int, month: int, day: int) -> List[EventRecord]:
        """Holidays for one date; empty on any failure."""
        result = await self.fetch_holidays(year, month, day)
        return result.events

    @staticmethod
    def _extract_holidays(payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, dict):
            return None
        response = payload.get("response")
        if not isinstance(response, dict):
            return None
        holidays = response.get("holidays")
        if not isinstance(holidays, list):
            return None
        return holidays

    def _parse_holidays(self, holidays: List[Any]) -> List[EventRecord]:
        events = []
        for raw in holidays:
            if not isinstance(raw, dict) or not raw.get("name"):
                self.logger.debug(f"Skipping unnamed holiday entry: {raw!r}")
                continue
            events.append(EventRecord.from_provider(raw))
        return events
