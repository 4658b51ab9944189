"""
Read.ai client - API key check and meeting list passthrough.

Meeting listing never fails the request: when Read.ai cannot be reached the
caller gets a fixed sample list tagged with source "mock".
"""
import re
from typing import Optional

import httpx

from cago.config import get_settings
from cago.utils.errors import ValidationError
from cago.utils.logger import logger

MIN_API_KEY_LENGTH = 20
API_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")

MOCK_MEETINGS = [
    {
        "id": "mock-1",
        "title": "Mentor session: first portfolio review",
        "start_time": "2025-01-14T17:00:00Z",
        "duration_minutes": 45,
        "participants": ["You", "Mentor"],
    },
    {
        "id": "mock-2",
        "title": "Coffee chat with a data team lead",
        "start_time": "2025-01-09T15:30:00Z",
        "duration_minutes": 30,
        "participants": ["You", "Team lead"],
    },
]


def validate_api_key(api_key: Optional[str]) -> str:
    key = (api_key or "").strip()
    if not key:
        raise ValidationError("Read.ai API key is required")
    if len(key) < MIN_API_KEY_LENGTH or not API_KEY_PATTERN.match(key):
        raise ValidationError("Read.ai API key looks malformed")
    return key


class ReadAIClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.readai_base_url).rstrip("/")
        self.timeout = timeout or settings.readai_timeout_seconds
        self.transport = transport

    def _client(self, api_key: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
        )

    async def connect(self, api_key: Optional[str]) -> dict:
        """Validate the key locally, then probe Read.ai with it."""
        key = validate_api_key(api_key)

        try:
            async with self._client(key) as client:
                resp = await client.get("/meetings", params={"limit": 1})
        except httpx.HTTPError as e:
            logger.warning(f"[Read.ai] Connect probe failed: {e}")
            return {"connected": False, "status": "unavailable"}

        if resp.status_code in (401, 403):
            raise ValidationError("Read.ai rejected the API key")
        if resp.status_code >= 400:
            logger.warning(f"[Read.ai] Connect probe returned {resp.status_code}")
            return {"connected": False, "status": "unavailable"}

        logger.info("[Read.ai] Connected")
        return {"connected": True, "status": "connected"}

    async def list_meetings(self, api_key: Optional[str]) -> dict:
        """Recent meetings from Read.ai, or the mock list when it is unreachable."""
        key = validate_api_key(api_key)

        try:
            async with self._client(key) as client:
                resp = await client.get("/meetings")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[Read.ai] Meeting list unavailable, returning mock data: {e}")
            return {"meetings": MOCK_MEETINGS, "source": "mock"}

        meetings = data.get("meetings", data.get("data", [])) if isinstance(data, dict) else data
        return {"meetings": meetings, "source": "readai"}
