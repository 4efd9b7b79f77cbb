"""
HTTP threat feed client for MISP, AlienVault OTX and ThreatCrowd.
"""

import asyncio
import logging
from typing import Any, List, Optional

import httpx

from config import ApplicationConfig
from src.app.services.threat_intelligence import IThreatFeedClient, ThreatRecord

logger = logging.getLogger(__name__)

MISP_EVENT_LIMIT = 100


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_text(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _json_records(response: httpx.Response, key: Optional[str] = None) -> List[dict]:
    """Feed entries from a JSON body; a body of any other shape is a ValueError."""
    payload = response.json()
    if key is not None:
        payload = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(payload, list):
        raise ValueError(f"unexpected payload shape: {type(payload).__name__}")
    return [entry for entry in payload if isinstance(entry, dict)]


class HttpThreatFeedClient(IThreatFeedClient):
    def __init__(
        self,
        misp_base_url: Optional[str] = None,
        misp_api_key: Optional[str] = None,
        otx_base_url: Optional[str] = None,
        otx_api_key: Optional[str] = None,
        threatcrowd_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.misp_base_url = (misp_base_url or ApplicationConfig.MISP_BASE_URL).rstrip("/")
        self.misp_api_key = misp_api_key or ApplicationConfig.MISP_API_KEY
        self.otx_base_url = (otx_base_url or ApplicationConfig.OTX_BASE_URL).rstrip("/")
        self.otx_api_key = otx_api_key or ApplicationConfig.OTX_API_KEY
        self.threatcrowd_base_url = (
            threatcrowd_base_url or ApplicationConfig.THREATCROWD_BASE_URL
        ).rstrip("/")
        self.timeout = timeout or ApplicationConfig.THREAT_FEED_TIMEOUT_SECONDS
        self.transport = transport

    async def fetch_threats(self) -> List[ThreatRecord]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            batches = await asyncio.gather(
                self._guarded("MISP", self.fetch_misp_threats(client)),
                self._guarded("OTX", self.fetch_otx_threats(client)),
                self._guarded("ThreatCrowd", self.fetch_threatcrowd_threats(client)),
            )
        return [threat for batch in batches for threat in batch]

    async def _guarded(self, provider: str, fetch) -> List[ThreatRecord]:
        try:
            return await fetch
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.warning(f"{provider} threat fetch failed: {exc}")
            return []

    async def fetch_misp_threats(self, client: httpx.AsyncClient) -> List[ThreatRecord]:
        if not self.misp_base_url:
            return []

        response = await client.get(
            f"{self.misp_base_url}/events",
            headers={"Authorization": self.misp_api_key, "Accept": "application/json"},
            params={"limit": MISP_EVENT_LIMIT, "published": True},
        )
        response.raise_for_status()
        return [
            ThreatRecord(
                source="MISP",
                type=_as_text(event.get("threat_level_id")),
                observed_instances=_as_int(event.get("attribute_count")),
                timestamp=event.get("date"),
            )
            for event in _json_records(response)
        ]

    async def fetch_otx_threats(self, client: httpx.AsyncClient) -> List[ThreatRecord]:
        if not self.otx_api_key:
            return []

        response = await client.get(
            f"{self.otx_base_url}/pulses/subscribed",
            headers={"X-OTX-API-KEY": self.otx_api_key},
        )
        response.raise_for_status()
        return [
            ThreatRecord(
                source="OTX",
                type=pulse.get("threat_type"),
                observed_instances=_as_int(pulse.get("indicator_count")),
                timestamp=pulse.get("created"),
            )
            for pulse in _json_records(response, "results")
        ]

    async def fetch_threatcrowd_threats(self, client: httpx.AsyncClient) -> List[ThreatRecord]:
        response = await client.get(f"{self.threatcrowd_base_url}/recent_threats")
        response.raise_for_status()
        return [
            ThreatRecord(
                source="ThreatCrowd",
                type=threat.get("type"),
                observed_instances=_as_int(threat.get("count")),
                timestamp=threat.get("first_seen"),
            )
            for threat in _json_records(response)
        ]
