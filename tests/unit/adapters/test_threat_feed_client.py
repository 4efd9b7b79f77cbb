"""
Unit tests for the HTTP threat feed client
"""

import httpx
import pytest

from src.adapter.services.threat_feed_client import HttpThreatFeedClient


def make_client(handler):
    return HttpThreatFeedClient(
        misp_base_url="https://misp.test",
        misp_api_key="misp-key",
        otx_base_url="https://otx.test/api/v1",
        otx_api_key="otx-key",
        threatcrowd_base_url="https://threatcrowd.test/api/v2",
        timeout=1,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_threats_from_all_providers():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "misp.test":
            assert request.headers["Authorization"] == "misp-key"
            return httpx.Response(
                200, json=[{"threat_level_id": 1, "attribute_count": 12, "date": "2024-01-01"}]
            )
        if request.url.host == "otx.test":
            assert request.headers["X-OTX-API-KEY"] == "otx-key"
            return httpx.Response(
                200,
                json={"results": [{"threat_type": "phishing", "indicator_count": 3, "created": "2024-01-02"}]},
            )
        return httpx.Response(
            200, json=[{"type": "malware", "count": 7, "first_seen": "2024-01-03"}]
        )

    threats = await make_client(handler).fetch_threats()

    assert [(t.source, t.type, t.observed_instances) for t in threats] == [
        ("MISP", "1", 12),
        ("OTX", "phishing", 3),
        ("ThreatCrowd", "malware", 7),
    ]


@pytest.mark.asyncio
async def test_failing_provider_contributes_nothing():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "otx.test":
            return httpx.Response(503)
        if request.url.host == "misp.test":
            return httpx.Response(200, content=b"not json")
        return httpx.Response(200, json=[{"type": "network_scan", "count": 1}])

    threats = await make_client(handler).fetch_threats()

    assert [t.source for t in threats] == ["ThreatCrowd"]


@pytest.mark.asyncio
async def test_unconfigured_misp_and_otx_are_skipped():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.host)
        return httpx.Response(200, json=[])

    client = make_client(handler)
    client.misp_base_url = ""
    client.otx_api_key = ""

    assert await client.fetch_threats() == []
    assert requested == ["threatcrowd.test"]


@pytest.mark.asyncio
async def test_unexpected_payload_shape_contributes_nothing():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "misp.test":
            return httpx.Response(200, json={"response": [{"threat_level_id": 1}]})
        if request.url.host == "otx.test":
            return httpx.Response(200, json={"results": "none"})
        return httpx.Response(200, json=["malware", {"type": "phishing", "count": 2}])

    threats = await make_client(handler).fetch_threats()

    assert [(t.source, t.type) for t in threats] == [("ThreatCrowd", "phishing")]
