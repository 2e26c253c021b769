import asyncio
import json

import httpx

from balloonmap.core.config import settings
from balloonmap.services import feeds


def _run_with(handler, fn, *args):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fn(*args, client=client)
    return asyncio.run(go())


def test_balloon_hour_url_is_zero_padded():
    assert feeds.balloon_hour_url(3) == f"{settings.treasure_base}/03.json"


def test_fetch_last_hours_keeps_failed_slots():
    def handler(request):
        name = request.url.path.rsplit("/", 1)[-1]
        if name == "01.json":
            return httpx.Response(500)
        if name == "02.json":
            return httpx.Response(200, content=b"[[1, 2, 3], [4, 5")
        return httpx.Response(200, json=[[int(name[:2]), 0, 100]])

    hours = _run_with(handler, feeds.fetch_last_hours, 4)

    assert hours == [[[0, 0, 100]], None, None, [[3, 0, 100]]]


def test_transport_error_is_absent_hour():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert _run_with(handler, feeds.fetch_balloon_hour, 0) is None


def test_active_alerts_sends_user_agent_and_returns_features():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers.get("user-agent")
        seen["query"] = dict(request.url.params)
        return httpx.Response(200, content=json.dumps({"features": [{"id": "a"}]}).encode())

    feats = _run_with(handler, feeds.fetch_alerts_for_point, 35.0, -97.5)

    assert feats == [{"id": "a"}]
    assert seen["ua"] == settings.nws_user_agent
    assert seen["query"] == {"point": "35.0000,-97.5000"}


def test_alert_failures_give_empty_list():
    assert _run_with(lambda r: httpx.Response(503), feeds.fetch_active_alerts) == []
    assert _run_with(lambda r: httpx.Response(200, json={"type": "FeatureCollection"}), feeds.fetch_active_alerts) == []
    assert _run_with(lambda r: httpx.Response(200, content=b"<html>"), feeds.fetch_active_alerts) == []
