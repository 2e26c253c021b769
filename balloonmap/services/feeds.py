# balloonmap/services/feeds.py
"""HTTP access to the balloon feed and the NWS alerts API. Failures never raise."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import settings
from ..utils.http import get_json

logger = logging.getLogger(__name__)


def _nws_headers() -> Dict[str, str]:
    # api.weather.gov rejects requests without a User-Agent
    return {"User-Agent": settings.nws_user_agent, "Accept": "application/geo+json"}


def balloon_hour_url(hour_index: int) -> str:
    return f"{settings.treasure_base}/{hour_index:02d}.json"


async def fetch_balloon_hour(hour_index: int, client: Optional[httpx.AsyncClient] = None) -> Any:
    """Raw payload for one hour (0 = current), or None if the fetch failed."""
    url = balloon_hour_url(hour_index)
    try:
        return await get_json(url, timeout=settings.http_timeout, client=client)
    except httpx.HTTPStatusError as e:
        logger.warning("Balloon hour %02d: HTTP %s", hour_index, e.response.status_code)
    except httpx.HTTPError as e:
        logger.warning("Balloon hour %02d: %s", hour_index, e)
    except ValueError as e:
        # corrupted hours come back as truncated or garbled JSON
        logger.warning("Balloon hour %02d: bad JSON (%s)", hour_index, e)
    return None


async def fetch_last_hours(hours: Optional[int] = None, client: Optional[httpx.AsyncClient] = None) -> List[Any]:
    """
    Fetch hours 0..hours-1 concurrently.

    The result is indexed by hour; a failed hour stays in its slot as None so
    later hours keep their true index.
    """
    hours = hours or settings.hours_to_fetch
    if client is None:
        async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as own:
            return await fetch_last_hours(hours, own)
    return list(await asyncio.gather(*(fetch_balloon_hour(i, client) for i in range(hours))))


async def _fetch_features(params: Optional[dict], client: Optional[httpx.AsyncClient]) -> List[Dict[str, Any]]:
    url = settings.alerts_base
    try:
        data = await get_json(url, headers=_nws_headers(), params=params,
                              timeout=settings.http_timeout, client=client)
    except httpx.HTTPStatusError as e:
        logger.warning("NWS alerts: HTTP %s", e.response.status_code)
        return []
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("NWS alerts fetch failed: %s", e)
        return []

    feats = data.get("features") if isinstance(data, dict) else None
    if not isinstance(feats, list):
        logger.warning("NWS alerts: response has no feature list")
        return []
    return feats


async def fetch_active_alerts(client: Optional[httpx.AsyncClient] = None) -> List[Dict[str, Any]]:
    return await _fetch_features(None, client)


async def fetch_alerts_for_point(lat: float, lon: float, client: Optional[httpx.AsyncClient] = None) -> List[Dict[str, Any]]:
    return await _fetch_features({"point": f"{lat:.4f},{lon:.4f}"}, client)
