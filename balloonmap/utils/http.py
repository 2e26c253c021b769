# balloonmap/utils/http.py
import httpx
from typing import Optional

async def get_json(url: str, headers: Optional[dict] = None, params: Optional[dict] = None,
                   timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
    """GET and decode JSON. Reuses `client` when given, else opens a short-lived one."""
    if client is not None:
        r = await client.get(url, headers=headers, params=params)
        r.raise_for_status()
        return r.json()
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own:
        r = await own.get(url, headers=headers, params=params)
        r.raise_for_status()
        return r.json()
