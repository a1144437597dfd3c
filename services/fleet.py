# services/fleet.py
# Available-truck counts per transporter, from the fleet data source.

import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

import aiohttp
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _clean_base(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    return raw.strip().rstrip("/") or None


FLEET_API_BASE = _clean_base(os.getenv("FLEET_API_BASE"))
FLEET_API_TOKEN = (os.getenv("FLEET_API_TOKEN") or "").strip()
FLEET_TIMEOUT_SEC = float(os.getenv("FLEET_TIMEOUT_SEC", "10"))

BASE_HEADERS = {"Accept": "application/json"}
HEADERS = ({**BASE_HEADERS, "Authorization": f"Bearer {FLEET_API_TOKEN}"} if FLEET_API_TOKEN else BASE_HEADERS)

Fetcher = Callable[[str], Awaitable[int]]


class FleetLookupError(RuntimeError):
    """Fleet source unreachable or returned something we can't count."""


def _count_from_payload(payload: Any) -> int:
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, dict):
        for key in ("count", "available", "available_trucks", "total"):
            v = payload.get(key)
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                return max(0, int(v))
        for key in ("data", "items", "results", "trucks"):
            v = payload.get(key)
            if isinstance(v, list):
                return len(v)
    raise FleetLookupError(f"Unrecognised fleet payload: {str(payload)[:200]}")


async def fetch_active_truck_count(company_id: str, base_url: Optional[str] = None) -> int:
    """GET {base}/companies/{id}/trucks?active=true -> count of active trucks."""
    base = base_url or FLEET_API_BASE
    if not base:
        logger.info("FLEET_API_BASE not set; %s resolves to 0 trucks", company_id)
        return 0

    url = f"{base}/companies/{company_id}/trucks"
    timeout = aiohttp.ClientTimeout(total=FLEET_TIMEOUT_SEC)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=HEADERS, params={"active": "true"}) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    raise FleetLookupError(f"Fleet GET {resp.status} @ {url} :: {text[:200]}")
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise FleetLookupError(f"Fleet JSON parse error @ {url}: {e} :: {text[:200]}") from e
    except aiohttp.ClientError as e:
        raise FleetLookupError(f"Fleet request failed @ {url}: {e}") from e
    except asyncio.TimeoutError as e:
        raise FleetLookupError(f"Fleet request timed out @ {url}") from e

    return _count_from_payload(payload)


class FleetLookup:
    """
    Per-planning-session cache of truck counts. Counts are fetched once per
    company; call refresh() to drop them before re-validating.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None):
        self._fetch = fetcher or fetch_active_truck_count
        self._counts: Dict[str, int] = {}

    @property
    def known(self) -> Dict[str, int]:
        return dict(self._counts)

    def refresh(self, company_id: Optional[str] = None) -> None:
        if company_id is None:
            self._counts.clear()
        else:
            self._counts.pop(company_id, None)

    async def available_trucks(self, company_id: str) -> int:
        if company_id in self._counts:
            return self._counts[company_id]
        count = await self._fetch(company_id)
        self._counts[company_id] = int(count)
        return self._counts[company_id]

    async def resolve(self, company_ids: Iterable[str]) -> Dict[str, int]:
        ids = [cid for cid in dict.fromkeys(company_ids) if cid]
        counts = await asyncio.gather(*(self.available_trucks(cid) for cid in ids))
        return dict(zip(ids, counts))
