"""Hub REST client."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from api_paths import path_service, path_state, path_states
from constants import HUB_CONNECT_TIMEOUT, HUB_REQUEST_TIMEOUT
from hub_helpers import parse_entity_state, parse_entity_states
from models import Action, EntityState

logger = logging.getLogger(__name__)


class HubError(Exception):
    """Raised when the hub rejects or fails a request."""


class HubClient:
    """
    Minimal client for:
      - state snapshots (GET /api/states)
      - action dispatch (POST /api/services/<domain>/<service>)
    """

    def __init__(self, url: str, token: Optional[str] = None):
        self.url = url.rstrip("/")
        self.token = token
        self.session: Optional[aiohttp.ClientSession] = None

    async def connect(self):
        """Open the HTTP session."""
        if self.session is None or self.session.closed:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self.session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=HUB_REQUEST_TIMEOUT, connect=HUB_CONNECT_TIMEOUT),
            )
            logger.info(f"Hub client ready for {self.url}")

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None, allow_missing: bool = False
    ) -> Any:
        if self.session is None or self.session.closed:
            raise RuntimeError("Hub client not connected")
        url = f"{self.url}{path}"
        try:
            async with self.session.request(method, url, json=payload) as resp:
                if resp.status == 404 and allow_missing:
                    return None
                if resp.status >= 400:
                    body = await resp.text()
                    raise HubError(f"{method} {path} failed with {resp.status}: {body[:200]}")
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise HubError(f"{method} {path} failed: {e}") from e

    async def get_states(self) -> List[EntityState]:
        """Get snapshot of all entities."""
        states = parse_entity_states(await self._request("GET", path_states()))
        logger.debug(f"Retrieved {len(states)} entity states from hub")
        return states

    async def get_state(self, entity_id: str) -> Optional[EntityState]:
        """Get one entity, or None if the hub does not know it."""
        raw = await self._request("GET", path_state(entity_id), allow_missing=True)
        return None if raw is None else parse_entity_state(raw)

    async def call_service(self, entity_id: str, action: Action):
        """Perform an action against one entity."""
        payload = dict(action.data or {})
        payload["entity_id"] = entity_id
        logger.debug(f"Calling {action.action} for {entity_id}: {payload}")
        return await self._request("POST", path_service(action), payload)
