"""Main Hass2Matter bridge application."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from bridge_config import BridgeConfig
from constants import ACTION_CONFIRM_DELAY
from endpoints import ENDPOINT_FACTORIES, HubEndpoint, create_endpoint
from hub_client import HubClient
from models import Action, ActionRequest, EntityState

logger = logging.getLogger(__name__)

AttributeListener = Callable[[str, str, Dict[str, Any]], None]


class Hass2Matter:
    """Main bridge application."""

    def __init__(self, config: BridgeConfig, client: Optional[HubClient] = None):
        self.config = config
        self.loop = asyncio.get_running_loop()
        self.action_queue: asyncio.Queue[ActionRequest] = asyncio.Queue()
        self.client = client or HubClient(config.hub_url, config.hub_token)

        self.endpoints: Dict[str, HubEndpoint] = {}
        # Track last reported attributes to only notify on change
        self.last_attributes: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.listeners: List[AttributeListener] = []
        self.confirm_delay = ACTION_CONFIRM_DELAY

        self.running = True

    async def start(self):
        """Start the bridge."""
        await self.client.connect()
        await self.refresh_snapshot()

        self._tasks = [
            asyncio.create_task(self.periodic_refresh_task(), name="refresh"),
            asyncio.create_task(self.action_consumer_task(), name="action_consumer"),
        ]

        # Wait until tasks finish (they won't until stopped)
        await asyncio.gather(*self._tasks)

    async def stop(self):
        """Stop the bridge."""
        if not self.running:
            return
        self.running = False

        tasks = getattr(self, "_tasks", [])
        for t in tasks:
            t.cancel()
        for t in tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Task {t.get_name()} ended with {e!r}")

        await self.client.close()

    def add_listener(self, listener: AttributeListener):
        """Register a callback for attribute changes: (entity_id, cluster, attributes)."""
        self.listeners.append(listener)

    def dispatch(self, entity_id: str, action: Action):
        """Queue an action for the hub; safe to call from any thread."""
        self.loop.call_soon_threadsafe(self.action_queue.put_nowait, ActionRequest(entity_id, action))

    def handle_command(self, entity_id: str, cluster: Union[str, int], command: str, *args: Any) -> Action:
        """Entry point for Matter commands addressed to a bridged entity."""
        endpoint = self.endpoints.get(entity_id)
        if endpoint is None:
            raise KeyError(f"Unknown endpoint {entity_id}")
        logger.info(f"Matter command {cluster}.{command}{args} for {entity_id}")
        return endpoint.invoke(cluster, command, *args)

    def attributes(self, entity_id: str) -> Dict[str, Dict[str, Any]]:
        endpoint = self.endpoints.get(entity_id)
        if endpoint is None:
            return {}
        return {cluster: dict(server.attributes) for cluster, server in endpoint.servers.items()}

    def _is_bridged(self, entity: EntityState) -> bool:
        if self.config.entities:
            return entity.entity_id in self.config.entities
        return entity.domain in ENDPOINT_FACTORIES

    def apply_state(self, entity: EntityState):
        """Push one hub state snapshot through its endpoint."""
        endpoint = self.endpoints.get(entity.entity_id)
        if endpoint is None:
            endpoint = create_endpoint(entity, self.config, self.dispatch)
            if endpoint is None:
                return
            self.endpoints[entity.entity_id] = endpoint

        for cluster, attrs in endpoint.update(entity).items():
            key = (entity.entity_id, cluster)
            if self.last_attributes.get(key) == attrs:
                continue
            self.last_attributes[key] = dict(attrs)
            logger.info(f"{entity.entity_id} {cluster}: {attrs}")
            for listener in self.listeners:
                try:
                    listener(entity.entity_id, cluster, dict(attrs))
                except Exception as e:
                    logger.error(f"Attribute listener failed for {entity.entity_id}: {e}", exc_info=True)

    async def refresh_snapshot(self):
        """Refresh snapshot and update all endpoints."""
        states = await self.client.get_states()
        bridged = [e for e in states if self._is_bridged(e)]
        if not bridged:
            logger.debug("No bridged entities found")
            return
        for entity in bridged:
            self.apply_state(entity)

        missing = set(self.config.entities) - {e.entity_id for e in bridged}
        if missing:
            logger.warning(f"Configured entities not reported by hub: {', '.join(sorted(missing))}")

    async def periodic_refresh_task(self):
        """Periodically refresh snapshot from the hub."""
        while self.running:
            await asyncio.sleep(self.config.refresh_interval)
            if not self.running:
                break
            try:
                await self.refresh_snapshot()
            except Exception as e:
                if not self.running:
                    break
                logger.error(f"Snapshot refresh error: {e}", exc_info=True)

    async def process_request(self, request: ActionRequest):
        """Send one queued action to the hub and re-read the entity."""
        logger.info(f"Dispatching {request.action.action} to {request.entity_id}")
        try:
            await self.client.call_service(request.entity_id, request.action)
            logger.info(f"Action {request.action.action} sent successfully to {request.entity_id}")
            # Re-read to confirm real state
            await asyncio.sleep(self.confirm_delay)
            entity = await self.client.get_state(request.entity_id)
            if entity is not None:
                self.apply_state(entity)
        except Exception as e:
            logger.error(
                f"Failed to dispatch {request.action.action} to {request.entity_id}: {e}",
                exc_info=True,
            )

    async def action_consumer_task(self):
        """Consume queued actions and send them to the hub."""
        while self.running:
            request = await self.action_queue.get()
            try:
                await self.process_request(request)
            finally:
                self.action_queue.task_done()
