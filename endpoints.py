"""Device category wiring: which cluster servers back which hub entity."""

import logging
from typing import Any, Dict, Optional, Union

from behavior_server import BehaviorContext, BehaviorServer, Dispatch
from bridge_config import BridgeConfig
from clusters import cluster_name
from color_control_server import ColorControlServer
from constants import (
    COLOR_MODE_COLOR_TEMP,
    COLOR_MODE_ONOFF,
    COLOR_MODES_HS,
    COVER_SUPPORT_TILT_MASK,
)
from cover_behaviors import COVER_WINDOW_COVERING_CONFIG
from level_control_server import LevelControlServer
from light_behaviors import (
    light_color_control_config,
    light_level_control_config,
    light_on_off_config,
)
from models import Action, EntityState
from on_off_server import OnOffServer
from switch_behaviors import SWITCH_ON_OFF_CONFIG
from window_covering_server import WindowCoveringServer

logger = logging.getLogger(__name__)


class HubEndpoint:
    """One Matter endpoint: the cluster servers for a single hub entity."""

    def __init__(self, entity_id: str, device_type: str):
        self.entity_id = entity_id
        self.device_type = device_type
        self.servers: Dict[str, BehaviorServer] = {}

    def add(self, server: BehaviorServer) -> BehaviorServer:
        """Attach a cluster server to this endpoint."""
        self.servers[server.cluster] = server
        return server

    def update(self, entity: EntityState) -> Dict[str, Dict[str, Any]]:
        """Fan a new state snapshot out to every cluster."""
        return {cluster: server.update(entity) for cluster, server in self.servers.items()}

    def invoke(self, cluster: Union[str, int], command: str, *args: Any) -> Action:
        """Route a Matter command to a cluster, addressed by name or cluster id."""
        cluster = cluster_name(cluster)
        if cluster not in self.servers:
            raise KeyError(f"{self.entity_id} has no {cluster} cluster")
        return self.servers[cluster].invoke(command, *args)


def _light_endpoint(entity: EntityState, config: BridgeConfig, dispatch: Dispatch) -> HubEndpoint:
    policy = config.policy_for(entity.domain)
    modes = set(entity.attributes.get("supported_color_modes") or [COLOR_MODE_ONOFF])
    dimmable = bool(modes - {COLOR_MODE_ONOFF})
    color_temperature = COLOR_MODE_COLOR_TEMP in modes
    hue_saturation = bool(modes.intersection(COLOR_MODES_HS))

    endpoint = HubEndpoint(entity.entity_id, "dimmable_light" if dimmable else "on_off_light")
    level_server: Optional[LevelControlServer] = None
    if dimmable:
        level_context = BehaviorContext(entity.entity_id, config.feature_flags)
        level_server = LevelControlServer(
            light_level_control_config(policy.missing_brightness_level), level_context, dispatch
        )

    on_off_context = BehaviorContext(
        entity.entity_id,
        config.feature_flags,
        on_level=level_server.get_on_level if level_server and policy.restore_on_level else None,
    )
    endpoint.add(OnOffServer(light_on_off_config(policy.restore_on_level), on_off_context, dispatch))
    if level_server is not None:
        endpoint.add(level_server)

    if color_temperature or hue_saturation:
        endpoint.device_type = "extended_color_light" if hue_saturation else "color_temperature_light"
        endpoint.add(ColorControlServer(
            light_color_control_config(policy.default_color_temp_bounds),
            BehaviorContext(entity.entity_id, config.feature_flags),
            dispatch,
            color_temperature=color_temperature,
            hue_saturation=hue_saturation,
        ))
    return endpoint


def _cover_endpoint(entity: EntityState, config: BridgeConfig, dispatch: Dispatch) -> HubEndpoint:
    features = entity.attributes.get("supported_features") or 0
    tilt = bool(features & COVER_SUPPORT_TILT_MASK) or "current_tilt_position" in entity.attributes
    endpoint = HubEndpoint(entity.entity_id, "window_covering")
    endpoint.add(WindowCoveringServer(
        COVER_WINDOW_COVERING_CONFIG,
        BehaviorContext(entity.entity_id, config.feature_flags),
        dispatch,
        tilt=tilt,
    ))
    return endpoint


def _switch_endpoint(entity: EntityState, config: BridgeConfig, dispatch: Dispatch) -> HubEndpoint:
    endpoint = HubEndpoint(entity.entity_id, "on_off_plug_in_unit")
    endpoint.add(OnOffServer(
        SWITCH_ON_OFF_CONFIG, BehaviorContext(entity.entity_id, config.feature_flags), dispatch
    ))
    return endpoint


ENDPOINT_FACTORIES = {
    "light": _light_endpoint,
    "cover": _cover_endpoint,
    "switch": _switch_endpoint,
    "input_boolean": _switch_endpoint,
}


def create_endpoint(entity: EntityState, config: BridgeConfig, dispatch: Dispatch) -> Optional[HubEndpoint]:
    """Build the endpoint for an entity, or None if its domain is not bridged."""
    factory = ENDPOINT_FACTORIES.get(entity.domain)
    if factory is None:
        logger.debug(f"No endpoint type for {entity.entity_id}")
        return None
    endpoint = factory(entity, config, dispatch)
    logger.info(
        f"Created {endpoint.device_type} endpoint for {entity.entity_id}: "
        f"{', '.join(endpoint.servers)}"
    )
    return endpoint
