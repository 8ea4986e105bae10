"""Bridge configuration loading."""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import DEFAULT_CONFIG_EXAMPLE_FILE, DEFAULT_CONFIG_FILE, SNAPSHOT_REFRESH_INTERVAL
from models import FeatureFlags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryPolicy:
    """Per device category choices where hub integrations disagree."""
    missing_brightness_level: float = 0.0  # reported level when a light omits brightness
    default_color_temp_bounds: bool = True  # fill in 2700/6500/4000K when omitted
    restore_on_level: bool = True  # turn_on sends the remembered onLevel

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryPolicy":
        """Build a policy from one entry of the categories config section."""
        known_fields = {"missing_brightness_level", "default_color_temp_bounds", "restore_on_level"}
        unknown = set(data) - known_fields
        if unknown:
            raise ValueError(f"Unknown category options: {', '.join(sorted(unknown))}")
        for name in ("default_color_temp_bounds", "restore_on_level"):
            if name in data and not isinstance(data[name], bool):
                raise ValueError(f"{name} must be true or false, got {data[name]!r}")
        level = data.get("missing_brightness_level", 0.0)
        if isinstance(level, bool) or not isinstance(level, (int, float)):
            raise ValueError(f"missing_brightness_level must be a number, got {level!r}")
        policy = cls(**data)
        if not 0 <= policy.missing_brightness_level <= 1:
            raise ValueError(
                f"missing_brightness_level must be within 0..1, got {policy.missing_brightness_level}"
            )
        return policy


@dataclass(frozen=True)
class BridgeConfig:
    """Everything one bridge instance needs."""
    hub_url: str
    hub_token: Optional[str] = None
    feature_flags: FeatureFlags = FeatureFlags()
    categories: Dict[str, CategoryPolicy] = field(default_factory=dict)
    entities: List[str] = field(default_factory=list)
    refresh_interval: float = SNAPSHOT_REFRESH_INTERVAL

    def policy_for(self, domain: str) -> CategoryPolicy:
        """Policy for a device category, falling back to the defaults."""
        return self.categories.get(domain, CategoryPolicy())


def parse_config(config: Dict[str, Any]) -> BridgeConfig:
    """Validate a raw config mapping and build a BridgeConfig."""
    if not config:
        raise ValueError("Configuration is empty")

    # Validate required sections
    if 'hub' not in config:
        raise ValueError("Missing 'hub' section in configuration")
    hub_config = config.get('hub') or {}
    if 'url' not in hub_config:
        raise ValueError("Missing 'hub.url' in configuration")

    categories: Dict[str, CategoryPolicy] = {}
    for domain, options in (config.get('categories') or {}).items():
        try:
            categories[domain] = CategoryPolicy.from_dict(options or {})
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid options for category '{domain}': {e}")

    entities = config.get('entities') or []
    if not isinstance(entities, list) or not all(isinstance(e, str) and "." in e for e in entities):
        raise ValueError("'entities' must be a list of entity ids like 'light.kitchen'")

    refresh_interval = config.get('refresh_interval', SNAPSHOT_REFRESH_INTERVAL)
    if isinstance(refresh_interval, bool) or not isinstance(refresh_interval, (int, float)) or refresh_interval <= 0:
        raise ValueError(f"'refresh_interval' must be a positive number, got {refresh_interval!r}")

    return BridgeConfig(
        hub_url=str(hub_config['url']).rstrip("/"),
        hub_token=hub_config.get('token'),
        feature_flags=FeatureFlags.from_dict(config.get('feature_flags')),
        categories=categories,
        entities=entities,
        refresh_interval=refresh_interval,
    )


def load_config(path: str = DEFAULT_CONFIG_FILE) -> BridgeConfig:
    """Load and validate configuration file."""
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"Configuration file '{path}' not found. "
            f"Please copy '{DEFAULT_CONFIG_EXAMPLE_FILE}' to '{path}' "
            f"and update with your settings."
        )

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in '{path}': {e}")

    if not config:
        raise ValueError(f"'{path}' is empty")
    if not isinstance(config, dict):
        raise ValueError(f"'{path}' must contain a mapping")

    bridge_config = parse_config(config)
    logger.debug(f"Loaded configuration from {path}: {len(bridge_config.entities)} entities")
    return bridge_config
