"""Data models and dataclasses."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class EntityState:
    """Immutable snapshot of one hub entity."""
    entity_id: str
    state: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # freeze the attribute bag so readers can't mutate a shared snapshot
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes or {})))

    @property
    def domain(self) -> str:
        return self.entity_id.split(".", 1)[0]


@dataclass(frozen=True)
class Action:
    """Intent to call a hub action, e.g. ``light.turn_on``."""
    action: str
    data: Optional[Dict[str, Any]] = None

    @property
    def domain(self) -> str:
        return self.action.split(".", 1)[0]

    @property
    def service(self) -> str:
        return self.action.split(".", 1)[1]


@dataclass(frozen=True)
class FeatureFlags:
    """Bridge-wide switches that alter translation policy."""
    cover_do_not_invert_percentage: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FeatureFlags":
        """Build flags from the feature_flags config section."""
        data = data or {}
        unknown = set(data) - {"cover_do_not_invert_percentage"}
        if unknown:
            raise ValueError(f"Unknown feature flags: {', '.join(sorted(unknown))}")
        value = data.get("cover_do_not_invert_percentage", False)
        if not isinstance(value, bool):
            raise ValueError(f"cover_do_not_invert_percentage must be true or false, got {value!r}")
        return cls(cover_do_not_invert_percentage=value)


@dataclass
class ActionRequest:
    """Action queued for dispatch to the hub."""
    entity_id: str
    action: Action
