"""LevelControl cluster server."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from behavior_server import BehaviorContext, BehaviorServer, Dispatch
from clusters import LEVEL_CONTROL
from constants import MATTER_LEVEL_MAX, MATTER_LEVEL_MIN
from conversions import level_to_percent, percent_to_level
from models import Action, EntityState


@dataclass(frozen=True)
class LevelControlConfig:
    get_value_percent: Callable[[EntityState, BehaviorContext], Optional[float]]
    move_to_level_percent: Callable[[float, BehaviorContext], Action]


class LevelControlServer(BehaviorServer):
    """
    Exposes currentLevel/onLevel and the move-to-level commands.

    The last commanded level is remembered as onLevel so an OnOff server on
    the same endpoint can restore it.
    """

    cluster = LEVEL_CONTROL
    commands = ("move_to_level", "move_to_level_with_on_off")

    def __init__(self, config: LevelControlConfig, context: BehaviorContext, dispatch: Dispatch):
        super().__init__(config, context, dispatch)
        self.min_level = MATTER_LEVEL_MIN
        self.max_level = MATTER_LEVEL_MAX
        self.on_level: Optional[int] = None

    def read_attributes(self, entity: EntityState) -> Dict[str, Any]:
        """Compute this cluster's attributes from a state snapshot."""
        percent = self.config.get_value_percent(entity, self.context)
        current = None if percent is None else percent_to_level(percent, self.min_level, self.max_level)
        return {
            "currentLevel": current,
            "minLevel": self.min_level,
            "maxLevel": self.max_level,
            "onLevel": self.on_level,
        }

    def get_on_level(self) -> Optional[int]:
        """The remembered onLevel, or None."""
        return self.on_level

    def write_on_level(self, level: Optional[int]):
        """Store onLevel; None clears it, other values must be 1-254."""
        if level is not None and not self.min_level <= level <= self.max_level:
            raise ValueError(f"onLevel {level} outside {self.min_level}-{self.max_level}")
        self.on_level = level
        self.attributes["onLevel"] = level

    def move_to_level(self, level: int) -> Action:
        """Matter MoveToLevel; also becomes the new onLevel."""
        self.write_on_level(max(self.min_level, min(self.max_level, level)))
        return self._emit(self.config.move_to_level_percent(level_to_percent(level), self.context))

    def move_to_level_with_on_off(self, level: int) -> Action:
        # turn_on with a brightness payload switches the light on as well
        return self.move_to_level(level)
