"""OnOff cluster server."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

from behavior_server import BehaviorContext, BehaviorServer
from clusters import ONOFF
from constants import STATE_ON
from models import Action, EntityState

logger = logging.getLogger(__name__)


def is_on(entity: EntityState, context: BehaviorContext) -> bool:
    """Only the "on" state counts as on; unavailable and unknown read as off."""
    on = entity.state == STATE_ON
    logger.debug(f"[{entity.entity_id}] isOn: state={entity.state} -> {on}")
    return on


@dataclass(frozen=True)
class OnOffConfig:
    is_on: Callable[[EntityState, BehaviorContext], bool]
    turn_on: Callable[[EntityState, BehaviorContext], Action]
    turn_off: Callable[[EntityState, BehaviorContext], Action]


class OnOffServer(BehaviorServer):
    """Exposes onOff and the on/off/toggle commands."""

    cluster = ONOFF
    commands = ("on", "off", "toggle")

    def read_attributes(self, entity: EntityState) -> Dict[str, Any]:
        """onOff from the config's is_on."""
        return {"onOff": bool(self.config.is_on(entity, self.context))}

    def on(self) -> Action:
        """Matter On command."""
        return self._emit(self.config.turn_on(self._require_entity(), self.context))

    def off(self) -> Action:
        """Matter Off command."""
        return self._emit(self.config.turn_off(self._require_entity(), self.context))

    def toggle(self) -> Action:
        """Off when the entity reads as on, otherwise on."""
        entity = self._require_entity()
        if self.config.is_on(entity, self.context):
            return self.off()
        return self.on()
