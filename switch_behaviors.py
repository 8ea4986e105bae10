"""Behavior config for plain on/off entities (switch, input_boolean)."""

from models import Action, EntityState
from on_off_server import OnOffConfig, is_on


def _domain_action(entity: EntityState, service: str) -> Action:
    return Action(f"{entity.domain}.{service}")


SWITCH_ON_OFF_CONFIG = OnOffConfig(
    is_on=is_on,
    turn_on=lambda entity, context: _domain_action(entity, "turn_on"),
    turn_off=lambda entity, context: _domain_action(entity, "turn_off"),
)
