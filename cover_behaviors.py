"""Behavior config for hub covers."""

import logging
from typing import Optional

from behavior_server import BehaviorContext
from clusters import MovementStatus
from constants import (
    ACTION_COVER_CLOSE,
    ACTION_COVER_CLOSE_TILT,
    ACTION_COVER_OPEN,
    ACTION_COVER_OPEN_TILT,
    ACTION_COVER_SET_POSITION,
    ACTION_COVER_SET_TILT_POSITION,
    ACTION_COVER_STOP,
    STATE_CLOSED,
    STATE_CLOSING,
    STATE_OPEN,
    STATE_OPENING,
)
from conversions import adjust_percentage
from models import Action, EntityState
from window_covering_server import WindowCoveringConfig

logger = logging.getLogger(__name__)


def adjust_position(position: Optional[float], context: BehaviorContext) -> Optional[float]:
    """Hub and Matter count position from opposite ends unless the bridge opts out."""
    invert = context.feature_flags.cover_do_not_invert_percentage is not True
    adjusted = adjust_percentage(position, invert)
    logger.debug(
        f"[{context.entity_id}] adjust_position: {'inverted' if invert else 'kept'} {position} -> {adjusted}"
    )
    return adjusted


def _position_from_state(entity: EntityState) -> Optional[int]:
    if entity.state == STATE_CLOSED:
        return 100
    if entity.state == STATE_OPEN:
        return 0
    return None


def _position_reader(attribute: str):
    def read(entity: EntityState, context: BehaviorContext) -> Optional[float]:
        position = entity.attributes.get(attribute)
        if position is None:
            position = _position_from_state(entity)
            logger.debug(
                f"[{entity.entity_id}] no {attribute}, using state {entity.state} -> {position}"
            )
        return adjust_position(position, context)

    return read


get_current_lift_position = _position_reader("current_position")
get_current_tilt_position = _position_reader("current_tilt_position")


def get_movement_status(entity: EntityState, context: BehaviorContext) -> MovementStatus:
    """opening and closing map to movement; every other state is Stopped."""
    if entity.state == STATE_OPENING:
        return MovementStatus.Opening
    if entity.state == STATE_CLOSING:
        return MovementStatus.Closing
    return MovementStatus.Stopped


def set_lift_position(position: float, context: BehaviorContext) -> Action:
    """Matter lift position (0-100) to cover.set_cover_position."""
    return Action(ACTION_COVER_SET_POSITION, {"position": adjust_position(position, context)})


def set_tilt_position(position: float, context: BehaviorContext) -> Action:
    return Action(ACTION_COVER_SET_TILT_POSITION, {"tilt_position": adjust_position(position, context)})


COVER_WINDOW_COVERING_CONFIG = WindowCoveringConfig(
    get_current_lift_position=get_current_lift_position,
    get_current_tilt_position=get_current_tilt_position,
    get_movement_status=get_movement_status,
    stop_cover=lambda context: Action(ACTION_COVER_STOP),
    open_cover_lift=lambda context: Action(ACTION_COVER_OPEN),
    close_cover_lift=lambda context: Action(ACTION_COVER_CLOSE),
    set_lift_position=set_lift_position,
    open_cover_tilt=lambda context: Action(ACTION_COVER_OPEN_TILT),
    close_cover_tilt=lambda context: Action(ACTION_COVER_CLOSE_TILT),
    set_tilt_position=set_tilt_position,
)
