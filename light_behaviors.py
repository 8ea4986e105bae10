"""Behavior configs for hub lights."""

import logging
from typing import Any, Optional

from behavior_server import BehaviorContext
from clusters import ColorMode
from color_converter import Color, color_from_hub_attributes, color_to_hub_hs
from color_control_server import ColorControlConfig
from constants import (
    ACTION_LIGHT_TURN_OFF,
    ACTION_LIGHT_TURN_ON,
    COLOR_MODE_COLOR_TEMP,
    DEFAULT_CURRENT_KELVIN,
    DEFAULT_MAX_KELVIN,
    DEFAULT_MIN_KELVIN,
)
from conversions import brightness_to_percent, on_level_to_brightness, percent_to_brightness
from level_control_server import LevelControlConfig
from models import Action, EntityState
from on_off_server import OnOffConfig, is_on

logger = logging.getLogger(__name__)


def light_on_off_config(restore_on_level: bool = False) -> OnOffConfig:
    """
    OnOff for lights.

    With restore_on_level, turning on sends the brightness derived from the
    co-located LevelControl onLevel, when there is one.
    """

    def turn_on(entity: EntityState, context: BehaviorContext) -> Action:
        if restore_on_level and context.on_level is not None:
            on_level = context.on_level()
            if on_level is not None:
                return Action(ACTION_LIGHT_TURN_ON, {"brightness": on_level_to_brightness(on_level)})
        return Action(ACTION_LIGHT_TURN_ON)

    def turn_off(entity: EntityState, context: BehaviorContext) -> Action:
        return Action(ACTION_LIGHT_TURN_OFF)

    return OnOffConfig(is_on=is_on, turn_on=turn_on, turn_off=turn_off)


def light_level_control_config(missing_brightness_level: float = 0.0) -> LevelControlConfig:
    """LevelControl for lights; missing_brightness_level is reported when brightness is absent."""

    def get_value_percent(entity: EntityState, context: BehaviorContext) -> Optional[float]:
        brightness = entity.attributes.get("brightness")
        if brightness is not None:
            return brightness_to_percent(brightness)
        return missing_brightness_level

    def move_to_level_percent(percent: float, context: BehaviorContext) -> Action:
        return Action(ACTION_LIGHT_TURN_ON, {"brightness": percent_to_brightness(percent)})

    return LevelControlConfig(
        get_value_percent=get_value_percent,
        move_to_level_percent=move_to_level_percent,
    )


def get_current_mode(entity: EntityState, context: BehaviorContext) -> ColorMode:
    color_mode = entity.attributes.get("color_mode")
    if color_mode == COLOR_MODE_COLOR_TEMP:
        mode = ColorMode.ColorTemperatureMireds
    else:
        mode = ColorMode.CurrentHueAndCurrentSaturation
    logger.debug(f"[{entity.entity_id}] getCurrentMode: color_mode={color_mode} -> {mode.name}")
    return mode


def get_color(entity: EntityState, context: BehaviorContext) -> Optional[Color]:
    return color_from_hub_attributes(entity.attributes)


def set_temperature(kelvin: int, context: BehaviorContext) -> Action:
    return Action(ACTION_LIGHT_TURN_ON, {"color_temp_kelvin": kelvin})


def set_color(color: Color, context: BehaviorContext) -> Action:
    return Action(ACTION_LIGHT_TURN_ON, {"hs_color": color_to_hub_hs(color)})


def _kelvin_reader(attribute: str, default: int, apply_default: bool):
    def read(entity: EntityState, context: BehaviorContext) -> Optional[Any]:
        value = entity.attributes.get(attribute)
        if value is None and apply_default:
            value = default
        logger.debug(f"[{entity.entity_id}] {attribute}: {value}")
        return value

    return read


def light_color_control_config(default_color_temp_bounds: bool = True) -> ColorControlConfig:
    """
    ColorControl for lights.

    default_color_temp_bounds fills in 4000K current, 2700K min and 6500K
    max when the hub leaves them out; otherwise they are reported as unknown.
    """
    return ColorControlConfig(
        get_current_mode=get_current_mode,
        get_current_kelvin=_kelvin_reader(
            "color_temp_kelvin", DEFAULT_CURRENT_KELVIN, default_color_temp_bounds
        ),
        get_min_color_temp_kelvin=_kelvin_reader(
            "min_color_temp_kelvin", DEFAULT_MIN_KELVIN, default_color_temp_bounds
        ),
        get_max_color_temp_kelvin=_kelvin_reader(
            "max_color_temp_kelvin", DEFAULT_MAX_KELVIN, default_color_temp_bounds
        ),
        get_color=get_color,
        set_temperature=set_temperature,
        set_color=set_color,
    )
