"""ColorControl cluster server."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from behavior_server import BehaviorContext, BehaviorServer, Dispatch
from clusters import COLOR_CONTROL, ColorMode
from color_converter import Color
from constants import MATTER_HS_MAX
from conversions import kelvin_to_mireds, mireds_to_kelvin
from models import Action, EntityState

KelvinReader = Callable[[EntityState, BehaviorContext], Optional[int]]


@dataclass(frozen=True)
class ColorControlConfig:
    get_current_mode: Callable[[EntityState, BehaviorContext], ColorMode]
    get_current_kelvin: KelvinReader
    get_min_color_temp_kelvin: KelvinReader
    get_max_color_temp_kelvin: KelvinReader
    get_color: Callable[[EntityState, BehaviorContext], Optional[Color]]
    set_temperature: Callable[[int, BehaviorContext], Action]
    set_color: Callable[[Color, BehaviorContext], Action]


class ColorControlServer(BehaviorServer):
    """Exposes color temperature and hue/saturation, each optional per light."""

    cluster = COLOR_CONTROL
    commands = (
        "move_to_color_temperature",
        "move_to_hue_and_saturation",
        "move_to_hue",
        "move_to_saturation",
        "move_to_color",
    )

    def __init__(
        self,
        config: ColorControlConfig,
        context: BehaviorContext,
        dispatch: Dispatch,
        color_temperature: bool = True,
        hue_saturation: bool = True,
    ):
        super().__init__(config, context, dispatch)
        if not (color_temperature or hue_saturation):
            raise ValueError("ColorControl needs color temperature or hue/saturation")
        self.color_temperature = color_temperature
        self.hue_saturation = hue_saturation

    def _mode(self, entity: EntityState) -> ColorMode:
        if not self.color_temperature:
            return ColorMode.CurrentHueAndCurrentSaturation
        if not self.hue_saturation:
            return ColorMode.ColorTemperatureMireds
        return self.config.get_current_mode(entity, self.context)

    def read_attributes(self, entity: EntityState) -> Dict[str, Any]:
        """Compute this cluster's attributes from a state snapshot."""
        mode = self._mode(entity)
        attrs: Dict[str, Any] = {"colorMode": mode, "enhancedColorMode": mode}

        if self.color_temperature:
            kelvin = self.config.get_current_kelvin(entity, self.context)
            min_kelvin = self.config.get_min_color_temp_kelvin(entity, self.context)
            max_kelvin = self.config.get_max_color_temp_kelvin(entity, self.context)
            # mireds run opposite to kelvin
            min_mireds = kelvin_to_mireds(max_kelvin)
            max_mireds = kelvin_to_mireds(min_kelvin)
            mireds = kelvin_to_mireds(kelvin)
            if mireds is not None and min_mireds is not None and max_mireds is not None:
                mireds = max(min_mireds, min(max_mireds, mireds))
            attrs.update(
                colorTemperatureMireds=mireds,
                colorTempPhysicalMinMireds=min_mireds,
                colorTempPhysicalMaxMireds=max_mireds,
            )

        if self.hue_saturation:
            color = self.config.get_color(entity, self.context)
            if color is None:
                attrs.update(currentHue=None, currentSaturation=None, currentX=None, currentY=None)
            else:
                hue, saturation = color.to_matter_hs()
                x, y = color.to_matter_xy()
                attrs.update(currentHue=hue, currentSaturation=saturation, currentX=x, currentY=y)

        return attrs

    def _require_color_temperature(self):
        if not self.color_temperature:
            raise ValueError(f"{self.context.entity_id} does not support color temperature")

    def _require_hue_saturation(self):
        if not self.hue_saturation:
            raise ValueError(f"{self.context.entity_id} does not support hue/saturation")

    def move_to_color_temperature(self, mireds: int) -> Action:
        """Set the color temperature, given in mireds."""
        self._require_color_temperature()
        kelvin = mireds_to_kelvin(mireds)
        if kelvin is None:
            raise ValueError(f"Invalid color temperature: {mireds} mireds")
        return self._emit(self.config.set_temperature(kelvin, self.context))

    def move_to_hue_and_saturation(self, hue: int, saturation: int) -> Action:
        """Set hue and saturation, both on the Matter 0-254 scale."""
        self._require_hue_saturation()
        return self._emit(self.config.set_color(Color.from_matter_hs(hue, saturation), self.context))

    def move_to_hue(self, hue: int) -> Action:
        """Change hue, keeping the last reported saturation."""
        self._require_hue_saturation()
        saturation = self.attributes.get("currentSaturation")
        return self.move_to_hue_and_saturation(hue, MATTER_HS_MAX if saturation is None else saturation)

    def move_to_saturation(self, saturation: int) -> Action:
        """Change saturation, keeping the last reported hue."""
        self._require_hue_saturation()
        hue = self.attributes.get("currentHue")
        return self.move_to_hue_and_saturation(0 if hue is None else hue, saturation)

    def move_to_color(self, x: int, y: int) -> Action:
        """Set a CIE xy color; the hub still receives hue/saturation."""
        self._require_hue_saturation()
        return self._emit(self.config.set_color(Color.from_xy(x / 65536, y / 65536), self.context))
