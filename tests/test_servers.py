"""
Tests for the cluster servers and device wiring.
"""

import pytest

from behavior_server import BehaviorContext
from bridge_config import BridgeConfig, CategoryPolicy
from clusters import (
    COLOR_CONTROL,
    COLOR_CONTROL_CLUSTER_ID,
    LEVEL_CONTROL,
    ONOFF,
    ONOFF_CLUSTER_ID,
    WINDOW_COVERING,
    WINDOW_COVERING_CLUSTER_ID,
    ColorMode,
    MovementStatus,
    cluster_name,
)
from color_control_server import ColorControlServer
from cover_behaviors import COVER_WINDOW_COVERING_CONFIG
from endpoints import create_endpoint
from light_behaviors import light_color_control_config, light_level_control_config, light_on_off_config
from level_control_server import LevelControlServer
from models import Action, EntityState, FeatureFlags
from on_off_server import OnOffServer
from window_covering_server import WindowCoveringServer


class Recorder:
    """Collects dispatched actions."""

    def __init__(self):
        self.sent = []

    def __call__(self, entity_id, action):
        self.sent.append((entity_id, action))


@pytest.fixture
def dispatch():
    return Recorder()


class TestOnOffServer:
    """Tests for the OnOff server."""

    def test_attributes(self, dispatch):
        server = OnOffServer(light_on_off_config(), BehaviorContext("light.a"), dispatch)
        assert server.update(EntityState("light.a", "on")) == {"onOff": True}
        assert server.update(EntityState("light.a", "unavailable")) == {"onOff": False}

    def test_commands_dispatch(self, dispatch):
        server = OnOffServer(light_on_off_config(), BehaviorContext("light.a"), dispatch)
        server.update(EntityState("light.a", "off"))
        assert server.invoke("on") == Action("light.turn_on")
        assert server.invoke("off") == Action("light.turn_off")
        assert dispatch.sent == [("light.a", Action("light.turn_on")), ("light.a", Action("light.turn_off"))]

    def test_toggle(self, dispatch):
        server = OnOffServer(light_on_off_config(), BehaviorContext("light.a"), dispatch)
        server.update(EntityState("light.a", "on"))
        assert server.toggle() == Action("light.turn_off")
        server.update(EntityState("light.a", "off"))
        assert server.toggle() == Action("light.turn_on")

    def test_command_without_state(self, dispatch):
        server = OnOffServer(light_on_off_config(), BehaviorContext("light.a"), dispatch)
        with pytest.raises(RuntimeError):
            server.on()
        assert dispatch.sent == []

    def test_unknown_command(self, dispatch):
        server = OnOffServer(light_on_off_config(), BehaviorContext("light.a"), dispatch)
        with pytest.raises(ValueError):
            server.invoke("dim")


class TestLevelControlServer:
    """Tests for the LevelControl server."""

    def test_current_level(self, dispatch):
        server = LevelControlServer(light_level_control_config(), BehaviorContext("light.a"), dispatch)
        attrs = server.update(EntityState("light.a", "on", {"brightness": 255}))
        assert attrs["currentLevel"] == 254
        assert attrs["onLevel"] is None
        assert server.update(EntityState("light.a", "on", {"brightness": 128}))["currentLevel"] == 127

    def test_missing_brightness_stays_in_range(self, dispatch):
        server = LevelControlServer(light_level_control_config(0.0), BehaviorContext("light.a"), dispatch)
        assert server.update(EntityState("light.a", "off"))["currentLevel"] == 1
        server = LevelControlServer(light_level_control_config(1.0), BehaviorContext("light.a"), dispatch)
        assert server.update(EntityState("light.a", "off"))["currentLevel"] == 254

    def test_move_to_level(self, dispatch):
        server = LevelControlServer(light_level_control_config(), BehaviorContext("light.a"), dispatch)
        server.update(EntityState("light.a", "on", {"brightness": 10}))
        assert server.invoke("move_to_level", 254) == Action("light.turn_on", {"brightness": 255})
        assert server.on_level == 254
        assert server.attributes["onLevel"] == 254

    def test_write_on_level_range(self, dispatch):
        server = LevelControlServer(light_level_control_config(), BehaviorContext("light.a"), dispatch)
        with pytest.raises(ValueError):
            server.write_on_level(0)
        server.write_on_level(None)
        assert server.get_on_level() is None


class TestColorControlServer:
    """Tests for the ColorControl server."""

    def _server(self, dispatch, defaults=True, **kwargs):
        return ColorControlServer(
            light_color_control_config(defaults), BehaviorContext("light.a"), dispatch, **kwargs
        )

    def test_temperature_attributes(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("light.a", "on", {
            "color_mode": "color_temp",
            "color_temp_kelvin": 4000,
            "min_color_temp_kelvin": 2000,
            "max_color_temp_kelvin": 6500,
        }))
        assert attrs["colorMode"] == ColorMode.ColorTemperatureMireds
        assert attrs["colorTemperatureMireds"] == 250
        assert attrs["colorTempPhysicalMinMireds"] == 154
        assert attrs["colorTempPhysicalMaxMireds"] == 500

    def test_default_bounds(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("light.a", "on"))
        assert attrs["colorTemperatureMireds"] == 250
        assert attrs["colorTempPhysicalMinMireds"] == 154
        assert attrs["colorTempPhysicalMaxMireds"] == 370

    def test_pass_through_bounds(self, dispatch):
        attrs = self._server(dispatch, defaults=False).update(EntityState("light.a", "on"))
        assert attrs["colorTemperatureMireds"] is None
        assert attrs["colorTempPhysicalMinMireds"] is None
        assert attrs["colorTempPhysicalMaxMireds"] is None
        assert attrs["currentHue"] is None

    def test_temperature_clamped(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("light.a", "on", {"color_temp_kelvin": 10000}))
        assert attrs["colorTemperatureMireds"] == 154

    def test_hue_saturation_attributes(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("light.a", "on", {
            "color_mode": "hs", "hs_color": [180, 50],
        }))
        assert attrs["colorMode"] == ColorMode.CurrentHueAndCurrentSaturation
        assert attrs["currentHue"] == 127
        assert attrs["currentSaturation"] == 127
        assert 0 < attrs["currentX"] < 65279

    def test_temperature_only_light(self, dispatch):
        server = self._server(dispatch, hue_saturation=False)
        attrs = server.update(EntityState("light.a", "on", {"color_mode": "hs"}))
        assert attrs["colorMode"] == ColorMode.ColorTemperatureMireds
        assert "currentHue" not in attrs

    def test_hue_commands_rejected_without_hue_saturation(self, dispatch):
        """A temperature-only light refuses color commands."""
        server = self._server(dispatch, hue_saturation=False)
        server.update(EntityState("light.a", "on", {"color_temp_kelvin": 3000}))
        for command, args in (
            ("move_to_hue", (100,)),
            ("move_to_saturation", (100,)),
            ("move_to_hue_and_saturation", (100, 100)),
            ("move_to_color", (45914, 19615)),
        ):
            with pytest.raises(ValueError):
                server.invoke(command, *args)
        assert dispatch.sent == []
        assert server.invoke("move_to_color_temperature", 250).data == {"color_temp_kelvin": 4000}

    def test_temperature_rejected_without_color_temperature(self, dispatch):
        """A hue/saturation-only light refuses color temperature commands."""
        server = self._server(dispatch, color_temperature=False)
        server.update(EntityState("light.a", "on", {"hs_color": [180, 50]}))
        with pytest.raises(ValueError):
            server.invoke("move_to_color_temperature", 250)
        assert dispatch.sent == []
        assert "hs_color" in server.invoke("move_to_hue", 100).data

    def test_needs_a_feature(self, dispatch):
        with pytest.raises(ValueError):
            self._server(dispatch, color_temperature=False, hue_saturation=False)

    def test_commands(self, dispatch):
        server = self._server(dispatch)
        server.update(EntityState("light.a", "on", {"hs_color": [180, 50]}))
        assert server.invoke("move_to_color_temperature", 250) == Action(
            "light.turn_on", {"color_temp_kelvin": 4000}
        )
        assert server.invoke("move_to_hue_and_saturation", 127, 254) == Action(
            "light.turn_on", {"hs_color": (180.0, 100.0)}
        )
        assert server.invoke("move_to_hue", 0).data["hs_color"] == (0.0, 50.0)
        assert server.invoke("move_to_saturation", 0).data["hs_color"] == (180.0, 0.0)
        assert "hs_color" in server.invoke("move_to_color", 45914, 19615).data
        assert len(dispatch.sent) == 5


class TestWindowCoveringServer:
    """Tests for the WindowCovering server."""

    def _server(self, dispatch, invert=True, tilt=False):
        flags = FeatureFlags(cover_do_not_invert_percentage=not invert)
        return WindowCoveringServer(
            COVER_WINDOW_COVERING_CONFIG, BehaviorContext("cover.a", flags), dispatch, tilt=tilt
        )

    def test_lift_attributes(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("cover.a", "opening", {"current_position": 25}))
        assert attrs["currentPositionLiftPercentage"] == 75
        assert attrs["currentPositionLiftPercent100ths"] == 7500
        assert attrs["targetPositionLiftPercent100ths"] == 7500
        assert attrs["operationalStatus"]["global"] == MovementStatus.Opening
        assert attrs["operationalStatus"]["tilt"] == MovementStatus.Stopped
        assert "currentPositionTiltPercent100ths" not in attrs

    def test_unknown_position(self, dispatch):
        attrs = self._server(dispatch).update(EntityState("cover.a", "unavailable"))
        assert attrs["currentPositionLiftPercent100ths"] is None
        assert attrs["currentPositionLiftPercentage"] is None

    def test_go_to_lift_percentage(self, dispatch):
        server = self._server(dispatch)
        server.update(EntityState("cover.a", "open", {"current_position": 100}))
        assert server.invoke("go_to_lift_percentage", 3000) == Action(
            "cover.set_cover_position", {"position": 70}
        )
        assert server.attributes["targetPositionLiftPercent100ths"] == 3000
        # next hub update resets the target
        attrs = server.update(EntityState("cover.a", "closing", {"current_position": 90}))
        assert attrs["targetPositionLiftPercent100ths"] == 1000

    def test_no_inversion(self, dispatch):
        server = self._server(dispatch, invert=False)
        server.update(EntityState("cover.a", "open"))
        assert server.go_to_lift_percentage(3000) == Action("cover.set_cover_position", {"position": 30})

    def test_motion_commands(self, dispatch):
        server = self._server(dispatch)
        server.update(EntityState("cover.a", "open"))
        assert server.invoke("up_or_open") == Action("cover.open_cover")
        assert server.invoke("down_or_close") == Action("cover.close_cover")
        assert server.invoke("stop_motion") == Action("cover.stop_cover")

    def test_tilt(self, dispatch):
        server = self._server(dispatch, tilt=True)
        attrs = server.update(EntityState("cover.a", "open", {"current_tilt_position": 20}))
        assert attrs["currentPositionTiltPercent100ths"] == 8000
        assert server.invoke("go_to_tilt_percentage", 5000) == Action(
            "cover.set_cover_tilt_position", {"tilt_position": 50}
        )
        assert server.invoke("open_tilt") == Action("cover.open_cover_tilt")
        assert server.invoke("close_tilt") == Action("cover.close_cover_tilt")

    def test_tilt_unsupported(self, dispatch):
        server = self._server(dispatch)
        with pytest.raises(ValueError):
            server.go_to_tilt_percentage(5000)
        with pytest.raises(ValueError):
            server.invoke("open_tilt")
        assert dispatch.sent == []


class TestEndpointWiring:
    """Tests for device category wiring."""

    def test_extended_color_light(self, dispatch):
        entity = EntityState("light.a", "on", {"supported_color_modes": ["color_temp", "hs"]})
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        assert endpoint.device_type == "extended_color_light"
        assert set(endpoint.servers) == {ONOFF, LEVEL_CONTROL, COLOR_CONTROL}

    def test_color_temperature_light(self, dispatch):
        entity = EntityState("light.a", "on", {"supported_color_modes": ["color_temp"]})
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        assert endpoint.device_type == "color_temperature_light"
        assert endpoint.servers[COLOR_CONTROL].hue_saturation is False

    def test_dimmable_light(self, dispatch):
        entity = EntityState("light.a", "on", {"supported_color_modes": ["brightness"]})
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        assert endpoint.device_type == "dimmable_light"
        assert set(endpoint.servers) == {ONOFF, LEVEL_CONTROL}

    def test_on_off_light(self, dispatch):
        for attributes in ({}, {"supported_color_modes": ["onoff"]}):
            endpoint = create_endpoint(
                EntityState("light.a", "on", attributes), BridgeConfig(hub_url="http://hub"), dispatch
            )
            assert set(endpoint.servers) == {ONOFF}

    def test_on_restores_level(self, dispatch):
        """Turning on after a level command sends that level's brightness."""
        entity = EntityState("light.a", "off", {"supported_color_modes": ["brightness"]})
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        endpoint.update(entity)
        assert endpoint.invoke(ONOFF, "on") == Action("light.turn_on")
        endpoint.invoke(LEVEL_CONTROL, "move_to_level", 127)
        assert endpoint.invoke(ONOFF, "on") == Action("light.turn_on", {"brightness": 127})

    def test_restore_on_level_disabled(self, dispatch):
        config = BridgeConfig(hub_url="http://hub", categories={"light": CategoryPolicy(restore_on_level=False)})
        entity = EntityState("light.a", "off", {"supported_color_modes": ["brightness"]})
        endpoint = create_endpoint(entity, config, dispatch)
        endpoint.update(entity)
        endpoint.invoke(LEVEL_CONTROL, "move_to_level", 127)
        assert endpoint.invoke(ONOFF, "on") == Action("light.turn_on")

    def test_category_policy_reaches_level(self, dispatch):
        config = BridgeConfig(
            hub_url="http://hub", categories={"light": CategoryPolicy(missing_brightness_level=1.0)}
        )
        entity = EntityState("light.a", "on", {"supported_color_modes": ["brightness"]})
        attrs = create_endpoint(entity, config, dispatch).update(entity)
        assert attrs[LEVEL_CONTROL]["currentLevel"] == 254
        assert attrs[ONOFF] == {"onOff": True}

    def test_cover_tilt_detection(self, dispatch):
        config = BridgeConfig(hub_url="http://hub")
        lift_only = create_endpoint(EntityState("cover.a", "open", {"supported_features": 15}), config, dispatch)
        assert lift_only.servers[WINDOW_COVERING].tilt is False
        tilt = create_endpoint(EntityState("cover.a", "open", {"supported_features": 255}), config, dispatch)
        assert tilt.servers[WINDOW_COVERING].tilt is True

    def test_cover_uses_feature_flags(self, dispatch):
        config = BridgeConfig(hub_url="http://hub", feature_flags=FeatureFlags(cover_do_not_invert_percentage=True))
        entity = EntityState("cover.a", "closed")
        attrs = create_endpoint(entity, config, dispatch).update(entity)
        assert attrs[WINDOW_COVERING]["currentPositionLiftPercentage"] == 100

    def test_switch(self, dispatch):
        entity = EntityState("switch.pump", "on")
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        endpoint.update(entity)
        assert endpoint.invoke(ONOFF, "toggle") == Action("switch.turn_off")
        assert dispatch.sent == [("switch.pump", Action("switch.turn_off"))]

    def test_unsupported_domain(self, dispatch):
        assert create_endpoint(EntityState("sensor.t", "21"), BridgeConfig(hub_url="http://hub"), dispatch) is None

    def test_unknown_cluster(self, dispatch):
        entity = EntityState("switch.pump", "on")
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        with pytest.raises(KeyError):
            endpoint.invoke(COLOR_CONTROL, "move_to_hue", 1)
        with pytest.raises(KeyError):
            endpoint.invoke(COLOR_CONTROL_CLUSTER_ID, "move_to_hue", 1)
        with pytest.raises(KeyError):
            endpoint.invoke(0x0028, "on")

    def test_invoke_by_cluster_id(self, dispatch):
        """Commands can be addressed by Matter cluster id."""
        entity = EntityState("cover.a", "open", {"supported_features": 15})
        endpoint = create_endpoint(entity, BridgeConfig(hub_url="http://hub"), dispatch)
        endpoint.update(entity)
        assert endpoint.invoke(WINDOW_COVERING_CLUSTER_ID, "stop_motion") == Action("cover.stop_cover")
        assert cluster_name(ONOFF_CLUSTER_ID) == ONOFF
        assert cluster_name(LEVEL_CONTROL) == LEVEL_CONTROL
