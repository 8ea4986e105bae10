"""WindowCovering cluster server."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from behavior_server import BehaviorContext, BehaviorServer, Dispatch
from clusters import WINDOW_COVERING, MovementStatus
from conversions import percent100ths_to_percent, percent_to_100ths
from models import Action, EntityState

PositionReader = Callable[[EntityState, BehaviorContext], Optional[float]]
SimpleWriter = Callable[[BehaviorContext], Action]
PositionWriter = Callable[[float, BehaviorContext], Action]


@dataclass(frozen=True)
class WindowCoveringConfig:
    get_current_lift_position: PositionReader
    get_current_tilt_position: PositionReader
    get_movement_status: Callable[[EntityState, BehaviorContext], MovementStatus]
    stop_cover: SimpleWriter
    open_cover_lift: SimpleWriter
    close_cover_lift: SimpleWriter
    set_lift_position: PositionWriter
    open_cover_tilt: SimpleWriter
    close_cover_tilt: SimpleWriter
    set_tilt_position: PositionWriter


class WindowCoveringServer(BehaviorServer):
    """Lift (and optionally tilt) position, movement status and motion commands."""

    cluster = WINDOW_COVERING
    commands = (
        "up_or_open",
        "down_or_close",
        "stop_motion",
        "go_to_lift_percentage",
        "go_to_tilt_percentage",
        "open_tilt",
        "close_tilt",
    )

    def __init__(
        self,
        config: WindowCoveringConfig,
        context: BehaviorContext,
        dispatch: Dispatch,
        tilt: bool = False,
    ):
        super().__init__(config, context, dispatch)
        self.tilt = tilt
        self._lift_target: Optional[int] = None
        self._tilt_target: Optional[int] = None

    def update(self, entity: EntityState) -> Dict[str, Any]:
        # a fresh hub state supersedes any commanded target
        self._lift_target = None
        self._tilt_target = None
        return super().update(entity)

    def read_attributes(self, entity: EntityState) -> Dict[str, Any]:
        """Compute this cluster's attributes from a state snapshot."""
        status = self.config.get_movement_status(entity, self.context)
        lift = percent_to_100ths(self.config.get_current_lift_position(entity, self.context))
        attrs: Dict[str, Any] = {
            "currentPositionLiftPercentage": None if lift is None else round(lift / 100),
            "currentPositionLiftPercent100ths": lift,
            "targetPositionLiftPercent100ths": lift if self._lift_target is None else self._lift_target,
            "operationalStatus": {
                "global": status,
                "lift": status,
                "tilt": status if self.tilt else MovementStatus.Stopped,
            },
        }
        if self.tilt:
            tilt = percent_to_100ths(self.config.get_current_tilt_position(entity, self.context))
            attrs.update(
                currentPositionTiltPercentage=None if tilt is None else round(tilt / 100),
                currentPositionTiltPercent100ths=tilt,
                targetPositionTiltPercent100ths=tilt if self._tilt_target is None else self._tilt_target,
            )
        return attrs

    def up_or_open(self) -> Action:
        """Matter UpOrOpen."""
        return self._emit(self.config.open_cover_lift(self.context))

    def down_or_close(self) -> Action:
        """Matter DownOrClose."""
        return self._emit(self.config.close_cover_lift(self.context))

    def stop_motion(self) -> Action:
        """Matter StopMotion."""
        return self._emit(self.config.stop_cover(self.context))

    def go_to_lift_percentage(self, percent100ths: int) -> Action:
        """Matter GoToLiftPercentage, in percent100ths."""
        self._lift_target = percent100ths
        self.attributes["targetPositionLiftPercent100ths"] = percent100ths
        percent = round(percent100ths_to_percent(percent100ths))
        return self._emit(self.config.set_lift_position(percent, self.context))

    def go_to_tilt_percentage(self, percent100ths: int) -> Action:
        """Matter GoToTiltPercentage, in percent100ths."""
        self._require_tilt()
        self._tilt_target = percent100ths
        self.attributes["targetPositionTiltPercent100ths"] = percent100ths
        percent = round(percent100ths_to_percent(percent100ths))
        return self._emit(self.config.set_tilt_position(percent, self.context))

    def open_tilt(self) -> Action:
        self._require_tilt()
        return self._emit(self.config.open_cover_tilt(self.context))

    def close_tilt(self) -> Action:
        self._require_tilt()
        return self._emit(self.config.close_cover_tilt(self.context))

    def _require_tilt(self):
        if not self.tilt:
            raise ValueError(f"{self.context.entity_id} does not support tilt")
