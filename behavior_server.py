"""Generic engine that runs a behavior config against hub state and Matter commands."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple

from models import Action, EntityState, FeatureFlags

logger = logging.getLogger(__name__)

Dispatch = Callable[[str, Action], None]


@dataclass(frozen=True)
class BehaviorContext:
    """
    What a behavior config may consult besides the entity state.

    on_level is the one cross-cluster capability: a reader for the
    LevelControl onLevel of the same endpoint, when one is composed in.
    """
    entity_id: str
    feature_flags: FeatureFlags = FeatureFlags()
    on_level: Optional[Callable[[], Optional[int]]] = None


class BehaviorServer:
    """
    Base class for one Matter cluster backed by one hub entity.

    Subclasses set ``cluster`` and ``commands``, implement
    ``read_attributes`` and one method per command name.
    """

    cluster: ClassVar[str] = ""
    commands: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, config: Any, context: BehaviorContext, dispatch: Dispatch):
        self.config = config
        self.context = context
        self._dispatch = dispatch
        self.entity: Optional[EntityState] = None
        self.attributes: Dict[str, Any] = {}

    def read_attributes(self, entity: EntityState) -> Dict[str, Any]:
        """Compute this cluster's attributes from a state snapshot."""
        raise NotImplementedError

    def update(self, entity: EntityState) -> Dict[str, Any]:
        """Replace the state snapshot and recompute the cluster attributes."""
        self.entity = entity
        self.attributes = self.read_attributes(entity)
        return self.attributes

    def invoke(self, command: str, *args: Any) -> Action:
        """Run a Matter command by name."""
        if command not in self.commands:
            raise ValueError(f"{self.cluster} has no command '{command}'")
        return getattr(self, command)(*args)

    def _require_entity(self) -> EntityState:
        """The last state snapshot; commands need one."""
        if self.entity is None:
            raise RuntimeError(f"{self.cluster} for {self.context.entity_id} has no state yet")
        return self.entity

    def _emit(self, action: Action) -> Action:
        """Hand an action to the dispatcher and return it."""
        logger.debug(f"{self.cluster} {self.context.entity_id} -> {action.action} {action.data or {}}")
        self._dispatch(self.context.entity_id, action)
        return action
