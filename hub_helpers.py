"""Helper functions for parsing hub state payloads."""

import logging
from typing import Any, Dict, List, Optional

from models import EntityState

logger = logging.getLogger(__name__)


def parse_entity_state(raw: Dict[str, Any]) -> Optional[EntityState]:
    """
    Hub state objects look like:
      {"entity_id": "light.kitchen", "state": "on", "attributes": {...}, ...}
    Returns None for anything without an entity id.
    """
    if not isinstance(raw, dict):
        return None
    entity_id = raw.get("entity_id")
    if not isinstance(entity_id, str) or "." not in entity_id:
        return None
    attributes = raw.get("attributes")
    if not isinstance(attributes, dict):
        attributes = {}
    state = raw.get("state")
    return EntityState(
        entity_id=entity_id,
        state="" if state is None else str(state),
        attributes=attributes,
    )


def parse_entity_states(raw_states: Any) -> List[EntityState]:
    """Parse a list of hub state objects, skipping malformed ones."""
    if not isinstance(raw_states, list):
        logger.warning("Unexpected states payload from hub")
        return []
    states: List[EntityState] = []
    for raw in raw_states:
        entity = parse_entity_state(raw)
        if entity is None:
            logger.debug(f"Skipping malformed state object: {raw!r}")
            continue
        states.append(entity)
    return states
