"""Path utilities for the hub REST API."""

from models import Action


def path_states() -> str:
    """Get API path for all entity states."""
    return "/api/states"


def path_state(entity_id: str) -> str:
    """Get API path for one entity state."""
    return f"/api/states/{entity_id}"


def path_service(action: Action) -> str:
    """Get API path that performs an action."""
    return f"/api/services/{action.domain}/{action.service}"
