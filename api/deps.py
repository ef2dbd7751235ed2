"""Shared dependencies for route modules."""

import logging

from daggerboard.db.state_manager import StateManager

logger = logging.getLogger(__name__)

# Cached state manager instance
_state_manager: StateManager | None = None


def get_state_manager() -> StateManager:
    """Get or create the process-wide state manager."""
    global _state_manager
    if _state_manager is None:
        _state_manager = StateManager()
    return _state_manager


def reset_state_manager() -> None:
    """Drop the cached manager (tests, shutdown)."""
    global _state_manager
    _state_manager = None
