"""Route guard for the signed-in part of the app."""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

LOADING = "loading"
UNAUTHENTICATED = "unauthenticated"
AUTHENTICATED = "authenticated"

LOGIN_PATH = "/login"

NAV_ITEMS: List[Dict[str, str]] = [
    {"href": "/dashboard", "label": "Home"},
    {"href": "/therapy", "label": "Sessions"},
    {"href": "/bridge", "label": "Bridge"},
    {"href": "/progress", "label": "Analytics"},
    {"href": "/guides", "label": "Guides"},
    {"href": "/kids", "label": "Playground"},
    {"href": "/settings", "label": "Settings"},
]


class DashboardGate:
    """
    Tracks whether the dashboard may be shown.

    ``navigate`` is called with the login path once each time the gate moves
    into ``unauthenticated``; while auth is still loading nothing happens.
    """

    def __init__(self, navigate: Callable[[str], Any]):
        self._navigate = navigate
        self.state = LOADING

    def update(self, is_loading: bool, is_authenticated: bool) -> str:
        if is_loading:
            new_state = LOADING
        elif is_authenticated:
            new_state = AUTHENTICATED
        else:
            new_state = UNAUTHENTICATED

        previous, self.state = self.state, new_state
        if new_state == UNAUTHENTICATED and previous != UNAUTHENTICATED:
            logger.info("Not signed in, redirecting to %s", LOGIN_PATH)
            self._navigate(LOGIN_PATH)
        return new_state

    def render(self, content: Any) -> Optional[Dict[str, Any]]:
        if self.state != AUTHENTICATED:
            return None
        return {"sidebar": NAV_ITEMS, "main": content}
