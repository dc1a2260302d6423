"""Route gating: which requests need a session, and where to send them."""

from dataclasses import dataclass
from typing import Optional

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
PUBLIC_PATHS = ("/health",)


@dataclass(frozen=True)
class GateDecision:
    """Result of the gate check. ``redirect_to`` is set when not allowed."""

    allowed: bool
    redirect_to: Optional[str] = None


def authorize_request(is_logged_in: bool, path: str) -> GateDecision:
    """
    Decide what to do with a request for ``path``.

    Dashboard paths need a session and send anonymous users to the login
    page. Signed-in users hitting any other entry point go to the dashboard.
    """
    if path in PUBLIC_PATHS:
        return GateDecision(allowed=True)

    on_dashboard = path == DASHBOARD_PATH or path.startswith(DASHBOARD_PATH + "/")
    if on_dashboard:
        if is_logged_in:
            return GateDecision(allowed=True)
        return GateDecision(allowed=False, redirect_to=LOGIN_PATH)

    if is_logged_in:
        return GateDecision(allowed=False, redirect_to=DASHBOARD_PATH)

    return GateDecision(allowed=True)
