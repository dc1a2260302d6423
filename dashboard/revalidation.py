"""Path revalidation hints fired after writes."""

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Revalidator(Protocol):
    """Receives "this path is stale" signals."""

    def revalidate_path(self, path: str) -> None:
        ...


class PathRevalidator:
    """
    Keeps a version counter per path.

    Each signal bumps the counter, so a renderer can compare the version it
    rendered against ``version(path)`` to know whether to recompute.
    """

    def __init__(self) -> None:
        self._versions: dict[str, int] = {}
        self._last_signal: dict[str, datetime] = {}

    def revalidate_path(self, path: str) -> None:
        """Mark ``path`` stale."""
        self._versions[path] = self._versions.get(path, 0) + 1
        self._last_signal[path] = datetime.now(timezone.utc)
        logger.info(f"Revalidated {path} (version {self._versions[path]})")

    def version(self, path: str) -> int:
        """Number of times ``path`` has been revalidated."""
        return self._versions.get(path, 0)

    def last_revalidated(self, path: str) -> Optional[datetime]:
        """When ``path`` was last revalidated, if ever."""
        return self._last_signal.get(path)
