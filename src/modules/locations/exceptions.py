"""Location domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class LocationNotFound(NotFound):
    """The requested location does not exist."""
