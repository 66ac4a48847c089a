"""Site entity module.

This module defines the Site entity representing a monitored target.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Site:
    """A monitored target, immutable for the session.

    Attributes:
        id: Stable unique identifier assigned by the feed
        url: Probed URL
        display_name: Name shown on the dashboard
    """

    id: str
    url: str
    display_name: str

    def __post_init__(self):
        """Validate domain invariants after initialization."""
        if not self.id:
            raise ValueError("id cannot be empty")
