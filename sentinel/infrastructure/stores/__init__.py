"""In-memory stores."""

from sentinel.infrastructure.stores.status_store import (
    DashboardStatus,
    StatusStore,
    StoreState,
)

__all__ = [
    "DashboardStatus",
    "StatusStore",
    "StoreState",
]
