"""Background tasks."""

from sentinel.infrastructure.tasks.scheduler import (
    REFRESH_JOB_ID,
    create_refresh_scheduler,
    shutdown_scheduler,
)

__all__ = [
    "REFRESH_JOB_ID",
    "create_refresh_scheduler",
    "shutdown_scheduler",
]
