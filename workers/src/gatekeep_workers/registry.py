"""Component registry: maps component names to their queues and activities.

This is the central lookup table that the runner uses to determine what to
register on a worker based on the CLI argument. Each component entry specifies:

- task_queue: Which Temporal task queue this worker polls
- build_activities: Factory returning the activity callables to register

Activities are built by a factory rather than listed directly because they are
bound to injected dependencies (settings, store connection) that must only be
created inside the worker process, after the environment is loaded.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from gatekeep_auth.activities import build_auth_activities
from gatekeep_shared.task_queues import AUTH_QUEUE


@dataclass
class ComponentConfig:
    """Configuration for a single component's worker."""

    task_queue: str
    build_activities: Callable[[], list[Any]]


COMPONENTS: dict[str, ComponentConfig] = {
    "auth": ComponentConfig(
        task_queue=AUTH_QUEUE,
        build_activities=build_auth_activities,
    ),
}
