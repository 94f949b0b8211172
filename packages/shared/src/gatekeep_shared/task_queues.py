"""Task queue name constants for each component.

Every component runs on its own Temporal worker with a dedicated task queue.
Callers (gateways, other services' workflows) dispatch activities by queue
name, so these constants are the single source of truth for both the worker
runner and anyone calling into the service.
"""

# Credential core: registration, login, token verification
AUTH_QUEUE = "auth-queue"
