"""Auth service verification script.

Starts the auth worker and a throwaway workflow worker in one process, then
runs a workflow that walks the register → login → verify path through the
real Temporal dispatch, the way another service's workflow would.

Prerequisites:
  - Temporal dev server running: `temporal server start-dev`
    OR Temporal Cloud credentials in .env
  - JWT_SECRET set (in the environment or .env)

Usage:
  python scripts/verify_auth.py
"""

import asyncio
import logging
import uuid

from temporalio import workflow
from temporalio.worker import Worker

with workflow.unsafe.imports_passed_through():
    from gatekeep_auth.activities import build_auth_activities
    from gatekeep_shared.auth_calls import login_user, register_user, verify_token
    from gatekeep_shared.auth_models import LoginRequest, RegisterRequest
    from gatekeep_shared.task_queues import AUTH_QUEUE
    from gatekeep_shared.temporal_client import connect

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERIFY_QUEUE = "auth-verify-queue"


@workflow.defn
class AuthRoundTripWorkflow:
    """Register a fresh account, log in, and verify the session token."""

    @workflow.run
    async def run(self, email: str) -> str:
        registered = await register_user(
            RegisterRequest(name="Verify Bot", email=email, password="secret1")
        )
        if not registered.success:
            return f"register failed: {registered.error_kind} {registered.message}"

        wrong = await login_user(LoginRequest(email=email, password="wrong"))
        if wrong.success:
            return "login with a wrong password succeeded"

        logged_in = await login_user(LoginRequest(email=email, password="secret1"))
        if not logged_in.success:
            return f"login failed: {logged_in.error_kind} {logged_in.message}"

        verified = await verify_token(logged_in.token)
        if not verified.success or verified.user.email != email:
            return f"verify failed: {verified.error_kind} {verified.message}"

        garbage = await verify_token("garbage")
        if garbage.success:
            return "garbage token verified"

        return "ok"


async def main() -> None:
    client = await connect()
    logger.info("Connected to Temporal server")

    async with (
        Worker(client, task_queue=AUTH_QUEUE, activities=build_auth_activities()),
        Worker(client, task_queue=VERIFY_QUEUE, workflows=[AuthRoundTripWorkflow]),
    ):
        email = f"verify-{uuid.uuid4().hex[:8]}@example.com"
        result = await client.execute_workflow(
            AuthRoundTripWorkflow.run,
            email,
            id=f"verify-auth-{uuid.uuid4()}",
            task_queue=VERIFY_QUEUE,
        )

    if result == "ok":
        logger.info("VERIFICATION PASSED — register/login/verify dispatched on auth-queue")
    else:
        logger.error(f"VERIFICATION FAILED — {result}")
        raise SystemExit(1)


if __name__ == "__main__":
    asyncio.run(main())
