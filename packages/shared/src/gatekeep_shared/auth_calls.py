"""Workflow-side helpers for calling the Auth activities.

Other services' workflows import these instead of the Auth package itself —
they dispatch by activity name onto AUTH_QUEUE, so the caller never needs
bcrypt, the store, or the signing secret on its own workers.

    from gatekeep_shared.auth_calls import verify_token

    result = await verify_token(token)
    if not result.success:
        ...  # result.error_kind says why

Only StoreUnavailable is retried (by Temporal, per AUTH_RETRY_POLICY). Every
business failure comes back as an AuthResult on the first attempt.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

from gatekeep_shared.auth_models import (
    AuthResult,
    LoginRequest,
    RegisterRequest,
    VerifyTokenRequest,
)
from gatekeep_shared.task_queues import AUTH_QUEUE

AUTH_TIMEOUT = timedelta(seconds=30)

AUTH_RETRY_POLICY = RetryPolicy(
    initial_interval=timedelta(seconds=1),
    backoff_coefficient=2.0,
    maximum_attempts=5,
)


async def _call(activity_name: str, request: object) -> AuthResult:
    return await workflow.execute_activity(
        activity_name,
        request,
        task_queue=AUTH_QUEUE,
        result_type=AuthResult,
        start_to_close_timeout=AUTH_TIMEOUT,
        retry_policy=AUTH_RETRY_POLICY,
    )


async def register_user(request: RegisterRequest) -> AuthResult:
    return await _call("register_user", request)


async def login_user(request: LoginRequest) -> AuthResult:
    return await _call("login_user", request)


async def verify_token(token: str) -> AuthResult:
    return await _call("verify_token", VerifyTokenRequest(token=token))
