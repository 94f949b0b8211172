"""Redis key patterns for the user store.

All keys use the `auth:` prefix. Key functions are pure — they compute key
names, never touch Redis.
"""


def user_key(user_id: str) -> str:
    """JSON-serialized UserRecord."""
    return f"auth:user:{user_id}"


def user_idx_email(email: str) -> str:
    """String lookup: normalized email → user ID. Doubles as the uniqueness claim."""
    return f"auth:user:idx:email:{email}"
