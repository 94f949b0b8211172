"""Request shape checks run at the activity boundary, before the core.

Only registration has shape rules. Login and token verification take any
string: a malformed email simply matches no account, and a malformed token
fails signature verification, so both surface as their normal failures.

check_registration returns None when the request is well-formed, or the sorted,
comma-separated names of the offending fields. Values are never echoed back —
a rejected password must not end up in a result message or a log line.
"""

from __future__ import annotations

from gatekeep_shared.auth_models import RegisterRequest
from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt ignores (or rejects) anything past this


class RegistrationForm(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    # email-validator syntax rules, including the 254-character address limit
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def _bcrypt_limit(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError("password too long")
        return value

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is blank")
        return value


def check_registration(request: RegisterRequest) -> str | None:
    try:
        RegistrationForm.model_validate(request.model_dump())
    except ValidationError as e:
        return ", ".join(sorted({str(err["loc"][0]) for err in e.errors()}))
    return None
