"""Account-related DTOs shared across services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccountProfile(BaseModel):
    """Public projection of an account; never carries the password hash or session token.

    The email address is returned exactly as stored, since it is the
    case-sensitive key used to sign in.
    """

    model_config = ConfigDict(populate_by_name=True)

    email_address: str = Field(..., alias="emailAddress")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
