"""Error taxonomy raised by account workflows and mapped to HTTP responses by the API layer."""

from __future__ import annotations


class AccountServiceError(Exception):
    """Base class for expected account workflow failures."""


class ValidationFailed(AccountServiceError):
    """One or more request fields failed validation."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class DuplicateAccount(AccountServiceError):
    """An account already exists for the email address."""


class AccountNotFound(AccountServiceError):
    """No account matches the email address."""


class InvalidCredentials(AccountServiceError):
    """The password does not match the stored hash."""


class SessionExpired(AccountServiceError):
    """The session token is stale, unknown, or does not match the account."""
