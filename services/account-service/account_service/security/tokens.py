"""Utilities for issuing and evaluating opaque session tokens."""

from __future__ import annotations

import hmac
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from enum import Enum
from random import Random
from typing import Callable

from ..repository import AccountRepository

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
DEFAULT_TOKEN_LENGTH = 32
DEFAULT_TOKEN_TTL = timedelta(minutes=30)


class AuthState(str, Enum):
    """Outcome of checking a session token against the stored account state."""

    VALID = "valid"
    TIMEOUT = "timeout"
    INVALID = "invalid"
    USER_NOT_FOUND = "user_not_found"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenGenerator:
    """Draw fixed-length tokens from an alphabet using a cryptographic random source."""

    def __init__(
        self,
        alphabet: str = TOKEN_ALPHABET,
        length: int = DEFAULT_TOKEN_LENGTH,
        rng: Random | None = None,
    ) -> None:
        if not alphabet:
            raise ValueError("token alphabet must not be empty")
        if length <= 0:
            raise ValueError("token length must be positive")
        self.alphabet = alphabet
        self.length = length
        self._rng = rng or secrets.SystemRandom()

    def generate(self) -> str:
        """Return a new random token."""
        return "".join(self._rng.choice(self.alphabet) for _ in range(self.length))


class TokenManager:
    """Issue session tokens and evaluate their freshness against persisted state.

    Issuance is a single write of ``(token, issued_at)`` keyed by email. Two
    concurrent issues for the same account are not serialised; whichever write
    lands last becomes the only live token for that account.
    """

    def __init__(
        self,
        repository: AccountRepository,
        generator: TokenGenerator,
        *,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Store the repository, token source, lifetime, and clock used for checks."""
        self._repository = repository
        self._generator = generator
        self._ttl = ttl
        self._clock = clock

    def issue(self, email: str) -> str:
        """Generate a token, persist it with the current time, and return it."""
        token = self._generator.generate()
        self._repository.store_token(email, token, self._clock())
        logger.info("session token issued for %s", email)
        return token

    def authenticate(self, token: str | None, email: str) -> AuthState:
        """Classify ``token`` for the account identified by ``email``.

        Returns
        -------
        AuthState
            ``USER_NOT_FOUND`` when no account exists, ``INVALID`` when no token is
            stored or the tokens differ, ``TIMEOUT`` when the matching token is at
            least ``ttl`` old, and ``VALID`` otherwise.
        """
        account = self._repository.get_account(email)
        if account is None:
            return AuthState.USER_NOT_FOUND
        if not token or not account.auth_token or account.token_created_at is None:
            return AuthState.INVALID
        if not hmac.compare_digest(account.auth_token.encode("utf-8"), token.encode("utf-8")):
            return AuthState.INVALID
        if self._clock() - account.token_created_at >= self._ttl:
            return AuthState.TIMEOUT
        return AuthState.VALID
