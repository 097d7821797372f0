"""Single authorisation checkpoint for token-protected account operations."""

from __future__ import annotations

import logging

from ..domain.errors import AccountNotFound, SessionExpired
from ..metrics import record_session_check
from .tokens import AuthState, TokenManager

logger = logging.getLogger(__name__)


class SessionGate:
    """Turn a token check into either a normal return or a domain error."""

    def __init__(self, token_manager: TokenManager) -> None:
        self._token_manager = token_manager

    def guard(self, token: str | None, email: str) -> None:
        """Return when ``token`` is live for ``email``.

        Raises
        ------
        SessionExpired
            The token is stale, missing, or does not match the stored token.
        AccountNotFound
            No account exists for ``email``.
        """
        state = self._token_manager.authenticate(token, email)
        record_session_check(state.value)
        if state is AuthState.VALID:
            return
        if state is AuthState.TIMEOUT or state is AuthState.INVALID:
            logger.info("session rejected for %s: %s", email, state.value)
            raise SessionExpired("Please login again!!")
        if state is AuthState.USER_NOT_FOUND:
            logger.info("session check for unknown account %s", email)
            raise AccountNotFound("Unable to find the user with the given email-address!!")
        raise AssertionError(f"unhandled auth state: {state!r}")
