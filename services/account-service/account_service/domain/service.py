"""Account service orchestrating validation, hashing, session checks, and persistence."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from schemas import AccountProfile

from .contracts import AccountChanges, CreateAccountInput
from .errors import AccountNotFound, DuplicateAccount, InvalidCredentials, ValidationFailed
from .validation import (
    EMAIL_FIELD,
    FIRST_NAME_FIELD,
    LAST_NAME_FIELD,
    NEW_DETAILS_FIELD,
    PASSWORD_FIELD,
    TOKEN_FIELD,
    validate_inputs,
)
from ..metrics import record_sign_in
from ..repository import AccountRepository
from ..security.passwords import CredentialHasher
from ..security.session import SessionGate
from ..security.tokens import TokenManager

logger = logging.getLogger(__name__)

_REGISTER_FIELDS = (EMAIL_FIELD, PASSWORD_FIELD, FIRST_NAME_FIELD, LAST_NAME_FIELD)
_SIGN_IN_FIELDS = (EMAIL_FIELD, PASSWORD_FIELD)
_SESSION_FIELDS = (EMAIL_FIELD, TOKEN_FIELD)


def _validate(payload: Mapping[str, Any], required: tuple[str, ...]) -> None:
    messages = validate_inputs(payload, required)
    if messages:
        raise ValidationFailed(messages)


class AccountService:
    """Account workflows backed by Postgres storage.

    Sign-in and update read the account, then write it, without a lock or a
    transaction around the pair. Concurrent sign-ins for one account therefore
    race and the last token written is the only one that stays valid.
    """

    def __init__(
        self,
        repository: AccountRepository,
        hasher: CredentialHasher,
        token_manager: TokenManager,
    ) -> None:
        """Store dependencies used to orchestrate persistence and session checks."""
        self._repository = repository
        self._hasher = hasher
        self._tokens = token_manager
        self._gate = SessionGate(token_manager)

    def register(self, payload: Mapping[str, Any]) -> None:
        """Create an account from ``emailAddress``, ``password``, ``firstName`` and ``lastName``."""
        _validate(payload, _REGISTER_FIELDS)
        email = payload[EMAIL_FIELD]
        try:
            self._repository.create_account(
                CreateAccountInput(
                    email=email,
                    password_hash=self._hasher.hash(payload[PASSWORD_FIELD]),
                    first_name=payload[FIRST_NAME_FIELD],
                    last_name=payload[LAST_NAME_FIELD],
                )
            )
        except DuplicateAccount:
            logger.info("registration rejected, %s already exists", email)
            raise
        logger.info("account registered for %s", email)

    def sign_in(self, payload: Mapping[str, Any]) -> str:
        """Check ``emailAddress``/``password`` and return a fresh session token."""
        _validate(payload, _SIGN_IN_FIELDS)
        email = payload[EMAIL_FIELD]
        account = self._repository.get_account(email)
        if account is None:
            record_sign_in("not_found")
            logger.info("sign-in for unknown account %s", email)
            raise AccountNotFound("Unable to find the user with the given email-address!!")
        if not self._hasher.verify(payload[PASSWORD_FIELD], account.password_hash):
            record_sign_in("bad_credentials")
            logger.info("sign-in with bad credentials for %s", email)
            raise InvalidCredentials("Unable to login with the given credentials!!")
        token = self._tokens.issue(email)
        record_sign_in("success")
        return token

    def fetch(self, payload: Mapping[str, Any]) -> AccountProfile:
        """Return the public profile for ``emailAddress`` once ``token`` is verified."""
        _validate(payload, _SESSION_FIELDS)
        email = payload[EMAIL_FIELD]
        self._gate.guard(payload[TOKEN_FIELD], email)
        account = self._repository.get_account(email)
        if account is None:
            raise AccountNotFound("Unable to find the user with the given email-address!!")
        return AccountProfile(
            email_address=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
        )

    def update(self, payload: Mapping[str, Any]) -> None:
        """Apply the fields present in ``newUserDetails`` once ``token`` is verified."""
        _validate(payload, _SESSION_FIELDS)
        email = payload[EMAIL_FIELD]
        self._gate.guard(payload[TOKEN_FIELD], email)

        details = payload.get(NEW_DETAILS_FIELD) or {}
        password = details.get(PASSWORD_FIELD)
        changes = AccountChanges(
            password_hash=self._hasher.hash(password) if password else None,
            first_name=details.get(FIRST_NAME_FIELD) or None,
            last_name=details.get(LAST_NAME_FIELD) or None,
        )
        self._repository.update_account(email, changes)
        logger.info("account %s updated: %s", email, sorted(changes.as_columns()))
