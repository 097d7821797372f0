"""Shape validation for account request payloads.

Payloads are plain mappings keyed by the wire field names (``emailAddress``,
``firstName``, ``lastName``, ``password``, ``token`` and the optional nested
``newUserDetails``). Absent or null fields are skipped unless the caller lists
them as required, so partial-field endpoints share the same rules.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from email_validator import EmailNotValidError, validate_email

EMAIL_FIELD = "emailAddress"
FIRST_NAME_FIELD = "firstName"
LAST_NAME_FIELD = "lastName"
PASSWORD_FIELD = "password"
TOKEN_FIELD = "token"
NEW_DETAILS_FIELD = "newUserDetails"

PROMOTED_FIELDS = (PASSWORD_FIELD, FIRST_NAME_FIELD, LAST_NAME_FIELD)

MAX_TEXT_LENGTH = 250
MAX_TOKEN_LENGTH = 40

_NAME_PATTERN = re.compile(r"[a-zA-Z]+(([',. -][a-zA-Z ])?[a-zA-Z])")
_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9]*")

EMAIL_MESSAGE = "Email ID should not be blank & should be in valid format"
FIRST_NAME_MESSAGE = (
    "First Name should not be blank, have less than 250 characters and can contain only alphabets"
)
LAST_NAME_MESSAGE = (
    "Last Name should not be blank, have less than 250 characters and can contain only alphabets"
)
PASSWORD_MESSAGE = "Password should not be blank and have less than 250 characters"
TOKEN_MESSAGE = (
    "Token should not be blank, have less than 40 characters and should be alpha numeric"
)
NEW_DETAILS_MESSAGE = "New user details should be an object with password, firstName or lastName"
BODY_MESSAGE = "Request body should be a valid JSON object"

FIELD_MESSAGES = {
    EMAIL_FIELD: EMAIL_MESSAGE,
    FIRST_NAME_FIELD: FIRST_NAME_MESSAGE,
    LAST_NAME_FIELD: LAST_NAME_MESSAGE,
    PASSWORD_FIELD: PASSWORD_MESSAGE,
    TOKEN_FIELD: TOKEN_MESSAGE,
    NEW_DETAILS_FIELD: NEW_DETAILS_MESSAGE,
}


def is_valid_email(value: str) -> bool:
    """Return ``True`` when ``value`` is a syntactically plausible email address."""
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_name(value: str) -> bool:
    return 0 < len(value) < MAX_TEXT_LENGTH and _NAME_PATTERN.fullmatch(value) is not None


def is_valid_password(value: str) -> bool:
    # No complexity rule; only blank and overly long passwords are rejected.
    return 0 < len(value) < MAX_TEXT_LENGTH


def is_valid_token(value: str) -> bool:
    return 0 < len(value) < MAX_TOKEN_LENGTH and _TOKEN_PATTERN.fullmatch(value) is not None


_RULES: tuple[tuple[str, Callable[[str], bool], str], ...] = (
    (EMAIL_FIELD, is_valid_email, EMAIL_MESSAGE),
    (FIRST_NAME_FIELD, is_valid_name, FIRST_NAME_MESSAGE),
    (LAST_NAME_FIELD, is_valid_name, LAST_NAME_MESSAGE),
    (PASSWORD_FIELD, is_valid_password, PASSWORD_MESSAGE),
    (TOKEN_FIELD, is_valid_token, TOKEN_MESSAGE),
)


def promote_new_user_details(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with ``newUserDetails`` lifted to the top level.

    When the nested object is present its password and name fields replace the
    top-level ones, including replacing them with nothing when the nested value
    is missing. The input mapping is left untouched.
    """
    fields = dict(payload)
    details = fields.get(NEW_DETAILS_FIELD)
    if details is None:
        return fields
    if not isinstance(details, Mapping):
        details = {}
    for name in PROMOTED_FIELDS:
        fields[name] = details.get(name)
    return fields


def validate_inputs(payload: Mapping[str, Any], required: Iterable[str] = ()) -> list[str]:
    """Return every validation failure message for ``payload`` in a fixed order.

    An empty list means the payload is valid. ``required`` names fields whose
    absence is itself a failure for the calling operation.
    """
    fields = promote_new_user_details(payload)
    required_fields = set(required)
    errors: list[str] = []
    for name, check, message in _RULES:
        value = fields.get(name)
        if value is None:
            if name in required_fields:
                errors.append(message)
            continue
        if not isinstance(value, str) or not check(value):
            errors.append(message)
    details = payload.get(NEW_DETAILS_FIELD)
    if details is not None and not isinstance(details, Mapping):
        errors.append(NEW_DETAILS_MESSAGE)
    return errors
