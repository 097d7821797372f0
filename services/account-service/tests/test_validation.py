from __future__ import annotations

import pytest

from account_service.domain.validation import (
    EMAIL_MESSAGE,
    FIRST_NAME_MESSAGE,
    LAST_NAME_MESSAGE,
    NEW_DETAILS_MESSAGE,
    PASSWORD_MESSAGE,
    TOKEN_MESSAGE,
    promote_new_user_details,
    validate_inputs,
)


def test_empty_payload_is_valid():
    assert validate_inputs({}) == []


def test_complete_registration_payload_is_valid():
    payload = {
        "emailAddress": "a@b.com",
        "password": "pw123",
        "firstName": "Ann",
        "lastName": "Lee",
    }
    assert validate_inputs(payload) == []


@pytest.mark.parametrize("email", ["", "not-an-email", "a@", "@b.com", "a b@c.com"])
def test_bad_email_is_rejected_regardless_of_other_fields(email):
    assert validate_inputs({"emailAddress": email}) == [EMAIL_MESSAGE]
    assert validate_inputs({"emailAddress": email, "firstName": "Ann", "password": "pw"}) == [
        EMAIL_MESSAGE
    ]


@pytest.mark.parametrize("name", ["Ann", "Mary-Jo", "Jo Li", "De'Li", "Jo.Al"])
def test_accepted_names(name):
    assert validate_inputs({"firstName": name, "lastName": name}) == []


@pytest.mark.parametrize("name", ["", "A", "Ann3", "-Ann", "Ann-", "Ann!", "x" * 250])
def test_rejected_names(name):
    assert validate_inputs({"firstName": name, "lastName": name}) == [
        FIRST_NAME_MESSAGE,
        LAST_NAME_MESSAGE,
    ]


def test_password_length_bounds():
    assert validate_inputs({"password": "p"}) == []
    assert validate_inputs({"password": "p" * 249}) == []
    assert validate_inputs({"password": ""}) == [PASSWORD_MESSAGE]
    assert validate_inputs({"password": "p" * 250}) == [PASSWORD_MESSAGE]


@pytest.mark.parametrize("token", ["", "abc-123", "t" * 40, "tok en"])
def test_rejected_tokens(token):
    assert validate_inputs({"token": token}) == [TOKEN_MESSAGE]


def test_alphanumeric_token_is_accepted():
    assert validate_inputs({"token": "Ab3" * 13}) == []


def test_all_failures_are_collected_in_order():
    payload = {
        "emailAddress": "bad",
        "firstName": "1",
        "lastName": "2",
        "password": "",
        "token": "!",
    }
    assert validate_inputs(payload) == [
        EMAIL_MESSAGE,
        FIRST_NAME_MESSAGE,
        LAST_NAME_MESSAGE,
        PASSWORD_MESSAGE,
        TOKEN_MESSAGE,
    ]


def test_null_fields_are_skipped():
    assert validate_inputs({"emailAddress": None, "token": None}) == []


def test_required_fields_missing_are_reported():
    assert validate_inputs({}, required=("emailAddress", "token")) == [EMAIL_MESSAGE, TOKEN_MESSAGE]


def test_non_string_values_fail_their_rule():
    assert validate_inputs({"password": 12345}) == [PASSWORD_MESSAGE]


def test_promotion_replaces_top_level_fields_without_mutating_input():
    payload = {
        "emailAddress": "a@b.com",
        "firstName": "Old",
        "newUserDetails": {"lastName": "New"},
    }
    promoted = promote_new_user_details(payload)

    assert promoted["lastName"] == "New"
    assert promoted["firstName"] is None
    assert promoted["password"] is None
    assert payload["firstName"] == "Old"
    assert "lastName" not in payload


def test_nested_details_are_validated():
    payload = {
        "emailAddress": "a@b.com",
        "token": "abc123",
        "newUserDetails": {"password": "", "firstName": "Ann9"},
    }
    assert validate_inputs(payload) == [FIRST_NAME_MESSAGE, PASSWORD_MESSAGE]


def test_payload_without_nested_details_is_copied_unchanged():
    payload = {"emailAddress": "a@b.com"}
    assert promote_new_user_details(payload) == payload


@pytest.mark.parametrize("details", ["Ann", ["Ann"], 5])
def test_nested_details_must_be_an_object(details):
    payload = {"emailAddress": "a@b.com", "token": "abc123", "newUserDetails": details}
    assert validate_inputs(payload) == [NEW_DETAILS_MESSAGE]


def test_non_string_email_fails_email_rule():
    assert validate_inputs({"emailAddress": 5, "firstName": "Ann"}) == [EMAIL_MESSAGE]
