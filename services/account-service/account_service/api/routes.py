"""HTTP route definitions for the account service."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..domain.errors import (
    AccountNotFound,
    AccountServiceError,
    DuplicateAccount,
    InvalidCredentials,
    SessionExpired,
    ValidationFailed,
)
from ..domain.service import AccountService
from ..domain.validation import BODY_MESSAGE, FIELD_MESSAGES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user")

GENERIC_ERROR_MESSAGE = "Something went wrong!!"
DUPLICATE_ACCOUNT_MESSAGE = "An account with the given email-address already exists!!"
ACCOUNT_NOT_FOUND_MESSAGE = "Unable to find the user with the given email-address!!"
INVALID_CREDENTIALS_MESSAGE = "Unable to login with the given credentials!!"
SESSION_EXPIRED_MESSAGE = "Please login again!!"


class _CamelModel(BaseModel):
    """Request body whose field values are checked by the domain validator, not by pydantic."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire-named fields that were actually supplied."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RegisterRequest(_CamelModel):
    """Payload accepted when registering an account."""

    email_address: Any = Field(default=None, alias="emailAddress")
    password: Any = None
    first_name: Any = Field(default=None, alias="firstName")
    last_name: Any = Field(default=None, alias="lastName")


class SignInRequest(_CamelModel):
    """Credentials exchanged for a session token."""

    email_address: Any = Field(default=None, alias="emailAddress")
    password: Any = None


class UpdateRequest(_CamelModel):
    """Session-authenticated request to change account details.

    ``newUserDetails`` carries any subset of ``password``, ``firstName`` and
    ``lastName``; omitted fields stay as they are.
    """

    token: Any = None
    email_address: Any = Field(default=None, alias="emailAddress")
    new_user_details: Any = Field(default=None, alias="newUserDetails")


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def register_error_handlers(app: FastAPI) -> None:
    """Answer unparseable request bodies with the same 400 message list as field validation."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages: list[str] = []
        for error in exc.errors():
            loc = error.get("loc", ())
            field = loc[1] if len(loc) > 1 else None
            message = FIELD_MESSAGES.get(field, BODY_MESSAGE) if isinstance(field, str) else BODY_MESSAGE
            if message not in messages:
                messages.append(message)
        return _validation_error(ValidationFailed(messages or [BODY_MESSAGE]))


def _success(message: str, data: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": "success"}
    if data is not None:
        body["data"] = data
    body["message"] = message
    return body


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def _validation_error(exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=[{"status": "error", "message": message} for message in exc.messages],
    )


def _session_error(exc: AccountServiceError) -> JSONResponse:
    """Map failures of token-protected operations; session problems keep their 500 status."""
    if isinstance(exc, ValidationFailed):
        return _validation_error(exc)
    if isinstance(exc, SessionExpired):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SESSION_EXPIRED_MESSAGE)
    if isinstance(exc, AccountNotFound):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ACCOUNT_NOT_FOUND_MESSAGE)
    return _unexpected_error(exc)


def _unexpected_error(exc: Exception) -> JSONResponse:
    logger.error("unexpected account service failure", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


@router.post("/registerUser")
def register_user(
    payload: RegisterRequest,
    service: AccountService = Depends(get_service),
) -> Any:
    """Create an account with a bcrypt-hashed password."""
    try:
        service.register(payload.to_payload())
    except ValidationFailed as exc:
        return _validation_error(exc)
    except DuplicateAccount:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, DUPLICATE_ACCOUNT_MESSAGE)
    except Exception as exc:
        return _unexpected_error(exc)
    return _success("User registered successfully!")


@router.post("/signIn")
def sign_in(
    payload: SignInRequest,
    service: AccountService = Depends(get_service),
) -> Any:
    """Exchange valid credentials for a 30 minute session token."""
    try:
        token = service.sign_in(payload.to_payload())
    except ValidationFailed as exc:
        return _validation_error(exc)
    except AccountNotFound:
        return _error(status.HTTP_404_NOT_FOUND, ACCOUNT_NOT_FOUND_MESSAGE)
    except InvalidCredentials:
        return _error(status.HTTP_400_BAD_REQUEST, INVALID_CREDENTIALS_MESSAGE)
    except Exception as exc:
        return _unexpected_error(exc)
    return _success("Logged in successfully", data=token)


@router.get("/fetchUser")
def fetch_user(
    token: str | None = Query(default=None),
    email_address: str | None = Query(default=None, alias="emailAddress"),
    service: AccountService = Depends(get_service),
) -> Any:
    """Return the public account details for a live session."""
    fields = {"token": token, "emailAddress": email_address}
    try:
        profile = service.fetch({name: value for name, value in fields.items() if value is not None})
    except AccountServiceError as exc:
        return _session_error(exc)
    except Exception as exc:
        return _unexpected_error(exc)
    return _success(
        "User details fetched successfully!!",
        data=profile.model_dump(by_alias=True, mode="json"),
    )


@router.put("/updateUser")
def update_user(
    payload: UpdateRequest,
    service: AccountService = Depends(get_service),
) -> Any:
    """Change password and/or names for a live session."""
    try:
        service.update(payload.to_payload())
    except AccountServiceError as exc:
        return _session_error(exc)
    except Exception as exc:
        return _unexpected_error(exc)
    return _success("User details updated successfully!!")
