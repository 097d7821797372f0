from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from account_service.api import routes
from account_service.domain.account import Account
from account_service.domain.contracts import AccountChanges, CreateAccountInput
from account_service.domain.errors import DuplicateAccount
from account_service.domain.service import AccountService
from account_service.security.passwords import CredentialHasher
from account_service.security.tokens import TokenGenerator, TokenManager


class FakeRepository:
    """In-memory repository mimicking Postgres-backed behaviors."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}

    def ensure_schema(self) -> None:
        return None

    def create_account(self, payload: CreateAccountInput) -> Account:
        if payload.email in self._accounts:
            raise DuplicateAccount(payload.email)
        account = Account(
            email=payload.email,
            password_hash=payload.password_hash,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
        self._accounts[payload.email] = account
        return account

    def get_account(self, email: str) -> Account | None:
        return self._accounts.get(email)

    def store_token(self, email: str, token: str, created_at: datetime) -> None:
        account = self._accounts.get(email)
        if account is not None:
            self._accounts[email] = replace(account, auth_token=token, token_created_at=created_at)

    def update_account(self, email: str, changes: AccountChanges) -> None:
        account = self._accounts.get(email)
        if account is None:
            return
        self._accounts[email] = replace(
            account,
            password_hash=changes.password_hash or account.password_hash,
            first_name=changes.first_name or account.first_name,
            last_name=changes.last_name or account.last_name,
        )


class FrozenClock:
    """Manually advanced UTC clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def hasher() -> CredentialHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return CredentialHasher(rounds=4)


@pytest.fixture
def token_manager(repository, clock) -> TokenManager:
    return TokenManager(repository, TokenGenerator(), clock=clock)


@pytest.fixture
def service(repository, hasher, token_manager) -> AccountService:
    return AccountService(repository, hasher, token_manager)


@pytest.fixture
def api_client(service):
    """Provide a FastAPI test client with isolated state."""
    app = FastAPI()
    app.include_router(routes.router)
    routes.register_error_handlers(app)
    app.state.account_service = service

    with TestClient(app) as client:
        yield client
