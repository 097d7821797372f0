"""Database repository for account data."""

from __future__ import annotations

import logging
from datetime import datetime

from psycopg import errors, sql
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account
from .domain.contracts import AccountChanges, CreateAccountInput
from .domain.errors import DuplicateAccount

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id BIGSERIAL PRIMARY KEY,
    email_address TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    auth_token TEXT,
    token_create_time TIMESTAMPTZ
)
"""

_ACCOUNT_COLUMNS = (
    "email_address, password, first_name, last_name, auth_token, token_create_time"
)


class AccountRepository:
    """Postgres-backed account persistence keyed by email address.

    Every method borrows one pooled connection and commits before returning;
    no method spans a transaction across calls.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the ``users`` table when it does not exist yet."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                conn.commit()

    def create_account(self, payload: CreateAccountInput) -> Account:
        """Insert a new account with no session token.

        Raises
        ------
        DuplicateAccount
            An account with the same email address already exists.
        """
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO users (email_address, password, first_name, last_name)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {_ACCOUNT_COLUMNS}
                        """,
                        (
                            payload.email,
                            payload.password_hash,
                            payload.first_name,
                            payload.last_name,
                        ),
                    )
                    record = cur.fetchone()
                    conn.commit()
        except errors.UniqueViolation as exc:
            raise DuplicateAccount(payload.email) from exc
        return self._map_record(record)

    def get_account(self, email: str) -> Account | None:
        """Fetch the account for ``email`` or return ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_ACCOUNT_COLUMNS}
                    FROM users
                    WHERE email_address = %s
                    """,
                    (email,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_record(row)

    def store_token(self, email: str, token: str, created_at: datetime) -> None:
        """Overwrite the session token and its creation time in one statement."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE users
                    SET auth_token = %s, token_create_time = %s
                    WHERE email_address = %s
                    """,
                    (token, created_at, email),
                )
                conn.commit()

    def update_account(self, email: str, changes: AccountChanges) -> None:
        """Apply the populated fields of ``changes``; an empty change set is a no-op."""
        columns = changes.as_columns()
        if not columns:
            return
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in columns
        )
        query = sql.SQL("UPDATE users SET {} WHERE email_address = %s").format(assignments)
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (*columns.values(), email))
                conn.commit()

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            email=row[0],
            password_hash=row[1],
            first_name=row[2],
            last_name=row[3],
            auth_token=row[4],
            token_created_at=row[5],
        )
