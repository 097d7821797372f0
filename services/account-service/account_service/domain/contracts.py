"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CreateAccountInput:
    """Validated inputs required to create an account.

    ``password_hash`` is already hashed; plaintext never reaches the repository.
    """

    email: str
    password_hash: str
    first_name: str
    last_name: str


@dataclass(slots=True)
class AccountChanges:
    """Partial update applied to an existing account; ``None`` means unchanged."""

    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    def as_columns(self) -> dict[str, str]:
        """Return only the populated fields keyed by their column names."""
        columns = {
            "password": self.password_hash,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
        return {column: value for column, value in columns.items() if value is not None}
