"""Salted password hashing backed by bcrypt."""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of a secret.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class CredentialHasher:
    """Hash and verify passwords with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        """Store the bcrypt cost factor used for newly created hashes."""
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt digest for ``plaintext``."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``digest``.

        The comparison happens inside :func:`bcrypt.checkpw`, which is constant
        time. A digest that bcrypt cannot parse never matches.
        """
        try:
            return bcrypt.checkpw(_encode(plaintext), digest.encode("utf-8"))
        except ValueError:
            logger.warning("stored password digest could not be parsed")
            return False
