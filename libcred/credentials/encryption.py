"""Secret store contract and its Fernet-backed implementation."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken

from libcred.exceptions import ConfigurationError, DecryptionError

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretStore(Protocol):
    """Encrypt/decrypt single secret values to/from opaque strings."""

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* and return opaque ciphertext."""
        ...

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt *ciphertext*; raise :class:`DecryptionError` on failure."""
        ...


class FernetSecretStore:
    """Symmetric secret store using Fernet (AES-128-CBC + HMAC-SHA256).

    If no key is supplied an ephemeral key is generated and a WARNING is
    logged: secrets encrypted with it are unrecoverable after restart.
    Set ``LIBCRED_SECRET_ENCRYPTION_KEY`` (a URL-safe base64 32-byte Fernet
    key) in production.
    """

    def __init__(self, key: str = "") -> None:
        if not key:
            self._fernet = Fernet(Fernet.generate_key())
            logger.warning(
                "FernetSecretStore: no encryption key provided, generated an ephemeral key. "
                "Stored secrets will be unrecoverable after process restart. "
                "Set LIBCRED_SECRET_ENCRYPTION_KEY to a persistent Fernet key."
            )
        else:
            try:
                self._fernet = Fernet(key.encode())
            except (ValueError, TypeError) as exc:
                raise ConfigurationError(f"Invalid Fernet key: {exc}") from exc

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* and return a URL-safe base64 token string."""
        token: bytes = self._fernet.encrypt(plaintext.encode())
        return token.decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt *ciphertext* and return the original plaintext string.

        Raises:
            DecryptionError: if the token is malformed, tampered with, or was
                encrypted under another key, or if the plaintext is not UTF-8.
        """
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, UnicodeDecodeError) as exc:
            raise DecryptionError("Decryption failed: invalid, tampered or non-text token") from exc
