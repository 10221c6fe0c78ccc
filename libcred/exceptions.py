"""Typed exception hierarchy. Every error libcred can raise."""


class LibcredError(Exception):
    """Base exception for all libcred errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(LibcredError):
    """Invalid runtime configuration (e.g. a malformed encryption key)."""
    pass


class InvalidArgument(LibcredError):
    """Malformed caller input, such as a non-positive credential id."""
    def __init__(self, message: str, field: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


# ── Credential errors ────────────────────────────────────────────────────────


class CredentialError(LibcredError):
    """Base exception for library credential failures."""
    def __init__(self, message: str, credential_id: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.credential_id = credential_id


class CredentialNotFound(CredentialError):
    """Credential id not found or does not belong to this org."""
    pass


class NameExistsError(CredentialError):
    """A credential with the same name already exists in the org."""
    def __init__(self, message: str, name: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.name = name


class UidGenerationError(CredentialError):
    """No unused uid could be produced within the configured retry bound."""
    def __init__(self, message: str, attempts: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts


class ReadOnlyCredentialError(CredentialError):
    """Mutation attempted on a credential flagged read-only."""
    pass


class DecryptionError(CredentialError):
    """The secret store could not decrypt a stored payload.

    Raised for tampered or malformed ciphertext and for ciphertext produced
    under a different key.
    """
    def __init__(self, message: str, secret_key: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.secret_key = secret_key
