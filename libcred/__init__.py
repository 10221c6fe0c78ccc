"""libcred — org-scoped library credentials with encrypted secret fields.

Usage:
    from libcred import FernetSecretStore, LibraryCredentialService

    service = LibraryCredentialService(repository, FernetSecretStore(key))
    await service.update_credential(org_id, credential_id, command)
"""

from libcred.types import (
    LibraryCredential, LibraryCredentialView,
    AddLibraryCredentialCommand, UpdateLibraryCredentialCommand,
)
from libcred.exceptions import (
    LibcredError, ConfigurationError, InvalidArgument, CredentialError,
    CredentialNotFound, NameExistsError, UidGenerationError,
    ReadOnlyCredentialError, DecryptionError,
)
from libcred.credentials import (
    FernetSecretStore, SecretStore, SecretMerger, LibraryCredentialService, to_view,
)
from libcred.version import __version__

__all__ = [
    "LibraryCredential", "LibraryCredentialView",
    "AddLibraryCredentialCommand", "UpdateLibraryCredentialCommand",
    "LibcredError", "ConfigurationError", "InvalidArgument", "CredentialError",
    "CredentialNotFound", "NameExistsError", "UidGenerationError",
    "ReadOnlyCredentialError", "DecryptionError",
    "FernetSecretStore", "SecretStore", "SecretMerger", "LibraryCredentialService", "to_view",
    "__version__",
]
