"""Library credentials — org-scoped configuration with encrypted secret fields."""

from libcred.credentials.encryption import FernetSecretStore, SecretStore
from libcred.credentials.merger import SecretMerger
from libcred.credentials.presentation import to_view
from libcred.credentials.service import LibraryCredentialService

__all__ = ["FernetSecretStore", "SecretStore", "SecretMerger", "to_view", "LibraryCredentialService"]
