"""LibraryCredentialService — org-scoped CRUD over encrypted credentials.

Plaintext secrets only ever travel inward: callers hand them to ``add`` and
``update``, they are encrypted before reaching the repository, and every
read path returns :class:`LibraryCredentialView` presence flags instead.
"""

import logging
import uuid
from typing import Callable, Optional

from libcred.credentials.encryption import SecretStore
from libcred.credentials.merger import SecretMerger
from libcred.credentials.presentation import to_view
from libcred.db.repository import CredentialRepository
from libcred.exceptions import CredentialNotFound, InvalidArgument, UidGenerationError
from libcred.types import (
    AddLibraryCredentialCommand,
    LibraryCredential,
    LibraryCredentialView,
    UpdateLibraryCredentialCommand,
)

logger = logging.getLogger(__name__)


def generate_short_uid(length: int = 9) -> str:
    """Random lowercase hex uid, short enough to share in URLs."""
    return uuid.uuid4().hex[:length]


class LibraryCredentialService:
    """Orchestrates the repository, the secret store and the merge step.

    Args:
        repository: Persistence for credential rows.
        secret_store: Encrypts secrets on the way in, decrypts preserved ones
            during updates.
        uid_generation_retries: Candidate uids tried before giving up with
            :class:`UidGenerationError`.
        uid_generator: Produces uid candidates; defaults to
            :func:`generate_short_uid`.
    """

    def __init__(
        self,
        repository: CredentialRepository,
        secret_store: SecretStore,
        uid_generation_retries: int = 3,
        uid_generator: Optional[Callable[[], str]] = None,
    ) -> None:
        self._repo = repository
        self._secrets = secret_store
        self._merger = SecretMerger(repository, secret_store)
        self._uid_retries = max(1, uid_generation_retries)
        self._new_uid = uid_generator or generate_short_uid

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_credentials(self, org_id: int) -> list[LibraryCredentialView]:
        """Return views for every credential of *org_id*, in repository order."""
        records = await self._repo.list_library_credentials(org_id)
        return [to_view(r) for r in records]

    async def get_credential(self, org_id: int, credential_id: int) -> LibraryCredentialView:
        """Return the view of one credential.

        Raises:
            CredentialNotFound: unknown id or org mismatch.
        """
        record = await self._repo.get_library_credential(org_id, credential_id)
        if record is None:
            raise CredentialNotFound(
                f"Library credential {credential_id} not found",
                credential_id=credential_id,
            )
        return to_view(record)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_credential(self, org_id: int, command: AddLibraryCredentialCommand) -> LibraryCredential:
        """Encrypt the command's secrets and create the credential.

        Raises:
            InvalidArgument: non-positive org id, or blank name or type.
            NameExistsError: name already used within the org.
            UidGenerationError: the given uid is taken, or no free uid was
                found within the retry bound.
        """
        if org_id <= 0:
            raise InvalidArgument("Missing valid org id", field="org_id")
        if not command.name.strip():
            raise InvalidArgument("Library credential name must not be blank", field="name")
        if not command.type.strip():
            raise InvalidArgument("Library credential type must not be blank", field="type")

        uid = await self._resolve_uid(org_id, command.uid)
        encrypted = self._encrypt_all(command.secure_json_data)
        record = await self._repo.create_library_credential(
            org_id,
            uid=uid,
            name=command.name,
            credential_type=command.type,
            json_data=command.json_data,
            secure_json_data=encrypted,
            read_only=command.read_only,
        )
        logger.info(
            "[Service] Added library credential %s '%s' in org %s (secret fields: %s)",
            record.id, record.name, org_id, sorted(encrypted),
        )
        return record

    async def update_credential(
        self,
        org_id: int,
        credential_id: int,
        command: UpdateLibraryCredentialCommand,
    ) -> LibraryCredential:
        """Apply *command*, preserving stored secrets the caller omitted.

        If the command carries no secret fields, stored ciphertexts are left
        exactly as they are. Otherwise the merged secret map is re-encrypted
        and written in the same single repository update as the other fields.

        Raises:
            CredentialNotFound: unknown id or org mismatch.
            DecryptionError: a preserved secret could not be decrypted;
                nothing is written.
            NameExistsError: renamed onto a name already used within the org.
        """
        merged = await self._merger.merge(org_id, credential_id, command.secure_json_data)

        updates: dict = {}
        if command.name is not None:
            updates["name"] = command.name
        if command.type is not None:
            updates["type"] = command.type
        if command.json_data is not None:
            updates["json_data"] = command.json_data
        if merged:
            updates["secure_json_data"] = self._encrypt_all(merged)

        record = await self._repo.update_library_credential(org_id, credential_id, updates)
        if record is None:
            raise CredentialNotFound(
                f"Library credential {credential_id} not found",
                credential_id=credential_id,
            )
        return record

    async def delete_credential(self, org_id: int, credential_id: int) -> None:
        """Delete a credential by id.

        The ``read_only`` flag is not checked here; see
        ``LIBCRED_ENFORCE_READ_ONLY_DELETE`` for the repository-level guard.

        Raises:
            InvalidArgument: ``credential_id <= 0``, before any repository call.
            CredentialNotFound: nothing was deleted.
        """
        if credential_id <= 0:
            raise InvalidArgument("Missing valid library credentials id", field="id")

        if not await self._repo.delete_library_credential(org_id, credential_id):
            raise CredentialNotFound(
                f"Library credential {credential_id} not found",
                credential_id=credential_id,
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _encrypt_all(self, secrets: dict[str, str]) -> dict[str, str]:
        return {key: self._secrets.encrypt(value) for key, value in secrets.items()}

    async def _resolve_uid(self, org_id: int, requested: Optional[str]) -> str:
        if requested:
            if await self._repo.uid_exists(org_id, requested):
                raise UidGenerationError(f"Library credential uid '{requested}' already exists")
            return requested

        for _ in range(self._uid_retries):
            candidate = self._new_uid()
            if not await self._repo.uid_exists(org_id, candidate):
                return candidate
        raise UidGenerationError(
            f"Failed to generate a unique library credential uid after {self._uid_retries} attempts",
            attempts=self._uid_retries,
        )
