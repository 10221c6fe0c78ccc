"""Secret-preserving merge for partial credential updates.

An update may resupply only some of a credential's secret fields. Before the
new secret map is encrypted and written, every stored secret the caller left
out is decrypted and carried over, so a partial update never drops data and
never hands plaintext back to the caller.
"""

import logging
from typing import Mapping

from libcred.credentials.encryption import SecretStore
from libcred.db.repository import CredentialRepository
from libcred.exceptions import CredentialNotFound, DecryptionError

logger = logging.getLogger(__name__)


class SecretMerger:
    """Computes the complete plaintext secret map to persist for an update.

    Args:
        repository: Source of the currently stored record.
        secret_store: Used to decrypt the stored values being preserved.
    """

    def __init__(self, repository: CredentialRepository, secret_store: SecretStore) -> None:
        self._repo = repository
        self._secrets = secret_store

    async def merge(
        self,
        org_id: int,
        credential_id: int,
        incoming: Mapping[str, str],
    ) -> dict[str, str]:
        """Return *incoming* plus every stored secret it does not name.

        Caller-supplied values always win. *incoming* is not mutated; a new
        dict is returned.

        An empty *incoming* short-circuits to ``{}`` without reading the
        record or decrypting anything: the caller is not touching secrets and
        the stored ciphertexts stay as they are.

        Raises:
            CredentialNotFound: no record for ``(org_id, credential_id)``.
            DecryptionError: a preserved value could not be decrypted. The
                merge is abandoned and no partial map is returned.
        """
        if not incoming:
            return {}

        record = await self._repo.get_library_credential(org_id, credential_id)
        if record is None:
            raise CredentialNotFound(
                f"Library credential {credential_id} not found",
                credential_id=credential_id,
            )

        merged = dict(incoming)
        preserved = 0
        for key, ciphertext in record.secure_json_data.items():
            if key in merged or not ciphertext:
                continue
            try:
                merged[key] = self._secrets.decrypt(ciphertext)
            except DecryptionError as exc:
                logger.warning(
                    "[Merge] Could not decrypt secret %r of credential %s (org %s)",
                    key, credential_id, org_id,
                )
                exc.credential_id = credential_id
                exc.secret_key = key
                raise
            preserved += 1

        logger.debug(
            "[Merge] credential %s: %d supplied, %d preserved",
            credential_id, len(incoming), preserved,
        )
        return merged
