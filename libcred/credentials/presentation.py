"""Reduce stored credentials to views that never carry secrets."""

from typing import Optional

from libcred.types import LibraryCredential, LibraryCredentialView


def to_view(record: Optional[LibraryCredential]) -> Optional[LibraryCredentialView]:
    """Project *record* for display.

    Each secret field becomes a presence flag, set only when its ciphertext
    is non-empty. Nothing is decrypted.
    """
    if record is None:
        return None

    return LibraryCredentialView(
        org_id=record.org_id,
        id=record.id,
        uid=record.uid,
        name=record.name,
        type=record.type,
        json_data=dict(record.json_data),
        read_only=record.read_only,
        secure_json_fields={k: True for k, v in record.secure_json_data.items() if v},
    )
