"""Data access layer. Every query is org-scoped.

This is the ONLY layer that talks to the database.
All methods take org_id for isolation and return :class:`LibraryCredential`
domain objects rather than ORM rows.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from libcred.db.models import LibraryCredentialModel
from libcred.exceptions import NameExistsError, ReadOnlyCredentialError, UidGenerationError
from libcred.types import LibraryCredential

logger = logging.getLogger(__name__)


class CredentialRepository(Protocol):
    """Persistence contract for library credentials, keyed by ``(org_id, id)``."""

    async def get_library_credential(self, org_id: int, credential_id: int) -> Optional[LibraryCredential]:
        ...

    async def list_library_credentials(self, org_id: int) -> list[LibraryCredential]:
        ...

    async def uid_exists(self, org_id: int, uid: str) -> bool:
        ...

    async def create_library_credential(
        self,
        org_id: int,
        *,
        uid: str,
        name: str,
        credential_type: str,
        json_data: dict[str, Any],
        secure_json_data: dict[str, str],
        read_only: bool = False,
    ) -> LibraryCredential:
        ...

    async def update_library_credential(
        self, org_id: int, credential_id: int, updates: dict[str, Any]
    ) -> Optional[LibraryCredential]:
        ...

    async def delete_library_credential(self, org_id: int, credential_id: int) -> bool:
        ...


def _to_credential(row: LibraryCredentialModel) -> LibraryCredential:
    return LibraryCredential(
        org_id=row.org_id,
        id=row.id,
        uid=row.uid,
        name=row.name,
        type=row.type,
        json_data=dict(row.json_data or {}),
        secure_json_data=dict(row.secure_json_data or {}),
        read_only=bool(row.read_only),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class Repository:
    """SQLAlchemy implementation of :class:`CredentialRepository`.

    Args:
        session: Request-scoped async session.
        enforce_read_only: When true, deleting a ``read_only`` credential
            raises :class:`ReadOnlyCredentialError` instead of deleting it.
    """

    def __init__(self, session: AsyncSession, enforce_read_only: bool = False):
        self.session = session
        self.enforce_read_only = enforce_read_only

    async def _get_row(self, org_id: int, credential_id: int) -> Optional[LibraryCredentialModel]:
        result = await self.session.execute(
            select(LibraryCredentialModel).where(
                LibraryCredentialModel.org_id == org_id,
                LibraryCredentialModel.id == credential_id,
            )
        )
        return result.scalar_one_or_none()

    async def _name_taken(self, org_id: int, name: str, exclude_id: Optional[int] = None) -> bool:
        conditions = [
            LibraryCredentialModel.org_id == org_id,
            LibraryCredentialModel.name == name,
        ]
        if exclude_id is not None:
            conditions.append(LibraryCredentialModel.id != exclude_id)
        result = await self.session.execute(
            select(func.count()).select_from(LibraryCredentialModel).where(*conditions)
        )
        return result.scalar_one() > 0

    # ── Library credentials ──

    async def get_library_credential(self, org_id: int, credential_id: int) -> Optional[LibraryCredential]:
        """Get credential by id within org."""
        row = await self._get_row(org_id, credential_id)
        return _to_credential(row) if row is not None else None

    async def list_library_credentials(self, org_id: int) -> list[LibraryCredential]:
        """List all credentials of an org, oldest first."""
        result = await self.session.execute(
            select(LibraryCredentialModel)
            .where(LibraryCredentialModel.org_id == org_id)
            .order_by(LibraryCredentialModel.id)
        )
        return [_to_credential(r) for r in result.scalars().all()]

    async def uid_exists(self, org_id: int, uid: str) -> bool:
        """True when *uid* is already used within the org."""
        result = await self.session.execute(
            select(func.count()).select_from(LibraryCredentialModel).where(
                LibraryCredentialModel.org_id == org_id,
                LibraryCredentialModel.uid == uid,
            )
        )
        return result.scalar_one() > 0

    async def create_library_credential(
        self,
        org_id: int,
        *,
        uid: str,
        name: str,
        credential_type: str,
        json_data: dict[str, Any],
        secure_json_data: dict[str, str],
        read_only: bool = False,
    ) -> LibraryCredential:
        """Insert a credential. *secure_json_data* must already be encrypted.

        Raises:
            NameExistsError: name already used within the org.
            UidGenerationError: uid already used within the org.
        """
        if await self._name_taken(org_id, name):
            raise NameExistsError(f"Library credential with name '{name}' already exists", name=name)

        now = datetime.now(timezone.utc)
        row = LibraryCredentialModel(
            org_id=org_id,
            uid=uid,
            name=name,
            type=credential_type,
            json_data=dict(json_data),
            secure_json_data=dict(secure_json_data),
            read_only=read_only,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            # Lost a race with a concurrent insert; report which key collided.
            if await self._name_taken(org_id, name):
                raise NameExistsError(
                    f"Library credential with name '{name}' already exists", name=name
                ) from exc
            raise UidGenerationError(f"Library credential uid '{uid}' already exists") from exc
        await self.session.refresh(row)
        logger.info("[Repo] Created library credential %s (%s) in org %s", row.id, row.type, org_id)
        return _to_credential(row)

    async def update_library_credential(
        self, org_id: int, credential_id: int, updates: dict[str, Any]
    ) -> Optional[LibraryCredential]:
        """Apply partial updates to a credential.

        Keys absent from *updates* keep their stored value. Returns ``None``
        when no such credential exists.

        Raises:
            ValueError: unknown update key.
            NameExistsError: renamed onto a name already used within the org.
        """
        allowed = {"name", "type", "json_data", "secure_json_data"}
        bad = set(updates) - allowed
        if bad:
            raise ValueError(f"Unknown credential update keys: {bad}")

        row = await self._get_row(org_id, credential_id)
        if row is None:
            return None
        if "name" in updates and updates["name"] != row.name:
            if await self._name_taken(org_id, updates["name"], exclude_id=credential_id):
                raise NameExistsError(
                    f"Library credential with name '{updates['name']}' already exists",
                    name=updates["name"],
                    credential_id=credential_id,
                )
        name = updates.get("name", row.name)
        for key, value in updates.items():
            setattr(row, key, dict(value) if isinstance(value, dict) else value)
        row.updated_at = datetime.now(timezone.utc)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise NameExistsError(
                f"Library credential with name '{name}' already exists",
                name=name,
                credential_id=credential_id,
            ) from exc
        await self.session.refresh(row)
        return _to_credential(row)

    async def delete_library_credential(self, org_id: int, credential_id: int) -> bool:
        """Hard-delete a credential. Returns ``False`` if it did not exist."""
        row = await self._get_row(org_id, credential_id)
        if row is None:
            return False
        if self.enforce_read_only and row.read_only:
            raise ReadOnlyCredentialError(
                f"Library credential {credential_id} is read-only",
                credential_id=credential_id,
            )
        await self.session.delete(row)
        await self.session.commit()
        logger.info("[Repo] Deleted library credential %s in org %s", credential_id, org_id)
        return True
