"""Test fixtures: Fernet secret store, in-memory repository, SQLite session.

All tests should use these fixtures for consistency.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
from cryptography.fernet import Fernet
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from libcred.credentials.encryption import FernetSecretStore
from libcred.credentials.service import LibraryCredentialService
from libcred.db.models import Base
from libcred.db.repository import Repository
from libcred.exceptions import NameExistsError
from libcred.types import LibraryCredential

# One Fernet key per test session
_TEST_FERNET_KEY = Fernet.generate_key().decode()


# ── In-memory repository ──────────────────────────────────────────────────────

class InMemoryRepository:
    """Dict-backed CredentialRepository. Records every call in ``calls``."""

    def __init__(self):
        self._rows: dict[tuple[int, int], LibraryCredential] = {}
        self._next_id = 1
        self.calls: list[str] = []

    def seed(self, org_id: int, name: str, secure_json_data: dict[str, str] = None, **fields) -> LibraryCredential:
        record = LibraryCredential(
            org_id=org_id,
            id=self._next_id,
            uid=fields.pop("uid", f"uid{self._next_id}"),
            name=name,
            type=fields.pop("type", "generic"),
            secure_json_data=secure_json_data or {},
            **fields,
        )
        self._rows[(org_id, record.id)] = record
        self._next_id += 1
        return record

    def stored(self, org_id: int, credential_id: int) -> Optional[LibraryCredential]:
        return self._rows.get((org_id, credential_id))

    async def get_library_credential(self, org_id: int, credential_id: int) -> Optional[LibraryCredential]:
        self.calls.append("get")
        row = self._rows.get((org_id, credential_id))
        return row.model_copy(deep=True) if row is not None else None

    async def list_library_credentials(self, org_id: int) -> list[LibraryCredential]:
        self.calls.append("list")
        return [r.model_copy(deep=True) for (o, _), r in sorted(self._rows.items()) if o == org_id]

    async def uid_exists(self, org_id: int, uid: str) -> bool:
        self.calls.append("uid_exists")
        return any(o == org_id and r.uid == uid for (o, _), r in self._rows.items())

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
        self.calls.append("create")
        if any(o == org_id and r.name == name for (o, _), r in self._rows.items()):
            raise NameExistsError(f"Library credential with name '{name}' already exists", name=name)
        now = datetime.now(timezone.utc)
        record = LibraryCredential(
            org_id=org_id,
            id=self._next_id,
            uid=uid,
            name=name,
            type=credential_type,
            json_data=dict(json_data),
            secure_json_data=dict(secure_json_data),
            read_only=read_only,
            created_at=now,
            updated_at=now,
        )
        self._rows[(org_id, record.id)] = record
        self._next_id += 1
        return record.model_copy(deep=True)

    async def update_library_credential(
        self, org_id: int, credential_id: int, updates: dict[str, Any]
    ) -> Optional[LibraryCredential]:
        self.calls.append("update")
        row = self._rows.get((org_id, credential_id))
        if row is None:
            return None
        updated = row.model_copy(update={**updates, "updated_at": datetime.now(timezone.utc)}, deep=True)
        self._rows[(org_id, credential_id)] = updated
        return updated.model_copy(deep=True)

    async def delete_library_credential(self, org_id: int, credential_id: int) -> bool:
        self.calls.append("delete")
        row = self._rows.get((org_id, credential_id))
        if row is None:
            return False
        del self._rows[(org_id, credential_id)]
        return True


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def secret_store():
    """FernetSecretStore backed by the session Fernet key."""
    return FernetSecretStore(key=_TEST_FERNET_KEY)


@pytest.fixture
def spy_store(secret_store):
    """The session secret store wrapped so encrypt/decrypt calls are recorded."""
    return MagicMock(wraps=secret_store)


@pytest.fixture
def memory_repo():
    """Empty in-memory repository, no DB required."""
    return InMemoryRepository()


@pytest.fixture
def service(memory_repo, spy_store):
    """LibraryCredentialService over the in-memory repository."""
    return LibraryCredentialService(memory_repo, spy_store, uid_generation_retries=3)


@pytest.fixture
async def session():
    """In-memory SQLite async session with schema created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as s:
        yield s
    await engine.dispose()


@pytest.fixture
async def repository(session):
    """SQLAlchemy Repository bound to the in-memory session."""
    return Repository(session)
