"""Repository against an in-memory SQLite database (aiosqlite), no Postgres required."""

from unittest.mock import AsyncMock

import pytest

from libcred.credentials.service import LibraryCredentialService
from libcred.db.repository import Repository
from libcred.exceptions import NameExistsError, ReadOnlyCredentialError, UidGenerationError
from libcred.types import AddLibraryCredentialCommand, UpdateLibraryCredentialCommand

ORG_A = 1
ORG_B = 2


async def _create(repo: Repository, name: str = "warehouse", org_id: int = ORG_A, **kwargs):
    return await repo.create_library_credential(
        org_id,
        uid=kwargs.pop("uid", f"uid-{name}"),
        name=name,
        credential_type=kwargs.pop("credential_type", "postgres"),
        json_data=kwargs.pop("json_data", {}),
        secure_json_data=kwargs.pop("secure_json_data", {}),
        **kwargs,
    )


class TestCreate:
    async def test_create_assigns_id_and_timestamps(self, repository):
        rec = await _create(repository, json_data={"host": "h"}, secure_json_data={"password": "ct"})
        assert rec.id > 0
        assert rec.org_id == ORG_A
        assert rec.json_data == {"host": "h"}
        assert rec.secure_json_data == {"password": "ct"}
        assert rec.created_at is not None
        assert rec.read_only is False

    async def test_duplicate_name_raises(self, repository):
        await _create(repository, name="dup", uid="u1")
        with pytest.raises(NameExistsError):
            await _create(repository, name="dup", uid="u2")

    async def test_duplicate_uid_raises(self, repository):
        await _create(repository, name="one", uid="same")
        with pytest.raises(UidGenerationError):
            await _create(repository, name="two", uid="same")

    async def test_same_name_and_uid_in_other_org(self, repository):
        await _create(repository, name="shared", uid="shared", org_id=ORG_A)
        rec = await _create(repository, name="shared", uid="shared", org_id=ORG_B)
        assert rec.org_id == ORG_B


class TestRead:
    async def test_get_is_org_scoped(self, repository):
        rec = await _create(repository)
        assert (await repository.get_library_credential(ORG_A, rec.id)).name == "warehouse"
        assert await repository.get_library_credential(ORG_B, rec.id) is None

    async def test_list_returns_org_rows_in_insert_order(self, repository):
        await _create(repository, name="a")
        await _create(repository, name="b", org_id=ORG_B)
        await _create(repository, name="c")
        assert [r.name for r in await repository.list_library_credentials(ORG_A)] == ["a", "c"]

    async def test_uid_exists(self, repository):
        await _create(repository, uid="abc")
        assert await repository.uid_exists(ORG_A, "abc") is True
        assert await repository.uid_exists(ORG_B, "abc") is False


class TestUpdate:
    async def test_update_applies_only_given_keys(self, repository):
        rec = await _create(repository, json_data={"host": "h"}, secure_json_data={"password": "ct"})
        updated = await repository.update_library_credential(ORG_A, rec.id, {"json_data": {"host": "h2"}})
        assert updated.json_data == {"host": "h2"}
        assert updated.secure_json_data == {"password": "ct"}

    async def test_update_missing_returns_none(self, repository):
        assert await repository.update_library_credential(ORG_A, 999, {"name": "x"}) is None

    async def test_update_unknown_key_raises(self, repository):
        rec = await _create(repository)
        with pytest.raises(ValueError, match="Unknown credential update keys"):
            await repository.update_library_credential(ORG_A, rec.id, {"org_id": 5})

    async def test_rename_onto_existing_name_raises(self, repository):
        await _create(repository, name="first")
        second = await _create(repository, name="second")
        with pytest.raises(NameExistsError):
            await repository.update_library_credential(ORG_A, second.id, {"name": "first"})

    async def test_rename_losing_race_raises_and_keeps_session_usable(self, repository, monkeypatch):
        await _create(repository, name="first")
        second = await _create(repository, name="second")
        # Another writer took the name between the check and the commit
        monkeypatch.setattr(repository, "_name_taken", AsyncMock(return_value=False))
        with pytest.raises(NameExistsError) as exc_info:
            await repository.update_library_credential(ORG_A, second.id, {"name": "first"})
        assert exc_info.value.credential_id == second.id
        assert exc_info.value.name == "first"
        stored = await repository.get_library_credential(ORG_A, second.id)
        assert stored.name == "second"


class TestDelete:
    async def test_delete_is_hard(self, repository):
        rec = await _create(repository)
        assert await repository.delete_library_credential(ORG_A, rec.id) is True
        assert await repository.get_library_credential(ORG_A, rec.id) is None
        assert await repository.delete_library_credential(ORG_A, rec.id) is False

    async def test_delete_other_org_is_noop(self, repository):
        rec = await _create(repository)
        assert await repository.delete_library_credential(ORG_B, rec.id) is False
        assert await repository.get_library_credential(ORG_A, rec.id) is not None

    async def test_read_only_guard_is_opt_in(self, session):
        repo = Repository(session)
        rec = await _create(repo, name="ro", read_only=True)
        assert await repo.delete_library_credential(ORG_A, rec.id) is True

        guarded = Repository(session, enforce_read_only=True)
        rec = await _create(guarded, name="ro2", read_only=True)
        with pytest.raises(ReadOnlyCredentialError):
            await guarded.delete_library_credential(ORG_A, rec.id)
        assert await guarded.get_library_credential(ORG_A, rec.id) is not None


class TestServiceEndToEnd:
    async def test_partial_update_round_trip_through_sqlite(self, repository, secret_store):
        service = LibraryCredentialService(repository, secret_store)
        rec = await service.add_credential(ORG_A, AddLibraryCredentialCommand(
            name="warehouse", type="postgres", secure_json_data={"a": "1", "b": "2"},
        ))
        stored = await repository.get_library_credential(ORG_A, rec.id)
        assert "1" not in stored.secure_json_data.values()

        await service.update_credential(
            ORG_A, rec.id, UpdateLibraryCredentialCommand(secure_json_data={"a": "9"}),
        )
        stored = await repository.get_library_credential(ORG_A, rec.id)
        assert {k: secret_store.decrypt(v) for k, v in stored.secure_json_data.items()} == {"a": "9", "b": "2"}

        view = await service.get_credential(ORG_A, rec.id)
        assert view.secure_json_fields == {"a": True, "b": True}
