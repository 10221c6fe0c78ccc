"""Library credential API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from libcred.api.schemas import LibraryCredentialMutationResponse, MessageResponse
from libcred.config import config
from libcred.credentials.presentation import to_view
from libcred.credentials.service import LibraryCredentialService, generate_short_uid
from libcred.db.repository import Repository
from libcred.exceptions import (
    CredentialNotFound,
    DecryptionError,
    InvalidArgument,
    LibcredError,
    NameExistsError,
    ReadOnlyCredentialError,
    UidGenerationError,
)
from libcred.types import AddLibraryCredentialCommand, UpdateLibraryCredentialCommand

logger = logging.getLogger(__name__)
router = APIRouter(tags=["library-credentials"])


# ── Dependencies ──────────────────────────────────────────────────────────────

def _get_org(request: Request) -> int:
    org_id = getattr(request.state, "org_id", None)
    if not org_id:
        raise HTTPException(status_code=401, detail="Org not resolved.")
    return org_id


async def get_credential_service(request: Request):
    """Build a service bound to a request-scoped database session."""
    async_session = getattr(request.app.state, "async_session", None)
    secret_store = getattr(request.app.state, "secret_store", None)
    if async_session is None or secret_store is None:
        raise HTTPException(status_code=503, detail="Library credential service not initialised.")
    async with async_session() as session:
        yield LibraryCredentialService(
            Repository(session, enforce_read_only=config.enforce_read_only_delete),
            secret_store,
            uid_generation_retries=config.uid_generation_retries,
            uid_generator=lambda: generate_short_uid(config.uid_length),
        )


def _http_error(exc: LibcredError, fallback: str) -> HTTPException:
    """Translate a service error into the matching HTTP status."""
    if isinstance(exc, CredentialNotFound):
        return HTTPException(status_code=404, detail="Library credential not found")
    if isinstance(exc, (NameExistsError, UidGenerationError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, InvalidArgument):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, ReadOnlyCredentialError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, DecryptionError):
        logger.error("%s: could not decrypt stored secret %r", fallback, exc.secret_key)
    else:
        logger.error("%s: %s", fallback, exc)
    return HTTPException(status_code=500, detail=fallback)


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/library-credentials")
async def list_library_credentials(
    org_id: int = Depends(_get_org),
    service: LibraryCredentialService = Depends(get_credential_service),
):
    try:
        views = await service.list_credentials(org_id)
    except LibcredError as exc:
        raise _http_error(exc, "Failed to query library credentials")
    return [v.model_dump(mode="json", by_alias=True) for v in views]


@router.get("/library-credentials/{credential_id}")
async def get_library_credential(
    credential_id: int,
    org_id: int = Depends(_get_org),
    service: LibraryCredentialService = Depends(get_credential_service),
):
    try:
        view = await service.get_credential(org_id, credential_id)
    except LibcredError as exc:
        raise _http_error(exc, "Failed to query library credential")
    return view.model_dump(mode="json", by_alias=True)


@router.post("/library-credentials")
async def add_library_credential(
    body: AddLibraryCredentialCommand,
    org_id: int = Depends(_get_org),
    service: LibraryCredentialService = Depends(get_credential_service),
):
    try:
        record = await service.add_credential(org_id, body)
    except LibcredError as exc:
        raise _http_error(exc, "Failed to add library credential")
    return LibraryCredentialMutationResponse(
        message="Library Credential added",
        id=record.id,
        name=record.name,
        credential=to_view(record),
    ).model_dump(mode="json", by_alias=True)


@router.put("/library-credentials/{credential_id}")
async def update_library_credential(
    credential_id: int,
    body: UpdateLibraryCredentialCommand,
    org_id: int = Depends(_get_org),
    service: LibraryCredentialService = Depends(get_credential_service),
):
    try:
        record = await service.update_credential(org_id, credential_id, body)
    except LibcredError as exc:
        raise _http_error(exc, "Failed to update library credential")
    return LibraryCredentialMutationResponse(
        message="Library Credential updated",
        id=record.id,
        name=record.name,
        credential=to_view(record),
    ).model_dump(mode="json", by_alias=True)


@router.delete("/library-credentials/{credential_id}")
async def delete_library_credential(
    credential_id: int,
    org_id: int = Depends(_get_org),
    service: LibraryCredentialService = Depends(get_credential_service),
):
    try:
        await service.delete_credential(org_id, credential_id)
    except LibcredError as exc:
        raise _http_error(exc, "Failed to delete library credential")
    return MessageResponse(message="Library credential deleted").model_dump()
