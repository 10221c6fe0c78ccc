"""Pydantic models for API responses. Request bodies reuse the commands in types.py."""

from pydantic import BaseModel, ConfigDict

from libcred.types import LibraryCredentialView


class LibraryCredentialMutationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    id: int
    name: str
    credential: LibraryCredentialView


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str
    services: dict[str, bool]
