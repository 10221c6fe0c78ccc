"""All shared types. Everything imports from here.

Field names are snake_case in Python and camelCase on the wire
(``jsonData``, ``secureJsonData``, ``secureJsonFields``...). Models accept
either spelling on input; dump with ``by_alias=True`` for API output.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ── Stored record ──────────────────────────────────────────────────────

class LibraryCredential(_WireModel):
    """One stored library credential.

    ``secure_json_data`` holds ciphertext only; plaintext never reaches this
    model once a record has been persisted.
    """
    org_id: int = Field(gt=0, alias="orgId")
    id: int = 0                                        # assigned by the repository
    uid: str = ""
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    json_data: dict[str, Any] = Field(default_factory=dict, alias="jsonData")
    secure_json_data: dict[str, str] = Field(default_factory=dict, alias="secureJsonData")
    read_only: bool = Field(default=False, alias="readOnly")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ── Commands ───────────────────────────────────────────────────────────

class AddLibraryCredentialCommand(_WireModel):
    """Input for creating a credential. ``secure_json_data`` is plaintext."""
    org_id: int = Field(default=0, alias="orgId")
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    uid: Optional[str] = None
    json_data: dict[str, Any] = Field(default_factory=dict, alias="jsonData")
    secure_json_data: dict[str, str] = Field(default_factory=dict, alias="secureJsonData")
    read_only: bool = Field(default=False, alias="readOnly")


class UpdateLibraryCredentialCommand(_WireModel):
    """Input for updating a credential.

    ``secure_json_data`` is plaintext and may name only a subset of the
    stored secret keys; omitted keys keep their stored value. ``None`` for
    ``json_data``, ``name`` or ``type`` leaves that attribute unchanged.
    """
    org_id: int = Field(default=0, alias="orgId")
    id: int = 0
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    json_data: Optional[dict[str, Any]] = Field(default=None, alias="jsonData")
    secure_json_data: dict[str, str] = Field(default_factory=dict, alias="secureJsonData")


# ── Presentation ───────────────────────────────────────────────────────

class LibraryCredentialView(_WireModel):
    """Safe-to-display projection: secret presence flags, never plaintext."""
    org_id: int = Field(alias="orgId")
    id: int
    uid: str
    name: str
    type: str
    json_data: dict[str, Any] = Field(default_factory=dict, alias="jsonData")
    secure_json_fields: dict[str, bool] = Field(default_factory=dict, alias="secureJsonFields")
    read_only: bool = Field(default=False, alias="readOnly")
