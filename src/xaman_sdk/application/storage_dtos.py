"""DTOs for the per-application key-value storage."""

from __future__ import annotations

from typing import Any, Optional

from .shared.serialization import ResponseModel


class StorageApplicationDTO(ResponseModel):
    name: str
    uuidv4: str


class StorageResponseDTO(ResponseModel):
    application: StorageApplicationDTO
    data: Optional[Any] = None


class StorageStoreResponseDTO(StorageResponseDTO):
    stored: bool = False
