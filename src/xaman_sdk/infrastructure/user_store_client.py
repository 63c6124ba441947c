from __future__ import annotations

from typing import Any, Mapping, Union

from ..application.storage_dtos import StorageResponseDTO, StorageStoreResponseDTO
from ..domain.shared.transport_protocol import RequestSender

STORAGE_PATH = "platform/app-storage"


class XamanUserStoreClient:
    """Per-application JSON storage kept by Xaman."""

    def __init__(self, sender: RequestSender) -> None:
        self._sender = sender

    async def get(self) -> StorageResponseDTO:
        return await self._sender.send("GET", STORAGE_PATH, StorageResponseDTO)

    async def store(
        self, data: Union[str, Mapping[str, Any]]
    ) -> StorageStoreResponseDTO:
        body = data if isinstance(data, str) else dict(data)
        return await self._sender.send(
            "POST", STORAGE_PATH, StorageStoreResponseDTO, body=body
        )

    async def clear(self) -> StorageStoreResponseDTO:
        return await self._sender.send("DELETE", STORAGE_PATH, StorageStoreResponseDTO)
