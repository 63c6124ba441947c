"""Shared Pydantic bases used across request and response DTOs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class RequestModel(BaseModel):
    """Base for request bodies sent to the Xaman API.

    Request DTOs are immutable once constructed and are always sent with
    their wire aliases, leaving unset optional fields out of the body.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_request_body(self) -> dict[str, Any]:
        """Canonical JSON-ready body for this request.

        Centralizes the ``model_dump`` convention so every client serializes
        request bodies the same way.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ResponseModel(BaseModel):
    """Base for API responses.

    Unknown fields are kept (``model_extra``) so newer API versions never
    break decoding.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)
