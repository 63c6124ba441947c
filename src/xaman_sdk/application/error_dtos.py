"""DTOs for the two error envelopes returned by the Xaman API."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class FatalApiErrorDTO(BaseModel):
    """``{"error": true, "message": ..., "reference": ..., "code": ...}``"""

    error: Literal[True]
    message: str = Field(..., min_length=1)
    reference: Optional[str] = None
    code: Optional[int] = None
    req: Optional[str] = None
    method: Optional[str] = None


class ApiErrorDetailsDTO(BaseModel):
    reference: Optional[str] = None
    code: Optional[int] = None


class ApiErrorDTO(BaseModel):
    """``{"error": {"reference": ..., "code": ...}}``"""

    error: ApiErrorDetailsDTO
