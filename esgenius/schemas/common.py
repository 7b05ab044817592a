"""Generic response envelopes shared across endpoint modules."""

from __future__ import annotations

from pydantic import BaseModel


class DeleteResponse(BaseModel):
    success: bool
    message: str
