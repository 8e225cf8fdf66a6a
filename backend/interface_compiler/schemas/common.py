"""Shared response envelopes."""
from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
