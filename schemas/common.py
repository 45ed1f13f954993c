"""
schemas/common.py

- Shared schemas reused across the project (Pydantic v2)
- Contents:
  1) error response standard: ErrorDetail, ErrorResponse
  2) success response envelope: SuccessEnvelope[T]
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) Error response standard
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest unit carrying an error code and message"""
    code: str = Field(..., description="error code (e.g. NOT_FOUND, VALIDATION_ERROR, INTERNAL_ERROR)")
    message: str = Field(..., description="human readable message, shown to the user as is")

class ErrorResponse(BaseModel):
    """
    Standard error body returned by the global handlers
    - middlewares/error_handler.py renders every failure with this schema
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="response time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) Success response envelope
# =========================================================

T = TypeVar("T")

class SuccessEnvelope(BaseModel, Generic[T]):
    """
    Success response wrapper
    - success: always True
    - data: the payload
    - message: optional human readable summary
    """
    success: bool = True
    data: T
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
