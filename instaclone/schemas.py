"""Response envelope shared by every endpoint.

Successful calls answer `{"success": true, "data": ...}`; failures are rendered
by `instaclone.core.error_handlers` as `{"success": false, "error": ..., "code": ...}`.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None


class EmptyResponse(BaseModel):
    success: bool = True


def ok(data=None) -> dict:
    """Wrap `data` in the success envelope."""
    if data is None:
        return {"success": True}
    return {"success": True, "data": data}
