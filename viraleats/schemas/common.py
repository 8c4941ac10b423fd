"""Response envelope shared by every JSON endpoint."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    {data, source, count?, error?} — source tells the client which tier
    answered ('memory-cache', 'persisted-cache', 'source', 'cache', 'database').
    """

    data: Optional[T] = None
    source: Optional[str] = None
    count: Optional[int] = None
    error: Optional[str] = None
