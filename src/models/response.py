"""Common response wrapper."""

from typing import Any, Optional
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Message envelope for responses that carry no ticket snapshot."""

    message: str
    data: Optional[Any] = None
    correlation_id: Optional[str] = None
