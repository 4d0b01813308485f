"""Response envelope shared by every ledger endpoint."""

from typing import Any, Optional

from pydantic import BaseModel


class ApiEnvelope(BaseModel):
    """Schema for the ``{success, data, message}`` response wrapper."""

    success: bool
    data: Any = None
    message: Optional[str] = None
