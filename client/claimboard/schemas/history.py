"""History schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HistoryRecord(BaseModel):
    """Schema for a single claim event."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias="_id")
    user_name: str = Field(..., alias="userName")
    points_awarded: int = Field(..., alias="pointsAwarded", ge=1)
    claimed_at: datetime = Field(..., alias="claimedAt")
    user_id: Optional[str] = Field(None, alias="userId")


class Pagination(BaseModel):
    """Schema for history pagination metadata."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    current_page: int = Field(1, alias="currentPage", ge=1)
    total_pages: int = Field(0, alias="totalPages", ge=0)
    has_prev: bool = Field(False, alias="hasPrev")
    has_next: bool = Field(False, alias="hasNext")
    total_records: Optional[int] = Field(None, alias="totalRecords", ge=0)
    limit: Optional[int] = Field(None, ge=1)


class HistoryPage(BaseModel):
    """Schema for one page of history plus its pagination."""

    model_config = ConfigDict(populate_by_name=True)

    history: list[HistoryRecord] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
