"""Claim schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user import User


class ClaimRequest(BaseModel):
    """Schema for the claim-points request body."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)


class ClaimResult(BaseModel):
    """Schema for the data returned by a successful claim.

    Only ``all_users`` is relied upon; the awarded amount is informational.
    """

    model_config = ConfigDict(populate_by_name=True)

    all_users: list[User] = Field(..., alias="allUsers")
    user: Optional[User] = None
    points_awarded: Optional[int] = Field(None, alias="pointsAwarded")
