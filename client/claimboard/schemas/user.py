"""User schemas for request/response validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """Schema for a participant as returned by the ledger service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias="_id")
    name: str
    total_points: int = Field(0, alias="totalPoints", ge=0)
    rank: int = Field(..., ge=1)


class AddUserRequest(BaseModel):
    """Schema for the add-user request body."""

    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


def is_rank_ordered(users: list[User]) -> bool:
    """Check that a roster is sorted by rank with non-increasing points."""
    for previous, current in zip(users, users[1:]):
        if current.rank <= previous.rank:
            return False
        if current.total_points > previous.total_points:
            return False
    return True
