# Schemas module
from .user import User, AddUserRequest, is_rank_ordered
from .claim import ClaimRequest, ClaimResult
from .history import HistoryRecord, Pagination, HistoryPage
from .envelope import ApiEnvelope

__all__ = [
    "User",
    "AddUserRequest",
    "is_rank_ordered",
    "ClaimRequest",
    "ClaimResult",
    "HistoryRecord",
    "Pagination",
    "HistoryPage",
    "ApiEnvelope",
]
