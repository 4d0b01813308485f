# Core module
from .pagination import is_consistent, next_page_number, previous_page_number
from .view import DashboardView, compose_view, format_claimed_at, render_text

__all__ = [
    "is_consistent",
    "next_page_number",
    "previous_page_number",
    "DashboardView",
    "compose_view",
    "format_claimed_at",
    "render_text",
]
