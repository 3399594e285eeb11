"""
Page-based pagination for list endpoints.

Usage:
    from rest_api.routers._common.pagination import Pagination, get_admin_users_pagination

    @router.get("/users")
    def list_users(
        pagination: Pagination = Depends(get_admin_users_pagination),
        db: Session = Depends(get_db),
    ):
        users, total = service.list_users(limit=pagination.limit, offset=pagination.offset)
        return {"users": users, "pagination": pagination.to_dict(total=total)}
"""

from dataclasses import dataclass
from typing import Any
from fastapi import Query

from shared.config.constants import Limits


@dataclass
class Pagination:
    """
    Pagination parameters with validation.

    Attributes:
        page: 1-indexed page number
        limit: Items per page (1 to max_limit)
        max_limit: Maximum allowed limit
    """

    page: int
    limit: int
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        self.page = max(1, self.page)
        self.limit = min(max(1, self.limit), self.max_limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_dict(self, total: int) -> dict[str, Any]:
        """Pagination metadata for the response."""
        pages = max(1, (total + self.limit - 1) // self.limit)
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_pages": pages,
            "has_next": self.page < pages,
            "has_prev": self.page > 1,
        }


def get_admin_users_pagination(
    page: int = Query(default=1, ge=1, description="Page number, starting at 1"),
) -> Pagination:
    """Fixed page size for the admin user list."""
    return Pagination(page=page, limit=Limits.ADMIN_USERS_PAGE_SIZE)
