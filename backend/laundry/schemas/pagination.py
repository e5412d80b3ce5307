"""Pagination schemas and utilities."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    items: List[T]
    total: int = Field(description="Total number of items matching the query")
    offset: int = Field(description="Number of items skipped")
    limit: int = Field(description="Maximum items requested")
    has_more: bool = Field(description="Whether more items are available")

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        offset: int,
        limit: int,
    ) -> "PaginatedResponse[T]":
        """Create a paginated response."""
        return cls(
            items=items,
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + len(items)) < total,
        )


def paginate_query(query, offset: int = 0, limit: int = 20):
    """
    Apply pagination to a SQLAlchemy query.

    Args:
        query: SQLAlchemy query object
        offset: Number of items to skip
        limit: Maximum items to return

    Returns:
        Tuple of (paginated items, total count)
    """
    # Count before ordering/limits are applied
    total = query.order_by(None).count()
    items = query.offset(offset).limit(limit).all()
    return items, total
