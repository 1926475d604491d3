"""Common Pydantic v2 schemas shared across the API."""

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Pagination metadata included in paginated responses."""

    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Items per page")
    total_pages: int = Field(description="Total number of pages")
