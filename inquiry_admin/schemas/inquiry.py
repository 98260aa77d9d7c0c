from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

InquiryStatus = Literal["new", "read", "replied"]

PAGE_LIMIT = 10


class Inquiry(BaseModel):
    """One contact-form submission as returned by /api/contact."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: str
    email: str
    company: Optional[str] = None
    subject: str
    message: str
    timestamp: str
    status: Optional[InquiryStatus] = None

    @property
    def display_status(self) -> str:
        # a missing status means the inquiry was never opened
        return self.status or "new"


class PaginationInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    current_page: int = Field(default=1, ge=1, alias="currentPage")
    total_pages: int = Field(default=1, ge=0, alias="totalPages")
    total_count: int = Field(default=0, ge=0, alias="totalCount")
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    has_previous_page: bool = Field(default=False, alias="hasPreviousPage")
    limit: int = Field(default=PAGE_LIMIT, ge=1)

    def is_consistent(self) -> bool:
        return (
            self.has_previous_page == (self.current_page > 1)
            and self.has_next_page == (self.current_page < self.total_pages)
        )

    @classmethod
    def single_page(cls, count: int) -> "PaginationInfo":
        """Pagination for the legacy bare-array payload: everything on page 1 of 1."""
        return cls(
            current_page=1,
            total_pages=1,
            total_count=count,
            has_next_page=False,
            has_previous_page=False,
            limit=PAGE_LIMIT,
        )

    @property
    def first_item(self) -> int:
        return (self.current_page - 1) * self.limit + 1

    @property
    def last_item(self) -> int:
        return min(self.current_page * self.limit, self.total_count)

    def range_label(self) -> str:
        return f"Showing {self.first_item} to {self.last_item} of {self.total_count} inquiries"


class InquiryPage(BaseModel):
    """Normalized result of one listing call."""

    model_config = ConfigDict(frozen=True)

    data: tuple[Inquiry, ...]
    pagination: PaginationInfo
    legacy_format: bool = False
