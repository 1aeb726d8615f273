from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Largest page whose offset still fits the signed 64-bit skip MongoDB accepts
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE


class PageResult(BaseModel, Generic[T]):
    """Page-numbered result wrapper for list endpoints."""

    content: list[T] = Field(..., description="Items on the requested page")
    page: int = Field(..., description="Zero-based page index", ge=0)
    size: int = Field(..., description="Maximum items per page", ge=1)
    total_pages: int = Field(..., description="Number of pages for the current total", ge=0)


class PageRequest(BaseModel):
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def parse(cls, page: str | None, size: str | None) -> "PageRequest":
        """Normalize raw query values, falling back to defaults for anything out of range."""
        return cls(page=_parse_page(page), size=_parse_size(size))


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_page(value: str | None) -> int:
    page = _parse_int(value)
    if page is None or page < 0:
        return 0
    return min(page, MAX_PAGE)


def _parse_size(value: str | None) -> int:
    size = _parse_int(value)
    if size is None or size < 1 or size > MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return size
