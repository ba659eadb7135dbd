from __future__ import annotations

import math
from dataclasses import dataclass

from services.dashboard.app.errors import InvoiceValidationError
from services.dashboard.app.settings import SETTINGS


def _check_page_size(page_size: int) -> int:
    if page_size < 1:
        raise InvoiceValidationError({"page_size": ["Page size must be at least 1."]}, message="Invalid page size.")
    return page_size


def page_offset(page_number: int, page_size: int | None = None) -> int:
    size = _check_page_size(SETTINGS.page_size if page_size is None else page_size)
    if page_number < 1:
        # Pages are 1-indexed; we reject rather than clamp so bad links surface.
        raise InvoiceValidationError({"page": ["Page must be 1 or greater."]}, message="Invalid page number.")
    return (page_number - 1) * size


def total_pages(row_count: int, page_size: int | None = None) -> int:
    size = _check_page_size(SETTINGS.page_size if page_size is None else page_size)
    if row_count < 0:
        raise ValueError("row_count must be non-negative")
    return math.ceil(row_count / size)


@dataclass(frozen=True)
class Page:
    number: int
    size: int
    offset: int

    @classmethod
    def of(cls, number: int, size: int | None = None) -> Page:
        size = SETTINGS.page_size if size is None else size
        return cls(number=number, size=size, offset=page_offset(number, size))
