from __future__ import annotations

import pytest


@pytest.mark.parametrize(
    ("rows", "size", "pages"),
    [(0, 6, 0), (1, 6, 1), (6, 6, 1), (7, 6, 2), (12, 6, 2), (13, 6, 3), (5, 1, 5)],
)
def test_total_pages(rows: int, size: int, pages: int) -> None:
    from services.dashboard.app.pagination import total_pages

    assert total_pages(rows, size) == pages


@pytest.mark.parametrize(("page", "size", "offset"), [(1, 6, 0), (2, 6, 6), (3, 6, 12), (4, 10, 30)])
def test_page_offset(page: int, size: int, offset: int) -> None:
    from services.dashboard.app.pagination import page_offset

    assert page_offset(page, size) == offset


def test_default_page_size_is_six() -> None:
    from services.dashboard.app.pagination import Page, page_offset, total_pages

    assert page_offset(2) == 6
    assert total_pages(7) == 2
    assert Page.of(3) == Page(number=3, size=6, offset=12)


@pytest.mark.parametrize("page", [0, -1, -100])
def test_page_below_one_is_rejected(page: int) -> None:
    from services.dashboard.app.errors import InvoiceValidationError
    from services.dashboard.app.pagination import Page, page_offset

    with pytest.raises(InvoiceValidationError) as exc:
        page_offset(page, 6)
    assert exc.value.fields == ["page"]

    with pytest.raises(InvoiceValidationError):
        Page.of(page)


def test_page_size_below_one_is_rejected() -> None:
    from services.dashboard.app.errors import InvoiceValidationError
    from services.dashboard.app.pagination import page_offset, total_pages

    with pytest.raises(InvoiceValidationError):
        page_offset(1, 0)
    with pytest.raises(InvoiceValidationError):
        total_pages(10, 0)


def test_negative_row_count_is_a_programming_error() -> None:
    from services.dashboard.app.pagination import total_pages

    with pytest.raises(ValueError, match="non-negative"):
        total_pages(-1, 6)
