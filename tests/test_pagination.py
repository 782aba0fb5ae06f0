from __future__ import annotations

import pytest

from ledgerdesk.core.pagination import calculate, normalize_page


@pytest.mark.parametrize(
    ("page_number", "page_size", "expected"),
    [
        (None, None, (1, 50)),
        (0, 0, (1, 50)),
        (-3, -1, (1, 50)),
        (3, 20, (3, 20)),
        (1, 5000, (1, 1000)),
    ],
)
def test_normalize_page(page_number, page_size, expected) -> None:
    assert normalize_page(page_number, page_size, default_page_size=50, max_page_size=1000) == expected


def test_calculate_middle_page() -> None:
    metadata = calculate(2, 10, 25)

    assert metadata.total_pages == 3
    assert metadata.has_previous_page is True
    assert metadata.has_next_page is True
    assert (metadata.first_item, metadata.last_item) == (11, 20)


def test_calculate_last_partial_page() -> None:
    metadata = calculate(3, 10, 25)

    assert metadata.has_next_page is False
    assert (metadata.first_item, metadata.last_item) == (21, 25)


def test_calculate_empty() -> None:
    metadata = calculate(1, 10, 0)

    assert metadata.total_pages == 0
    assert metadata.has_previous_page is False
    assert metadata.has_next_page is False
    assert (metadata.first_item, metadata.last_item) == (0, 0)


def test_calculate_page_past_the_end() -> None:
    metadata = calculate(5, 10, 20)

    assert metadata.total_pages == 2
    assert metadata.has_previous_page is True
    assert metadata.has_next_page is False
    assert (metadata.first_item, metadata.last_item) == (0, 0)
