import math

import pytest

from app.schemas.common import PaginatedList
from app.specifications import clamp_page


@pytest.mark.parametrize("total,page,size", [
    (0, 1, 10),
    (1, 1, 10),
    (10, 1, 10),
    (11, 2, 10),
    (12, 2, 5),
    (12, 3, 5),
    (100, 7, 15),
])
def test_paginated_list_math(total, page, size):
    result = PaginatedList[int].create([], total, page, size)
    assert result.total_pages == math.ceil(total / size)
    assert result.has_next_page == (page < result.total_pages)
    assert result.has_previous_page == (page > 1)


def test_paginated_list_serializes_camel_case():
    result = PaginatedList[str].create(["a", "b"], 12, 2, 5)
    assert result.model_dump(by_alias=True) == {
        "items": ["a", "b"],
        "pageNumber": 2,
        "pageSize": 5,
        "totalCount": 12,
        "totalPages": 3,
        "hasPreviousPage": True,
        "hasNextPage": True,
    }


@pytest.mark.parametrize("page,size,expected", [
    (None, None, (1, 10)),
    (0, 0, (1, 1)),
    (-3, 5, (1, 5)),
    (4, 1000, (4, 100)),
    (2, 100, (2, 100)),
])
def test_clamp_page(page, size, expected):
    assert clamp_page(page, size) == expected
