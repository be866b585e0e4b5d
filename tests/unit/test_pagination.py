import pytest

from src.components.content import PageInfo, clamp_limit
from src.ports.repo import ContentQuery


@pytest.mark.parametrize(
    "page, limit, total, total_pages, has_next, has_prev",
    [
        (1, 10, 0, 0, False, False),
        (1, 10, 10, 1, False, False),
        (1, 10, 11, 2, True, False),
        (2, 10, 11, 2, False, True),
        (3, 5, 30, 6, True, True),
    ],
)
def test_page_info(page, limit, total, total_pages, has_next, has_prev):
    info = PageInfo.build(page, limit, total)
    assert info.total_pages == total_pages
    assert info.has_next is has_next
    assert info.has_prev is has_prev


def test_clamp_limit():
    assert clamp_limit(None) == 10
    assert clamp_limit(0) == 10
    assert clamp_limit(-3) == 10
    assert clamp_limit(25) == 25
    assert clamp_limit(500) == 100
    assert clamp_limit(500, max_limit=50) == 50


def test_query_offset():
    assert ContentQuery(page=1, limit=10).offset == 0
    assert ContentQuery(page=3, limit=10).offset == 20
    assert ContentQuery(page=0, limit=10).offset == 0
