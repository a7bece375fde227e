"""
Page/limit pagination shared by every list endpoint
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_page_params(query_params) -> PageParams:
    """
    Read ``page`` and ``limit`` from the query string.
    page < 1 falls back to 1; limit outside 1..100 falls back to 10.
    """
    page = _to_int(query_params.get('page'), 1) or 1
    limit = _to_int(query_params.get('limit'), DEFAULT_PAGE_SIZE) or DEFAULT_PAGE_SIZE

    if page < 1:
        page = 1
    if limit < 1 or limit > MAX_PAGE_SIZE:
        limit = DEFAULT_PAGE_SIZE
    return PageParams(page=page, limit=limit)


def build_pagination(params: PageParams, total_items: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_items / params.limit) if total_items else 0
    has_next = params.page < total_pages
    has_previous = params.page > 1
    return {
        "page": params.page,
        "limit": params.limit,
        "total_items": total_items,
        "total_pages": total_pages,
        "has_next": has_next,
        "has_previous": has_previous,
        "next_page": params.page + 1 if has_next else None,
        "previous_page": params.page - 1 if has_previous else None,
    }


def paginate(queryset, query_params) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Slice a queryset for the requested page.
    Returns (rows, pagination metadata).
    """
    params = parse_page_params(query_params)
    total_items = queryset.count()
    rows = list(queryset[params.offset:params.offset + params.limit])
    return rows, build_pagination(params, total_items)
