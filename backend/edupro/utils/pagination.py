"""
Pagination helpers for list endpoints.

Responses use the admin portal's shape:
    {"currentPage": 1, "totalPages": 3, "totalItems": 25}
"""
from typing import Any, Dict, List, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100


def pagination_meta(total: int, page: int, page_size: int) -> Dict[str, int]:
    total_pages = (total + page_size - 1) // page_size if total > 0 else 1
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Any], Dict[str, int]]:
    """
    Apply offset pagination to a SQLAlchemy query.

    Returns the page's rows and the pagination metadata.
    """
    page = max(1, page)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    result = await db.execute(query.offset((page - 1) * page_size).limit(page_size))
    items = list(result.scalars().all())

    return items, pagination_meta(total, page, page_size)
