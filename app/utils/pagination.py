import math
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class Pagination:
    current_page: int
    items_per_page: int
    total_pages: int
    total: int
    skip: int
    has_next: bool
    has_prev: bool
    next_page: int | None
    prev_page: int | None

    def to_dict(self) -> dict:
        return asdict(self)


def paginate(page: int | None = 1, limit: int | None = 10, total: int = 0) -> Pagination:
    current_page = max(1, int(page or 1))
    items_per_page = max(1, int(limit or 1))
    total_pages = math.ceil(total / items_per_page)
    has_next = current_page < total_pages
    has_prev = current_page > 1
    return Pagination(
        current_page=current_page,
        items_per_page=items_per_page,
        total_pages=total_pages,
        total=total,
        skip=(current_page - 1) * items_per_page,
        has_next=has_next,
        has_prev=has_prev,
        next_page=current_page + 1 if has_next else None,
        prev_page=current_page - 1 if has_prev else None,
    )
