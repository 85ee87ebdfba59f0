import re

from sqlalchemy import or_, false
from sqlalchemy.sql import Select

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def apply_sort(
    query: Select,
    model,
    sort: str | None,
    allowed: set[str],
    default: str = "-created_at",
) -> Select:
    """Order by ``field`` or ``-field`` (descending).

    camelCase names are accepted, unknown fields fall back to ``default`` and
    ``id`` is always appended so equal keys page deterministically.
    """
    for candidate in (sort, default):
        if not candidate:
            continue
        descending = candidate.startswith("-")
        field = to_snake(candidate.lstrip("-+"))
        if field in allowed and hasattr(model, field):
            column = getattr(model, field)
            if descending:
                return query.order_by(column.desc(), model.id.desc())
            return query.order_by(column.asc(), model.id.asc())
    return query.order_by(model.id.desc())


LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Make % and _ in user input match literally; pair with escape=LIKE_ESCAPE."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def text_search_condition(term: str | None, columns):
    """Case-insensitive substring match; whitespace separated words are OR-ed."""
    words = (term or "").split()
    if not words:
        return false()
    return or_(
        *(
            column.ilike(f"%{escape_like(word)}%", escape=LIKE_ESCAPE)
            for word in words
            for column in columns
        )
    )
