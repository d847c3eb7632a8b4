from datetime import UTC, datetime


def utc_now() -> datetime:
    """Helper function for SQLAlchemy default/onupdate."""
    return datetime.now(UTC)


def contains_ci(value: object, term: str) -> bool:
    """Case-insensitive substring match that treats ``None`` as no match."""
    if value is None:
        return False
    return term.lower() in str(value).lower()


def escape_like(term: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so ``term`` matches literally."""
    return term.replace(escape, escape * 2).replace("%", escape + "%").replace("_", escape + "_")


def dedupe_ids(ids) -> list[int]:
    """Drop duplicate ids while keeping the caller's order."""
    seen: set[int] = set()
    result: list[int] = []
    for value in ids or ():
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result
