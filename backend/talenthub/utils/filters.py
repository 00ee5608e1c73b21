LIKE_ESCAPE = "\\"


def like_contains(term: str) -> str:
    """LIKE pattern matching ``term`` literally anywhere in the value."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def icontains(column, term: str):
    return column.ilike(like_contains(term), escape=LIKE_ESCAPE)
