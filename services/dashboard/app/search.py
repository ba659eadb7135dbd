from __future__ import annotations

# Backslash is PostgreSQL's default LIKE escape character.
_ESCAPE = "\\"
_METACHARACTERS = ("%", "_")


def sanitize_search_term(text: str | None) -> str:
    """
    Trim user search text and escape LIKE wildcards so they match literally.

    The escape character itself is escaped first; otherwise a typed "\\%" would
    turn back into a live wildcard.
    """
    if not text:
        return ""
    out = text.strip().replace(_ESCAPE, _ESCAPE + _ESCAPE)
    for ch in _METACHARACTERS:
        out = out.replace(ch, _ESCAPE + ch)
    return out


def contains_pattern(text: str | None) -> str:
    return f"%{sanitize_search_term(text)}%"
