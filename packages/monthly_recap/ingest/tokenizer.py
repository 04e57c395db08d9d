"""Single-line tokenizer for the upload CSV format.

The upload format is one record per physical line, so this works line by line
instead of going through :mod:`csv`: a quoted field may contain the delimiter
but never a newline. Quote characters toggle the in-quotes state and are
dropped from the field text. There is no escape for a literal quote inside a
quoted field; ``""`` simply toggles the state twice.
"""

from __future__ import annotations

QUOTE = '"'
DEFAULT_DELIMITER = ","


def tokenize_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split ``line`` into trimmed fields, honoring double-quoted spans.

    Never raises. Unbalanced quotes leave the rest of the line in one field.

    >>> tokenize_line('a,"b,c",d')
    ['a', 'b,c', 'd']
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    # The trailing field has no terminating delimiter.
    fields.append("".join(current).strip())
    return fields


def field_at(fields: list[str], index: int) -> str:
    """Return ``fields[index]`` trimmed, or ``""`` when the row is too short."""

    if index < len(fields):
        return fields[index].strip()
    return ""


__all__ = ["DEFAULT_DELIMITER", "field_at", "tokenize_line"]
