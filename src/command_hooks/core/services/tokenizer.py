"""
Quote-aware tokenizer for command argument strings.
"""

from __future__ import annotations

QUOTE_CHAR = '"'
DELIMITER = " "


def tokenize(text: str | None) -> list[str]:
    """Split ``text`` on spaces, keeping double-quoted spans together.

    The quote characters themselves are dropped. An unbalanced quote is not an
    error: everything after it is treated as part of the quoted span.

    >>> tokenize('--name "John Doe" --age 3')
    ['--name', 'John Doe', '--age', '3']
    """
    if not text:
        return []

    tokens: list[str] = []
    current: list[str] = []
    in_quote = False

    for char in text:
        if char == QUOTE_CHAR:
            in_quote = not in_quote
        elif char == DELIMITER and not in_quote:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens
