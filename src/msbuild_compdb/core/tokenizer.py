"""Command-line tokenizer for compiler invocations in build logs.

Splits on whitespace and treats double-quoted spans as part of a single
token. Backslashes are literal (Windows paths are common in MSBuild logs),
so there is no escape handling beyond the closing quote.
"""

from __future__ import annotations

from collections.abc import Iterable

_QUOTE = '"'


def tokenize(line: str) -> list[str]:
    """Split a log line into tokens.

    A quote may open anywhere in a token (``/Fo"x64 Debug\\"``); the quotes
    are dropped and the quoted text is kept verbatim. An unterminated quote
    runs to the end of the line.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    in_quotes = False

    for ch in line.rstrip("\r\n"):
        if ch == _QUOTE:
            in_quotes = not in_quotes
            in_token = True
            continue
        if ch.isspace() and not in_quotes:
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
            continue
        current.append(ch)
        in_token = True

    if in_token:
        tokens.append("".join(current))
    return tokens


def quote_token(token: str) -> str:
    """Quote a token when it would not survive ``tokenize`` as-is."""
    if not token or any(ch.isspace() for ch in token):
        return f"{_QUOTE}{token}{_QUOTE}"
    return token


def join_tokens(tokens: Iterable[str]) -> str:
    """Inverse of :func:`tokenize` for any token list it produced."""
    return " ".join(quote_token(t) for t in tokens)
