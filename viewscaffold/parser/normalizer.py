"""C# source normalization.

Erases the interior of comments and string/char literals so that braces,
brackets and keywords inside them cannot confuse the line-oriented
recognizers downstream.  Delimiters are kept as empty placeholders
(``""``, ``''``, ``@""``, ``""""""``) and every newline is preserved, so the
normalized text always has exactly as many lines as its input.
"""

from __future__ import annotations


def normalize_source(text: str) -> str:
    """Return *text* with comment and literal bodies erased.

    Handles block comments, line comments, regular strings, character
    literals, verbatim (``@"..."``) and raw (``\"\"\"...\"\"\"``) strings,
    including their interpolated variants.  Unterminated tokens run to the
    end of the line (regular strings, chars, line comments) or the end of
    the text (block comments, verbatim and raw strings); nothing raises.
    """
    out: list[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue

        if ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            out.append(" ")
            out.append("\n" * text.count("\n", i, stop))
            i = stop
            continue

        if ch == '"' and text.startswith('"""', i):
            i = _skip_raw_string(text, i, out)
            continue

        if ch in "@$" and _opens_verbatim(text, i):
            i = _skip_verbatim_string(text, i, out)
            continue

        if ch == '"':
            i = _skip_quoted(text, i, '"', out)
            continue

        if ch == "'":
            i = _skip_quoted(text, i, "'", out)
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def _opens_verbatim(text: str, i: int) -> bool:
    """True for ``@"``, ``$@"`` and ``@$"`` prefixes starting at *i*."""
    prefix = text[i:i + 3]
    return prefix.startswith('@"') or prefix in ('$@"', '@$"')


def _skip_quoted(text: str, i: int, quote: str, out: list[str]) -> int:
    """Skip a backslash-escaped literal; stops at its closing quote or newline."""
    n = len(text)
    j = i + 1
    while j < n:
        c = text[j]
        if c == "\\":
            if j + 1 < n and text[j + 1] == "\n":
                j += 1
                break
            j += 2
            continue
        if c == quote:
            out.append(quote * 2)
            return j + 1
        if c == "\n":
            break
        j += 1
    out.append(quote * 2)
    return min(j, n)


def _skip_verbatim_string(text: str, i: int, out: list[str]) -> int:
    """Skip a verbatim string where ``""`` escapes a quote; may span lines."""
    n = len(text)
    start = text.index('"', i)
    prefix = text[i:start]
    j = start + 1
    while j < n:
        if text[j] == '"':
            if j + 1 < n and text[j + 1] == '"':
                j += 2
                continue
            break
        j += 1
    stop = min(j + 1, n)
    out.append(prefix + '""')
    out.append("\n" * text.count("\n", start, stop))
    return stop


def _skip_raw_string(text: str, i: int, out: list[str]) -> int:
    """Skip a raw string opened by three or more quotes and closed by as many."""
    n = len(text)
    j = i
    while j < n and text[j] == '"':
        j += 1
    fence = '"' * (j - i)
    end = text.find(fence, j)
    stop = n if end == -1 else end + len(fence)
    out.append(fence * 2)
    out.append("\n" * text.count("\n", i, stop))
    return stop
