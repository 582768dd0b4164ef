"""Turn status HTML into plain, fixed-width terminal text."""

import html

ELLIPSIS = "…"


def strip_markup(text: str) -> str:
    """Drop every ``<...>`` run, decode entities and trim.

    This is a character scan, not a parser: an unmatched ``<`` hides the rest
    of the input and block elements do not produce line breaks.
    """
    kept: list[str] = []
    in_tag = False
    for char in text:
        match char:
            case "<":
                in_tag = True
            case ">":
                in_tag = False
            case _ if not in_tag:
                kept.append(char)

    return html.unescape("".join(kept)).strip()


def wrap(text: str, width: int) -> str:
    """Greedy word wrap; whitespace runs collapse and words are never split."""
    if width <= 0:
        return text

    words = text.split()
    if not words:
        return ""

    lines = [words[0]]
    for word in words[1:]:
        if len(lines[-1]) + 1 + len(word) > width:
            lines.append(word)
        else:
            lines[-1] = f"{lines[-1]} {word}"

    return "\n".join(lines)


def truncate_lines(text: str, max_lines: int) -> str:
    """Keep at most ``max_lines`` lines, marking a cut with an ellipsis."""
    if max_lines <= 0:
        return ""

    lines = text.split("\n")
    if len(lines) <= max_lines:
        return text

    return "\n".join(lines[:max_lines]) + ELLIPSIS
