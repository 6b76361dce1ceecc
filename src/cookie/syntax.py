from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping

from .constants import (
    DEFAULT_COLOR_PALETTE,
    HL_BOOLEAN,
    HL_COMMENT,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MLCOMMENT,
    HL_NAMES,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
    QUOTES,
    SECONDARY_KEYWORD_MARKER,
    SEPARATORS,
)
from .models import EditorConfig, EditorSyntax

logger = logging.getLogger(__name__)

BOOLEAN_LITERALS = ("true", "false")


def is_separator(c: str) -> bool:
    return not c or c.isspace() or c in SEPARATORS


def split_keyword(kw: str) -> tuple[str, bool]:
    if kw.endswith(SECONDARY_KEYWORD_MARKER):
        return kw[: -len(SECONDARY_KEYWORD_MARKER)], True
    return kw, False


def syntax_to_color(hl: int, palette: Mapping[str, int] | None = None) -> int:
    name = HL_NAMES.get(hl, "normal")
    if palette is not None and name in palette:
        return palette[name]
    return DEFAULT_COLOR_PALETTE[name]


def find_syntax(syntaxes: Iterable[EditorSyntax], filename: str | None) -> EditorSyntax | None:
    """Return the first definition with a pattern matching ``filename``.

    Patterns starting with a dot are compared against the extension; any other
    pattern matches as a substring of the name.
    """
    if not filename:
        return None
    ext = os.path.splitext(filename)[1]
    for syntax in syntaxes:
        for pattern in syntax.filematch:
            if pattern.startswith("."):
                if pattern == ext:
                    return syntax
            elif pattern in filename:
                return syntax
    return None


def select_syntax_highlight(
    config: EditorConfig, syntaxes: Iterable[EditorSyntax], filename: str | None
) -> None:
    config.syntax = find_syntax(syntaxes, filename)
    logger.debug(
        "syntax for %r: %s", filename, config.syntax.filetype if config.syntax else "none"
    )
    for row in config.rows:
        row.hl, row.hl_oc = highlight_row(row.render, config.syntax, _carried_state(config, row.idx))


def _carried_state(config: EditorConfig, idx: int) -> bool:
    return idx > 0 and config.rows[idx - 1].hl_oc


def highlight_row(
    render: str, syntax: EditorSyntax | None, in_comment: bool
) -> tuple[list[int], bool]:
    """Tag every character of ``render``.

    ``in_comment`` is the carried block-comment state of the previous row. The
    second element of the result is the state carried into the next row.
    """
    hl = [HL_NORMAL] * len(render)
    if syntax is None:
        return hl, False

    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end
    block_comments = bool(mcs and mce)
    if not block_comments:
        in_comment = False

    p = render
    n = len(p)
    i = 0
    prev_sep = True
    in_string = ""

    while i < n:
        ch = p[i]
        prev_hl = hl[i - 1] if i > 0 else HL_NORMAL

        if scs and not in_string and not in_comment and p.startswith(scs, i):
            for h in range(i, n):
                hl[h] = HL_COMMENT
            break

        if block_comments and not in_string:
            if in_comment:
                if p.startswith(mce, i):
                    end = min(i + len(mce), n)
                    for h in range(i, end):
                        hl[h] = HL_MLCOMMENT
                    i = end
                    in_comment = False
                    prev_sep = True
                    continue
                hl[i] = HL_MLCOMMENT
                i += 1
                continue
            if p.startswith(mcs, i):
                end = min(i + len(mcs), n)
                for h in range(i, end):
                    hl[h] = HL_MLCOMMENT
                i = end
                in_comment = True
                continue

        if syntax.highlight_strings:
            if in_string:
                hl[i] = HL_STRING
                if ch == "\\" and i + 1 < n:
                    hl[i + 1] = HL_STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in QUOTES:
                in_string = ch
                hl[i] = HL_STRING
                i += 1
                continue

        if syntax.highlight_numbers:
            if (ch.isdecimal() and (prev_sep or prev_hl == HL_NUMBER)) or (
                ch == "." and prev_hl == HL_NUMBER
            ):
                hl[i] = HL_NUMBER
                i += 1
                prev_sep = False
                continue

        if syntax.highlight_booleans and prev_sep:
            matched = False
            for literal in BOOLEAN_LITERALS:
                end = i + len(literal)
                tail = p[end] if end < n else ""
                if p[i:end].lower() == literal and is_separator(tail):
                    for h in range(i, end):
                        hl[h] = HL_BOOLEAN
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for kw in syntax.keywords:
                token, secondary = split_keyword(kw)
                if not token:
                    continue
                end = i + len(token)
                tail = p[end] if end < n else ""
                if p[i:end] == token and is_separator(tail):
                    mark = HL_KEYWORD2 if secondary else HL_KEYWORD1
                    for h in range(i, end):
                        hl[h] = mark
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return hl, in_comment


def update_syntax(config: EditorConfig, idx: int) -> None:
    """Re-highlight row ``idx`` and every following row whose carried state changes."""
    cascaded = 0
    while idx < config.numrows:
        row = config.rows[idx]
        row.hl, oc = highlight_row(row.render, config.syntax, _carried_state(config, idx))
        changed = row.hl_oc != oc
        row.hl_oc = oc
        if not changed:
            break
        idx += 1
        cascaded += 1
    if cascaded > 1:
        logger.debug("comment state cascaded over %d rows", cascaded)
