from __future__ import annotations

from .models import EditorConfig, Row
from .syntax import update_syntax
from .viewport import char_width


def render_chars(chars: str, tab_stop: int) -> str:
    out: list[str] = []
    col = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            col += 1
            while col % tab_stop != 0:
                out.append(" ")
                col += 1
        else:
            out.append(ch)
            col += char_width(ch)
    return "".join(out)


def update_row(config: EditorConfig, row: Row) -> None:
    row.render = render_chars(row.chars, config.tab_stop)
    update_syntax(config, row.idx)


def rerender_rows(config: EditorConfig) -> None:
    """Rebuild every render string, e.g. after the tab stop changed.

    Tags are left to the caller, which re-highlights the whole buffer.
    """
    for row in config.rows:
        row.render = render_chars(row.chars, config.tab_stop)


def _renumber(config: EditorConfig, start: int) -> None:
    for j in range(start, config.numrows):
        config.rows[j].idx = j


def insert_row(config: EditorConfig, at: int, s: str) -> None:
    if at < 0 or at > config.numrows:
        return
    row = Row(idx=at, chars=s)
    if at > 0:
        row.hl_oc = config.rows[at - 1].hl_oc
    config.rows.insert(at, row)
    _renumber(config, at + 1)
    update_row(config, row)
    config.dirty += 1


def del_row(config: EditorConfig, at: int) -> None:
    if at < 0 or at >= config.numrows:
        return
    del config.rows[at]
    _renumber(config, at)
    # The row now at ``at`` has a new predecessor.
    if at < config.numrows:
        update_syntax(config, at)
    config.dirty += 1


def split_row(config: EditorConfig, row: Row, at: int) -> None:
    at = max(0, min(at, row.size))
    tail = row.chars[at:]
    row.chars = row.chars[:at]
    update_row(config, row)
    insert_row(config, row.idx + 1, tail)


def join_with_previous(config: EditorConfig, at: int) -> int:
    """Append row ``at`` to its predecessor and delete it.

    Returns the length of the predecessor before the join, which is where the
    cursor lands.
    """
    if at <= 0 or at >= config.numrows:
        return 0
    prev = config.rows[at - 1]
    joined_at = prev.size
    row_append_string(config, prev, config.rows[at].chars)
    del_row(config, at)
    return joined_at


def row_insert_char(config: EditorConfig, row: Row, at: int, c: str) -> None:
    at = max(0, min(at, row.size))
    row.chars = row.chars[:at] + c + row.chars[at:]
    update_row(config, row)
    config.dirty += 1


def row_append_string(config: EditorConfig, row: Row, s: str) -> None:
    row.chars += s
    update_row(config, row)
    config.dirty += 1


def row_del_char(config: EditorConfig, row: Row, at: int) -> None:
    if at < 0 or at >= row.size:
        return
    row.chars = row.chars[:at] + row.chars[at + 1 :]
    update_row(config, row)
    config.dirty += 1


def rows_to_string(config: EditorConfig) -> str:
    return "\n".join(row.chars for row in config.rows)


def load_text(config: EditorConfig, text: str) -> None:
    config.rows = []
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        insert_row(config, config.numrows, line)
    config.dirty = 0
