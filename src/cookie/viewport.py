from __future__ import annotations

from collections.abc import Iterator

from wcwidth import wcwidth

from .constants import ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, ARROW_UP
from .models import EditorConfig, Row


def char_width(ch: str) -> int:
    # Unprintable code points, zero-width format characters included, are
    # painted as a single inverted glyph.
    if not ch.isprintable():
        return 1
    return max(wcwidth(ch), 0)


def tab_width(rx: int, tab_stop: int) -> int:
    return tab_stop - (rx % tab_stop)


def step_width(ch: str, rx: int, tab_stop: int) -> int:
    if ch == "\t":
        return tab_width(rx, tab_stop)
    return char_width(ch)


def string_width(s: str) -> int:
    return sum(char_width(ch) for ch in s)


def row_cx_to_rx(row: Row, cx: int, tab_stop: int) -> int:
    rx = 0
    for ch in row.chars[:cx]:
        rx += step_width(ch, rx, tab_stop)
    return rx


def row_rx_to_cx(row: Row, rx: int, tab_stop: int) -> int:
    cur_rx = 0
    for cx, ch in enumerate(row.chars):
        cur_rx += step_width(ch, cur_rx, tab_stop)
        if cur_rx > rx:
            return cx
    return row.size


def scroll(config: EditorConfig) -> None:
    config.rx = 0
    row = config.current_row()
    if row is not None:
        config.rx = row_cx_to_rx(row, config.cx, config.tab_stop)

    if config.cy < config.rowoff:
        config.rowoff = config.cy
    if config.cy >= config.rowoff + config.screenrows:
        config.rowoff = config.cy - config.screenrows + 1
    if config.rx < config.coloff:
        config.coloff = config.rx
    if config.rx >= config.coloff + config.screencols:
        config.coloff = config.rx - config.screencols + 1


def snap_to_row(config: EditorConfig, row: int) -> None:
    """Place ``row`` at the top of the window instead of scrolling to it."""
    config.rowoff = max(0, min(row, config.numrows))


def clamp_cursor_x(config: EditorConfig) -> None:
    row = config.current_row()
    rowlen = row.size if row is not None else 0
    if config.cx > rowlen:
        config.cx = rowlen


def move_cursor(config: EditorConfig, key: int) -> None:
    row = config.current_row()

    if key == ARROW_UP:
        if config.cy != 0:
            config.cy -= 1
    elif key == ARROW_DOWN:
        if config.cy < config.numrows:
            config.cy += 1
    elif key == ARROW_LEFT:
        if config.cx != 0:
            config.cx -= 1
        elif config.cy > 0:
            config.cy -= 1
            config.cx = config.rows[config.cy].size
    elif key == ARROW_RIGHT:
        if row is not None and config.cx < row.size:
            config.cx += 1
        elif row is not None and config.cx == row.size:
            config.cy += 1
            config.cx = 0

    clamp_cursor_x(config)


def move_home(config: EditorConfig) -> None:
    config.cx = 0


def move_end(config: EditorConfig) -> None:
    row = config.current_row()
    if row is not None:
        config.cx = row.size


def page_up(config: EditorConfig) -> None:
    config.cy = config.rowoff
    for _ in range(config.screenrows):
        move_cursor(config, ARROW_UP)


def page_down(config: EditorConfig) -> None:
    config.cy = min(config.rowoff + config.screenrows - 1, config.numrows)
    for _ in range(config.screenrows):
        move_cursor(config, ARROW_DOWN)


def window_slice(render: str, hl: list[int], coloff: int, width: int) -> tuple[str, list[int]]:
    """Cut the characters occupying display columns ``[coloff, coloff + width)``.

    A wide glyph straddling either edge is dropped rather than split.
    """
    start = end = None
    col = 0
    for i, ch in enumerate(render):
        w = char_width(ch)
        if start is None and col >= coloff:
            start = i
        if start is not None and col + w > coloff + width:
            end = i
            break
        col += w
    if start is None:
        return "", []
    if end is None:
        end = len(render)
    return render[start:end], hl[start:end]


def visible_rows(config: EditorConfig) -> Iterator[tuple[str, list[int]] | None]:
    for y in range(config.screenrows):
        filerow = config.rowoff + y
        if filerow >= config.numrows:
            yield None
            continue
        row = config.rows[filerow]
        yield window_slice(row.render, row.hl, config.coloff, config.screencols)
