from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .constants import (
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_DEFAULT_FG,
    ANSI_HIDE_CURSOR,
    ANSI_INVERT_OFF,
    ANSI_INVERT_ON,
    ANSI_SHOW_CURSOR,
    BACKSPACE,
    COOKIE_QUERY_LEN,
    COOKIE_VERSION,
    CTRL_H,
    DEL_KEY,
    ENTER,
    ESC,
    HL_NORMAL,
    KEY_BASE,
)
from .errors import PromptCanceled
from .syntax import syntax_to_color
from .viewport import char_width, scroll, string_width, visible_rows

if TYPE_CHECKING:
    from .editor import Editor


def truncate(s: str, width: int) -> str:
    out: list[str] = []
    used = 0
    for ch in s:
        w = char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def draw_rows(editor: Editor, ab: list[str]) -> None:
    cfg = editor.cfg
    palette = editor.settings.color_palette
    empty = editor.settings.empty_line_char

    for y, visible in enumerate(visible_rows(cfg)):
        if visible is None:
            if cfg.numrows == 0 and y == cfg.screenrows // 3:
                welcome = truncate(f"Cookie Text Editor - Version {COOKIE_VERSION}", cfg.screencols)
                padding = (cfg.screencols - string_width(welcome)) // 2
                if padding:
                    ab.append(empty)
                    padding -= 1
                if padding > 0:
                    ab.append(" " * padding)
                ab.append(welcome)
            else:
                ab.append(empty)
            ab.append(ANSI_CLEAR_LINE)
            ab.append("\r\n")
            continue

        text, hl = visible
        current_color = -1
        for ch, h in zip(text, hl):
            if not ch.isprintable():
                sym = chr(ord("@") + ord(ch)) if ord(ch) <= 26 else "?"
                ab.append(ANSI_INVERT_ON)
                ab.append(sym)
                ab.append(ANSI_INVERT_OFF)
                if current_color != -1:
                    ab.append(f"\x1b[{current_color}m")
            elif h == HL_NORMAL:
                if current_color != -1:
                    ab.append(ANSI_DEFAULT_FG)
                    current_color = -1
                ab.append(ch)
            else:
                color = syntax_to_color(h, palette)
                if color != current_color:
                    ab.append(f"\x1b[{color}m")
                    current_color = color
                ab.append(ch)
        ab.append(ANSI_DEFAULT_FG)
        ab.append(ANSI_CLEAR_LINE)
        ab.append("\r\n")


def draw_status_bar(editor: Editor, ab: list[str]) -> None:
    cfg = editor.cfg
    ab.append(ANSI_INVERT_ON)
    filename = cfg.filename or "[No Name]"
    modified = "(modified)" if cfg.dirty else ""
    status = truncate(f"{filename:.35} - {cfg.numrows} lines {modified}", cfg.screencols)
    filetype = cfg.syntax.filetype if cfg.syntax else "no filetype"
    rstatus = f"{filetype} | {cfg.cy + 1}/{cfg.numrows}"
    ab.append(status)
    fill = string_width(status)
    while fill < cfg.screencols:
        if cfg.screencols - fill == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        fill += 1
    ab.append(ANSI_INVERT_OFF)
    ab.append("\r\n")


def draw_message_bar(editor: Editor, ab: list[str]) -> None:
    ab.append(ANSI_CLEAR_LINE)
    if editor.status_message_visible():
        ab.append(truncate(editor.cfg.statusmsg, editor.cfg.screencols))


def build_frame(editor: Editor) -> str:
    cfg = editor.cfg
    scroll(cfg)
    ab: list[str] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(editor, ab)
    draw_status_bar(editor, ab)
    draw_message_bar(editor, ab)
    ab.append(f"\x1b[{cfg.cy - cfg.rowoff + 1};{cfg.rx - cfg.coloff + 1}H")
    ab.append(ANSI_SHOW_CURSOR)
    return "".join(ab)


def refresh_screen(editor: Editor) -> None:
    editor.write(build_frame(editor).encode("utf-8", errors="replace"))


def prompt(
    editor: Editor,
    message: str,
    callback: Callable[[str, int], str | None] | None = None,
) -> str:
    """Read a line in the message bar. ``message`` has one ``%s`` for the input.

    Whatever ``callback`` returns is shown after the prompt until the next key.
    Raises PromptCanceled on ESC.
    """
    buf = ""
    note = ""
    while True:
        editor.set_status_message("%s%s", message % buf, note)
        editor.refresh_screen()

        c = editor.wait_key()
        if c in (DEL_KEY, CTRL_H, BACKSPACE):
            buf = buf[:-1]
        elif c == ESC:
            editor.set_status_message("")
            if callback is not None:
                callback(buf, c)
            raise PromptCanceled
        elif c == ENTER:
            if buf:
                editor.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return buf
        elif c < KEY_BASE and chr(c).isprintable():
            if len(buf) < COOKIE_QUERY_LEN:
                buf += chr(c)

        if callback is not None:
            note = callback(buf, c) or ""
