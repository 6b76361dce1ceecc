from __future__ import annotations

from collections.abc import Iterable

import pytest

from cookie.editor import Editor
from cookie.models import EditorConfig, EditorSyntax
from cookie.rows import insert_row
from cookie.settings import Settings, default_syntaxes

C_LIKE = EditorSyntax(
    filetype="c",
    filematch=(".c", ".h"),
    keywords=("if", "return", "int|", "char|"),
    singleline_comment_start="//",
    multiline_comment_start="/*",
    multiline_comment_end="*/",
    highlight_numbers=True,
    highlight_strings=True,
    highlight_booleans=True,
)


def make_config(
    lines: Iterable[str],
    syntax: EditorSyntax | None = None,
    tab_stop: int = 8,
    screenrows: int = 10,
    screencols: int = 20,
) -> EditorConfig:
    cfg = EditorConfig(tab_stop=tab_stop, screenrows=screenrows, screencols=screencols)
    cfg.syntax = syntax
    for line in lines:
        insert_row(cfg, cfg.numrows, line)
    cfg.dirty = 0
    return cfg


def keys(*items: str | int) -> list[int]:
    out: list[int] = []
    for item in items:
        if isinstance(item, str):
            out.extend(ord(ch) for ch in item)
        else:
            out.append(item)
    return out


class ScriptedEditor(Editor):
    """Editor fed from a list of keys that records every frame it paints."""

    def __init__(self, script: list[int] | None = None, **kwargs) -> None:
        self.script = list(script or [])
        self.frames: list[bytes] = []
        kwargs.setdefault("settings", Settings(tab_stop=4, quit_times=2))
        kwargs.setdefault("syntaxes", default_syntaxes())
        super().__init__(read_key=self._next_key, write=self.frames.append, **kwargs)

    def feed(self, *items: str | int) -> None:
        self.script.extend(keys(*items))

    def _next_key(self) -> int:
        if not self.script:
            raise AssertionError("editor asked for more keys than were scripted")
        return self.script.pop(0)

    def load(self, lines: Iterable[str]) -> None:
        for line in lines:
            insert_row(self.cfg, self.cfg.numrows, line)
        self.cfg.dirty = 0


@pytest.fixture
def editor() -> ScriptedEditor:
    return ScriptedEditor()
