from __future__ import annotations

import errno
import logging
import os
import queue
import signal
import sys
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Final

from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_D,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    KEY_BASE,
    KEY_NULL,
    PAGE_DOWN,
    PAGE_UP,
    CONFIG_RELOAD_SECONDS,
    STATUS_MESSAGE_SECONDS,
    TAB,
)
from .errors import ConfigError, PromptCanceled, QuitEditor
from .models import EditorConfig, EditorSyntax
from .rows import (
    del_row,
    insert_row,
    join_with_previous,
    load_text,
    row_del_char,
    row_insert_char,
    rerender_rows,
    rows_to_string,
    split_row,
)
from .search import accept_search, begin_search, cancel_search, search_step
from .settings import (
    CONFIG_FILE,
    SYNTAX_FILE,
    Settings,
    config_dir,
    load_settings,
    load_syntaxes,
)
from .syntax import select_syntax_highlight
from .terminal import RawMode, get_window_size, read_key
from .ui import prompt, refresh_screen
from .viewport import move_cursor, move_end, move_home, page_down, page_up

logger = logging.getLogger(__name__)

STDIN_FD: Final[int] = 0
STDOUT_FD: Final[int] = 1

RESIZE = "resize"

HELP_MESSAGE = "Help: Ctrl-S = Save | Ctrl-Q = Quit | Ctrl-F = Find | Ctrl-D = Delete Line"
SEARCH_PROMPT = "Search: %s (ESC = Cancel | Enter = Confirm | Arrows = Prev/Next)"
SAVE_PROMPT = "Save as: %s (ESC to cancel)"
NO_MATCH_NOTE = " (no match)"


class Editor:
    """Owns the buffer and all derived state; the only code that mutates it.

    ``read_key`` returns one logical key (or KEY_NULL on timeout) and ``write``
    sends a painted frame to the terminal. Both are injected so the controller
    can be driven without a tty.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        syntaxes: Iterable[EditorSyntax] = (),
        *,
        read_key: Callable[[], int] | None = None,
        write: Callable[[bytes], object] | None = None,
        screenrows: int = 24,
        screencols: int = 80,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or Settings()
        self.syntaxes = list(syntaxes)
        self.cfg = EditorConfig(tab_stop=self.settings.tab_stop)
        self.events: queue.SimpleQueue[str] = queue.SimpleQueue()
        self._read_key = read_key
        self._write = write
        self.clock = clock
        self.settings_path: Path | None = None
        self.syntax_path: Path | None = None
        self._config_stamp: tuple[int | None, int | None] = (None, None)
        self._next_config_check = 0.0
        self.set_window_size(screenrows, screencols)

    # -- terminal plumbing -------------------------------------------------

    def set_window_size(self, rows: int, cols: int) -> None:
        # Two lines are reserved for the status and message bars.
        self.cfg.screenrows = max(1, rows - 2)
        self.cfg.screencols = max(1, cols)

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        self.events.put(RESIZE)

    def drain_events(self) -> bool:
        handled = False
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                return handled
            if event == RESIZE:
                self.set_window_size(*get_window_size())
                handled = True

    def write(self, data: bytes) -> None:
        if self._write is not None:
            self._write(data)

    def refresh_screen(self) -> None:
        refresh_screen(self)

    def wait_key(self) -> int:
        if self._read_key is None:
            raise RuntimeError("editor has no key source")
        while True:
            c = self._read_key()
            if c != KEY_NULL:
                return c
            redraw = self.drain_events()
            if self.reload_config():
                redraw = True
            if redraw:
                self.refresh_screen()

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.cfg.statusmsg = fmt % args if args else fmt
        self.cfg.statusmsg_time = time.time()

    def status_message_visible(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return bool(self.cfg.statusmsg) and now - self.cfg.statusmsg_time < STATUS_MESSAGE_SECONDS

    # -- configuration -----------------------------------------------------

    def watch_config(self, settings_path: Path, syntax_path: Path) -> None:
        """Reload both files from ``wait_key`` whenever they change on disk."""
        self.settings_path = settings_path
        self.syntax_path = syntax_path
        self._config_stamp = self._read_config_stamp()
        self._next_config_check = self.clock() + CONFIG_RELOAD_SECONDS

    def _read_config_stamp(self) -> tuple[int | None, int | None]:
        stamp: list[int | None] = []
        for path in (self.settings_path, self.syntax_path):
            try:
                stamp.append(path.stat().st_mtime_ns if path is not None else None)
            except OSError:
                stamp.append(None)
        return stamp[0], stamp[1]

    def reload_config(self) -> bool:
        """Re-read the config files if they changed. Returns True if applied.

        Files are checked at most every CONFIG_RELOAD_SECONDS. A broken file
        is logged and the current settings stay in effect.
        """
        if self.settings_path is None or self.syntax_path is None:
            return False
        now = self.clock()
        if now < self._next_config_check:
            return False
        self._next_config_check = now + CONFIG_RELOAD_SECONDS

        stamp = self._read_config_stamp()
        if stamp == self._config_stamp:
            return False
        self._config_stamp = stamp
        try:
            settings = load_settings(self.settings_path)
            syntaxes = load_syntaxes(self.syntax_path)
        except ConfigError as exc:
            logger.warning("keeping previous configuration: %s", exc)
            return False
        self.apply_settings(settings, syntaxes)
        logger.info("reloaded configuration from %s", self.settings_path.parent)
        return True

    def apply_settings(self, settings: Settings, syntaxes: Iterable[EditorSyntax]) -> None:
        self.settings = settings
        self.syntaxes = list(syntaxes)
        if self.cfg.tab_stop != settings.tab_stop:
            self.cfg.tab_stop = settings.tab_stop
            rerender_rows(self.cfg)
        self.select_syntax_highlight()

    # -- buffer ------------------------------------------------------------

    def select_syntax_highlight(self) -> None:
        select_syntax_highlight(self.cfg, self.syntaxes, self.cfg.filename)

    def open_file(self, filename: str) -> None:
        """Load ``filename``; a missing file leaves an empty buffer with that name."""
        self.cfg.filename = filename
        self.select_syntax_highlight()
        try:
            with open(filename, "r", encoding="utf-8", errors="replace", newline="") as f:
                text = f.read()
        except FileNotFoundError:
            logger.debug("%s does not exist, starting empty", filename)
            return
        load_text(self.cfg, text)
        logger.debug("opened %s (%d rows)", filename, self.cfg.numrows)

    def save(self) -> int:
        if not self.cfg.filename:
            self.cfg.filename = prompt(self, SAVE_PROMPT)
            self.select_syntax_highlight()

        data = rows_to_string(self.cfg)
        with open(self.cfg.filename, "w", encoding="utf-8", newline="") as f:
            f.write(data)
        self.cfg.dirty = 0
        written = len(data.encode("utf-8"))
        logger.info("wrote %d bytes to %s", written, self.cfg.filename)
        return written

    # -- commands ----------------------------------------------------------

    def insert_char(self, c: str) -> None:
        if self.cfg.cy == self.cfg.numrows:
            insert_row(self.cfg, self.cfg.numrows, "")
        row_insert_char(self.cfg, self.cfg.rows[self.cfg.cy], self.cfg.cx, c)
        self.cfg.cx += 1

    def insert_newline(self) -> None:
        cfg = self.cfg
        row = cfg.current_row()
        if row is None:
            insert_row(cfg, cfg.numrows, "")
        elif cfg.cx == 0:
            insert_row(cfg, cfg.cy, "")
        else:
            split_row(cfg, row, cfg.cx)
        cfg.cy += 1
        cfg.cx = 0

    def del_char(self) -> None:
        cfg = self.cfg
        row = cfg.current_row()
        if row is None or (cfg.cx == 0 and cfg.cy == 0):
            return
        if cfg.cx > 0:
            row_del_char(cfg, row, cfg.cx - 1)
            cfg.cx -= 1
        else:
            cfg.cx = join_with_previous(cfg, cfg.cy)
            cfg.cy -= 1

    def forward_del_char(self) -> None:
        cfg = self.cfg
        row = cfg.current_row()
        if row is None:
            return
        if cfg.cy == cfg.numrows - 1 and cfg.cx == row.size:
            return
        move_cursor(cfg, ARROW_RIGHT)
        self.del_char()

    def delete_line(self) -> None:
        cfg = self.cfg
        if cfg.cy < cfg.numrows:
            del_row(cfg, cfg.cy)
        cfg.cx = 0
        if cfg.cy > 0:
            cfg.cy -= 1
            cfg.cx = cfg.rows[cfg.cy].size

    def request_quit(self) -> None:
        cfg = self.cfg
        quit_times = self.settings.quit_times
        if cfg.dirty and cfg.quit_counter < quit_times:
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                quit_times - cfg.quit_counter,
            )
            cfg.quit_counter += 1
            return
        raise QuitEditor

    def save_command(self) -> None:
        try:
            written = self.save()
        except PromptCanceled:
            self.set_status_message("Save aborted")
        except OSError as exc:
            logger.warning("saving %s failed: %s", self.cfg.filename, exc)
            self.set_status_message("Can't save! I/O error: %s", exc.strerror or exc)
        else:
            self.set_status_message("%d bytes written to disk", written)

    def find(self) -> None:
        state = begin_search(self.cfg)

        def on_key(query: str, key: int) -> str | None:
            search_step(self.cfg, state, query, key)
            return NO_MATCH_NOTE if state.no_match else None

        try:
            prompt(self, SEARCH_PROMPT, on_key)
        except PromptCanceled:
            cancel_search(self.cfg, state)
            self.set_status_message("")
        else:
            accept_search(self.cfg, state)

    def process_key(self, c: int) -> None:
        """Run one logical key. Raises QuitEditor when the session should end."""
        if c == CTRL_Q:
            self.request_quit()
            return

        handler = KEY_HANDLERS.get(c)
        if handler is not None:
            handler(self)
        elif c == TAB or (32 <= c < KEY_BASE and chr(c).isprintable()):
            self.insert_char(chr(c))

        self.cfg.quit_counter = 0

    def process_keypress(self) -> None:
        self.process_key(self.wait_key())


def _noop(_editor: Editor) -> None:
    pass


KEY_HANDLERS: dict[int, Callable[[Editor], None]] = {
    ENTER: Editor.insert_newline,
    CTRL_S: Editor.save_command,
    CTRL_F: Editor.find,
    CTRL_D: Editor.delete_line,
    CTRL_H: Editor.del_char,
    BACKSPACE: Editor.del_char,
    DEL_KEY: Editor.forward_del_char,
    HOME_KEY: lambda e: move_home(e.cfg),
    END_KEY: lambda e: move_end(e.cfg),
    PAGE_UP: lambda e: page_up(e.cfg),
    PAGE_DOWN: lambda e: page_down(e.cfg),
    ARROW_UP: lambda e: move_cursor(e.cfg, ARROW_UP),
    ARROW_DOWN: lambda e: move_cursor(e.cfg, ARROW_DOWN),
    ARROW_LEFT: lambda e: move_cursor(e.cfg, ARROW_LEFT),
    ARROW_RIGHT: lambda e: move_cursor(e.cfg, ARROW_RIGHT),
    CTRL_L: _noop,
    ESC: _noop,
}


def setup_logging() -> None:
    path = os.environ.get("COOKIE_LOG")
    if not path:
        return
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("cookie")
    root.addHandler(handler)
    root.setLevel(os.environ.get("COOKIE_LOG_LEVEL", "DEBUG").upper())


def run(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 1:
        print("Usage: cookie [filename]", file=sys.stderr)
        return 1
    if not os.isatty(STDIN_FD) or not os.isatty(STDOUT_FD):
        print("cookie: stdin/stdout must be a tty", file=sys.stderr)
        return 1

    setup_logging()
    settings_path = config_dir() / CONFIG_FILE
    syntax_path = config_dir() / SYNTAX_FILE
    try:
        settings = load_settings(settings_path)
        syntaxes = load_syntaxes(syntax_path)
    except ConfigError as exc:
        print(f"cookie: {exc}", file=sys.stderr)
        return 1

    rows, cols = get_window_size()
    editor = Editor(
        settings,
        syntaxes,
        read_key=lambda: read_key(STDIN_FD),
        write=lambda data: os.write(STDOUT_FD, data),
        screenrows=rows,
        screencols=cols,
    )
    editor.watch_config(settings_path, syntax_path)
    if args:
        try:
            editor.open_file(args[0])
        except OSError as exc:
            print(f"cookie: {args[0]}: {exc.strerror or exc}", file=sys.stderr)
            return 1

    signal.signal(signal.SIGWINCH, editor.handle_sigwinch)
    try:
        with RawMode(STDIN_FD, STDOUT_FD):
            editor.set_status_message(HELP_MESSAGE)
            while True:
                editor.drain_events()
                editor.refresh_screen()
                editor.process_keypress()
    except QuitEditor:
        return 0
    except OSError as exc:
        if exc.errno == errno.ENOTTY:
            print("cookie: stdin is not a tty", file=sys.stderr)
            return 1
        raise
