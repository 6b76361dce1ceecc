from __future__ import annotations

import errno
import logging
import os
import shutil
import termios
from contextlib import AbstractContextManager

from .constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CURSOR_HOME,
    CSI_SIMPLE_MAP,
    CSI_TILDE_MAP,
    ESC,
    KEY_NULL,
    SS3_SIMPLE_MAP,
)

logger = logging.getLogger(__name__)


def _read_byte_once(fd: int) -> int | None:
    try:
        data = os.read(fd, 1)
    except InterruptedError:
        return None
    if not data:
        return None
    return data[0]


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8(fd: int, lead: int) -> int:
    buf = bytearray([lead])
    for _ in range(_utf8_length(lead) - 1):
        c = _read_byte_once(fd)
        if c is None:
            break
        buf.append(c)
    return ord(buf.decode("utf-8", errors="replace")[0])


def _read_escape(fd: int) -> int:
    seq0 = _read_byte_once(fd)
    if seq0 is None:
        return ESC
    seq1 = _read_byte_once(fd)
    if seq1 is None:
        return ESC

    if seq0 == ord("["):
        simple = CSI_SIMPLE_MAP.get(seq1)
        if simple is not None:
            return simple
        if ord("0") <= seq1 <= ord("9"):
            seq2 = _read_byte_once(fd)
            if seq2 == ord("~"):
                return CSI_TILDE_MAP.get(seq1, ESC)
    elif seq0 == ord("O"):
        return SS3_SIMPLE_MAP.get(seq1, ESC)
    return ESC


def read_key(fd: int) -> int:
    """Read one logical key, or KEY_NULL when the read timed out."""
    c = _read_byte_once(fd)
    if c is None:
        return KEY_NULL
    if c == ESC:
        return _read_escape(fd)
    if c >= 0x80:
        return _read_utf8(fd, c)
    return c


def get_window_size() -> tuple[int, int]:
    size = shutil.get_terminal_size((80, 24))
    return size.lines, size.columns


def _raw_attrs(attrs: list) -> list:
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(cc)
    # Reads return after 100ms with no input so queued events get a turn.
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 1
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]


class RawMode(AbstractContextManager["RawMode"]):
    """Put ``fd`` in raw mode for the duration of the block.

    When ``out_fd`` is given the screen is cleared on the way out, whatever
    ended the session.
    """

    def __init__(self, fd: int, out_fd: int | None = None) -> None:
        self.fd = fd
        self.out_fd = out_fd
        self._orig: list | None = None

    def __enter__(self) -> "RawMode":
        if not os.isatty(self.fd):
            raise OSError(errno.ENOTTY, "stdin is not a tty")

        self._orig = termios.tcgetattr(self.fd)
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, _raw_attrs(self._orig))
        logger.debug("terminal %d in raw mode", self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.out_fd is not None:
            os.write(self.out_fd, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())
        if self._orig is not None:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._orig)
            self._orig = None
