from __future__ import annotations

COOKIE_VERSION = "0.1.1"
COOKIE_QUERY_LEN = 256

# Defaults, overridable from config.json.
DEFAULT_TAB_STOP = 8
DEFAULT_QUIT_TIMES = 3
DEFAULT_EMPTY_LINE_CHAR = "~"

STATUS_MESSAGE_SECONDS = 5
CONFIG_RELOAD_SECONDS = 5

# Syntax highlight types.
HL_NORMAL = 0
HL_COMMENT = 1
HL_MLCOMMENT = 2
HL_KEYWORD1 = 3
HL_KEYWORD2 = 4
HL_STRING = 5
HL_NUMBER = 6
HL_BOOLEAN = 7
HL_MATCH = 8

HL_NAMES = {
    HL_NORMAL: "normal",
    HL_COMMENT: "comment",
    HL_MLCOMMENT: "mlcomment",
    HL_KEYWORD1: "keyword1",
    HL_KEYWORD2: "keyword2",
    HL_STRING: "string",
    HL_NUMBER: "number",
    HL_BOOLEAN: "boolean",
    HL_MATCH: "match",
}

DEFAULT_COLOR_PALETTE = {
    "normal": 37,
    "comment": 90,
    "mlcomment": 90,
    "keyword1": 94,
    "keyword2": 96,
    "string": 36,
    "number": 33,
    "boolean": 35,
    "match": 32,
}

SEPARATORS = ",.()+-/*=~%<>[]{}:;"
QUOTES = "\"'`"
SECONDARY_KEYWORD_MARKER = "|"


def ctrl(ch: str) -> int:
    return ord(ch.upper()) & 0x1F


# Key actions.
KEY_NULL = 0
CTRL_D = ctrl("d")
CTRL_F = ctrl("f")
CTRL_H = ctrl("h")
TAB = 9
CTRL_L = ctrl("l")
ENTER = 13
CTRL_Q = ctrl("q")
CTRL_S = ctrl("s")
ESC = 27
BACKSPACE = 127

# Logical keys live above the Unicode range so they never collide with text.
KEY_BASE = 0x110000
ARROW_LEFT = KEY_BASE
ARROW_RIGHT = KEY_BASE + 1
ARROW_UP = KEY_BASE + 2
ARROW_DOWN = KEY_BASE + 3
DEL_KEY = KEY_BASE + 4
HOME_KEY = KEY_BASE + 5
END_KEY = KEY_BASE + 6
PAGE_UP = KEY_BASE + 7
PAGE_DOWN = KEY_BASE + 8

CSI_SIMPLE_MAP = {
    ord("A"): ARROW_UP,
    ord("B"): ARROW_DOWN,
    ord("C"): ARROW_RIGHT,
    ord("D"): ARROW_LEFT,
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}
CSI_TILDE_MAP = {
    ord("1"): HOME_KEY,
    ord("3"): DEL_KEY,
    ord("4"): END_KEY,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
    ord("7"): HOME_KEY,
    ord("8"): END_KEY,
}
SS3_SIMPLE_MAP = {
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}

ANSI_HIDE_CURSOR = "\x1b[?25l"
ANSI_SHOW_CURSOR = "\x1b[?25h"
ANSI_CURSOR_HOME = "\x1b[H"
ANSI_CLEAR_SCREEN = "\x1b[2J"
ANSI_CLEAR_LINE = "\x1b[K"
ANSI_INVERT_ON = "\x1b[7m"
ANSI_INVERT_OFF = "\x1b[m"
ANSI_DEFAULT_FG = "\x1b[39m"
