from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_COLOR_PALETTE,
    DEFAULT_EMPTY_LINE_CHAR,
    DEFAULT_QUIT_TIMES,
    DEFAULT_TAB_STOP,
)
from .errors import ConfigError
from .models import EditorSyntax

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
SYNTAX_FILE = "syntax.json"


@dataclass(slots=True)
class Settings:
    tab_stop: int = DEFAULT_TAB_STOP
    quit_times: int = DEFAULT_QUIT_TIMES
    empty_line_char: str = DEFAULT_EMPTY_LINE_CHAR
    color_palette: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_COLOR_PALETTE))

    def to_record(self) -> dict[str, Any]:
        return {
            "tab_stop": self.tab_stop,
            "quit_times": self.quit_times,
            "empty_line_char": self.empty_line_char,
            "color_palette": dict(self.color_palette),
        }


DEFAULT_SYNTAXES: list[dict[str, Any]] = [
    {
        "filetype": "c",
        "filematch": [".c", ".h", ".cpp", ".hpp", ".cc"],
        "keywords": [
            "auto", "break", "case", "continue", "default", "do", "else", "enum",
            "extern", "for", "goto", "if", "register", "return", "sizeof", "static",
            "struct", "switch", "typedef", "union", "volatile", "while", "NULL",
            "class", "delete", "namespace", "new", "private", "protected", "public",
            "template", "this", "throw", "try", "virtual",
            "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
            "void|", "short|", "const|", "bool|",
        ],
        "scs": "//",
        "mcs": "/*",
        "mce": "*/",
        "flags": {
            "highlight_numbers": True,
            "highlight_strings": True,
            "highlight_booleans": True,
        },
    },
    {
        "filetype": "go",
        "filematch": [".go"],
        "keywords": [
            "break", "case", "chan", "const", "continue", "default", "defer", "else",
            "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
            "map", "package", "range", "return", "select", "struct", "switch", "type",
            "var", "nil",
            "bool|", "byte|", "error|", "float32|", "float64|", "int|", "int8|",
            "int16|", "int32|", "int64|", "rune|", "string|", "uint|", "uint8|",
            "uint16|", "uint32|", "uint64|", "any|",
        ],
        "scs": "//",
        "mcs": "/*",
        "mce": "*/",
        "flags": {
            "highlight_numbers": True,
            "highlight_strings": True,
            "highlight_booleans": True,
        },
    },
    {
        "filetype": "python",
        "filematch": [".py", ".pyi"],
        "keywords": [
            "and", "as", "assert", "async", "await", "break", "class", "continue",
            "def", "del", "elif", "else", "except", "finally", "for", "from", "global",
            "if", "import", "in", "is", "lambda", "nonlocal", "not", "or", "pass",
            "raise", "return", "try", "while", "with", "yield", "None",
            "int|", "float|", "str|", "bytes|", "list|", "dict|", "set|", "tuple|",
            "bool|", "object|", "self|",
        ],
        "scs": "#",
        "mcs": "",
        "mce": "",
        "flags": {
            "highlight_numbers": True,
            "highlight_strings": True,
            "highlight_booleans": True,
        },
    },
]


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(Path.home(), ".config")
    return Path(base) / "cookie"


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(default, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"failed to create config file {path}: {exc}") from exc
        logger.info("created default %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise ConfigError(f"failed to read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"failed to decode config file {path}: {exc}") from exc


def settings_from_record(record: dict[str, Any]) -> Settings:
    if not isinstance(record, dict):
        raise ConfigError("config must be a JSON object")
    settings = Settings()
    tab_stop = record.get("tab_stop", settings.tab_stop)
    quit_times = record.get("quit_times", settings.quit_times)
    if not isinstance(tab_stop, int) or tab_stop < 1:
        raise ConfigError(f"tab_stop must be a positive integer, got {tab_stop!r}")
    if not isinstance(quit_times, int) or quit_times < 0:
        raise ConfigError(f"quit_times must be a non-negative integer, got {quit_times!r}")
    settings.tab_stop = tab_stop
    settings.quit_times = quit_times
    settings.empty_line_char = str(record.get("empty_line_char", settings.empty_line_char))

    palette = record.get("color_palette", {})
    if not isinstance(palette, dict):
        raise ConfigError("color_palette must be a JSON object")
    for name, color in palette.items():
        if name not in DEFAULT_COLOR_PALETTE:
            logger.warning("ignoring unknown highlight %r in color_palette", name)
            continue
        try:
            settings.color_palette[name] = int(color)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"color for {name!r} must be an integer, got {color!r}") from exc
    return settings


def syntax_from_record(record: dict[str, Any]) -> EditorSyntax:
    try:
        flags = record.get("flags") or {}
        return EditorSyntax(
            filetype=str(record["filetype"]),
            filematch=tuple(str(p) for p in record.get("filematch", ())),
            keywords=tuple(str(k) for k in record.get("keywords", ())),
            singleline_comment_start=str(record.get("scs", "")),
            multiline_comment_start=str(record.get("mcs", "")),
            multiline_comment_end=str(record.get("mce", "")),
            highlight_numbers=bool(flags.get("highlight_numbers", False)),
            highlight_strings=bool(flags.get("highlight_strings", False)),
            highlight_booleans=bool(flags.get("highlight_booleans", False)),
        )
    except (KeyError, AttributeError, TypeError) as exc:
        raise ConfigError(f"invalid syntax definition: {record!r}") from exc


def default_syntaxes() -> list[EditorSyntax]:
    return [syntax_from_record(r) for r in DEFAULT_SYNTAXES]


def load_settings(path: Path | None = None) -> Settings:
    path = path or config_dir() / CONFIG_FILE
    return settings_from_record(_read_json(path, Settings().to_record()))


def load_syntaxes(path: Path | None = None) -> list[EditorSyntax]:
    path = path or config_dir() / SYNTAX_FILE
    records = _read_json(path, DEFAULT_SYNTAXES)
    if not isinstance(records, list):
        raise ConfigError(f"{path} must hold a JSON array")
    return [syntax_from_record(r) for r in records]
