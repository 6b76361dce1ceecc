from __future__ import annotations

import logging

from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    ESC,
    HL_MATCH,
)
from .models import CursorSnapshot, EditorConfig, SearchState
from .viewport import row_rx_to_cx, snap_to_row, string_width

logger = logging.getLogger(__name__)


def begin_search(config: EditorConfig) -> SearchState:
    return SearchState(
        saved=CursorSnapshot(config.cx, config.cy, config.coloff, config.rowoff)
    )


def restore_match_highlight(config: EditorConfig, state: SearchState) -> None:
    if state.saved_hl is not None and 0 <= state.saved_hl_line < config.numrows:
        row = config.rows[state.saved_hl_line]
        # Only put the snapshot back if the row was not re-rendered meanwhile.
        if len(row.hl) == len(state.saved_hl):
            row.hl = state.saved_hl
    state.saved_hl = None
    state.saved_hl_line = -1


def search_key_update(state: SearchState, key: int) -> bool:
    """Apply ``key`` to the search direction/anchor. Returns False when no scan should run."""
    if key in (ENTER, ESC):
        state.last_match = -1
        state.direction = 1
        return False
    if key in (ARROW_RIGHT, ARROW_DOWN):
        state.direction = 1
    elif key in (ARROW_LEFT, ARROW_UP):
        state.direction = -1
    else:
        state.last_match = -1
        state.direction = 1

    if state.last_match == -1:
        state.direction = 1
    return True


def search_next_match(
    config: EditorConfig, query: str, last_match: int, direction: int
) -> tuple[int, int] | None:
    current = last_match
    for _ in range(config.numrows):
        current += direction
        if current == -1:
            current = config.numrows - 1
        elif current == config.numrows:
            current = 0
        pos = config.rows[current].render.find(query)
        if pos != -1:
            return current, pos
    return None


def jump_to_match(
    config: EditorConfig, state: SearchState, match_row: int, match_offset: int, query: str
) -> None:
    row = config.rows[match_row]
    state.last_match = match_row
    config.cy = match_row
    config.cx = row_rx_to_cx(row, string_width(row.render[:match_offset]), config.tab_stop)
    snap_to_row(config, match_row)

    state.saved_hl_line = match_row
    state.saved_hl = row.hl.copy()
    for i in range(match_offset, min(match_offset + len(query), row.rsize)):
        row.hl[i] = HL_MATCH


def search_step(config: EditorConfig, state: SearchState, query: str, key: int) -> None:
    """Handle one keystroke of an incremental search for ``query``."""
    restore_match_highlight(config, state)
    if not search_key_update(state, key):
        return

    state.no_match = False
    if not query or not config.rows:
        state.no_match = bool(query)
        return

    match = search_next_match(config, query, state.last_match, state.direction)
    if match is None:
        state.no_match = True
        logger.debug("no match for %r", query)
        return
    jump_to_match(config, state, match[0], match[1], query)
    logger.debug("match for %r at row %d col %d", query, match[0], match[1])


def cancel_search(config: EditorConfig, state: SearchState) -> None:
    restore_match_highlight(config, state)
    saved = state.saved
    config.cx = saved.cx
    config.cy = saved.cy
    config.coloff = saved.coloff
    config.rowoff = saved.rowoff


def accept_search(config: EditorConfig, state: SearchState) -> None:
    restore_match_highlight(config, state)
