from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import C_LIKE, make_config
from cookie.constants import (
    HL_BOOLEAN,
    HL_COMMENT,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MLCOMMENT,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
)
from cookie.models import EditorSyntax
from cookie.rows import insert_row, row_del_char, row_insert_char
from cookie.syntax import (
    find_syntax,
    highlight_row,
    is_separator,
    select_syntax_highlight,
    syntax_to_color,
    update_syntax,
)


def tags(render: str, syntax: EditorSyntax | None = C_LIKE, in_comment: bool = False) -> list[int]:
    return highlight_row(render, syntax, in_comment)[0]


@pytest.mark.parametrize("ch", [" ", "\t", ",", ".", "(", ")", "<", ">", "{", "}", ":", ";", ""])
def test_separators(ch):
    assert is_separator(ch)


@pytest.mark.parametrize("ch", ["a", "_", "0", '"', "#"])
def test_non_separators(ch):
    assert not is_separator(ch)


def test_keyword_needs_separator_on_both_sides():
    assert tags("intx = 1;")[:4] == [HL_NORMAL] * 4
    assert tags("int x;")[:3] == [HL_KEYWORD2] * 3
    assert tags("(int)")[1:4] == [HL_KEYWORD2] * 3
    assert tags("xint")[1:] == [HL_NORMAL] * 3


def test_primary_and_secondary_keywords():
    hl = tags("return x;")
    assert hl[:6] == [HL_KEYWORD1] * 6
    assert hl[6:] == [HL_NORMAL] * 3


def test_first_keyword_in_list_order_wins():
    syntax = replace(C_LIKE, keywords=("int|", "int"))
    assert tags("int", syntax) == [HL_KEYWORD2] * 3
    syntax = replace(C_LIKE, keywords=("int", "int|"))
    assert tags("int", syntax) == [HL_KEYWORD1] * 3


def test_numbers():
    hl = tags("x = 42 + 3.14;")
    assert hl[4:6] == [HL_NUMBER] * 2
    assert hl[9:13] == [HL_NUMBER] * 4
    assert hl[13] == HL_NORMAL


def test_digit_inside_identifier_is_not_a_number():
    assert tags("x1") == [HL_NORMAL, HL_NORMAL]


@pytest.mark.parametrize("digit", ["²", "①", "¹"])
def test_superscript_and_circled_digits_are_not_numbers(digit):
    assert tags(f"x = {digit}")[4] == HL_NORMAL


def test_numbers_disabled():
    syntax = replace(C_LIKE, highlight_numbers=False)
    assert tags("42", syntax) == [HL_NORMAL, HL_NORMAL]


def test_string_with_escaped_quote():
    render = 's = "a\\"b";'
    hl = tags(render)
    assert hl[4:10] == [HL_STRING] * 6
    assert hl[10] == HL_NORMAL


@pytest.mark.parametrize("quote", ['"', "'", "`"])
def test_all_quote_characters_open_strings(quote):
    assert tags(f"{quote}ab{quote}") == [HL_STRING] * 4


def test_string_only_closes_on_same_quote():
    assert tags("\"it's\" x")[:6] == [HL_STRING] * 6
    assert tags("\"it's\" x")[7] == HL_NORMAL


def test_comment_markers_inside_string_are_text():
    assert tags('"//" x')[:4] == [HL_STRING] * 4
    assert tags('"/*" x')[5] == HL_NORMAL


def test_line_comment_tags_rest_of_row():
    render = "x = 1; // note"
    hl = tags(render)
    start = render.index("//")
    assert hl[start:] == [HL_COMMENT] * (len(render) - start)
    assert hl[4] == HL_NUMBER


def test_block_comment_on_one_row():
    render = "a /* b */ c"
    hl, open_comment = highlight_row(render, C_LIKE, False)
    assert hl[2:9] == [HL_MLCOMMENT] * 7
    assert hl[10] == HL_NORMAL
    assert open_comment is False


def test_unterminated_block_comment_is_carried():
    hl, open_comment = highlight_row("/* open", C_LIKE, False)
    assert hl == [HL_MLCOMMENT] * 7
    assert open_comment is True

    hl, open_comment = highlight_row("still", C_LIKE, True)
    assert hl == [HL_MLCOMMENT] * 5
    assert open_comment is True

    hl, open_comment = highlight_row("end */ int", C_LIKE, True)
    assert hl[:6] == [HL_MLCOMMENT] * 6
    assert hl[7:] == [HL_KEYWORD2] * 3
    assert open_comment is False


def test_line_comment_marker_inside_block_comment_is_ignored():
    hl, open_comment = highlight_row("// still */ 1", C_LIKE, True)
    assert hl[:11] == [HL_MLCOMMENT] * 11
    assert hl[12] == HL_NUMBER
    assert open_comment is False


def test_booleans_are_case_insensitive_whole_tokens():
    hl = tags("x = TRUE;")
    assert hl[4:8] == [HL_BOOLEAN] * 4
    assert tags("x=false")[2:] == [HL_BOOLEAN] * 5
    assert tags("trueish") == [HL_NORMAL] * 7
    assert tags("atrue") == [HL_NORMAL] * 5


def test_booleans_disabled():
    syntax = replace(C_LIKE, highlight_booleans=False)
    assert tags("true", syntax) == [HL_NORMAL] * 4


def test_no_syntax_means_all_normal():
    hl, open_comment = highlight_row("/* int 42", None, True)
    assert hl == [HL_NORMAL] * 9
    assert open_comment is False


def test_highlighting_is_idempotent():
    render = 'int x = "s"; /* c'
    assert highlight_row(render, C_LIKE, False) == highlight_row(render, C_LIKE, False)
    assert highlight_row(render, C_LIKE, True) == highlight_row(render, C_LIKE, True)


def test_removing_comment_opener_retags_following_rows():
    cfg = make_config(["/* start", "plain", "end */"], syntax=C_LIKE)
    assert cfg.rows[1].hl == [HL_MLCOMMENT] * 5
    assert cfg.rows[2].hl == [HL_MLCOMMENT] * 6

    row_del_char(cfg, cfg.rows[0], 0)

    assert cfg.rows[0].chars == "* start"
    for row in cfg.rows:
        assert row.hl == [HL_NORMAL] * row.rsize
        assert row.hl_oc is False


def test_restoring_comment_opener_retags_following_rows():
    cfg = make_config(["* start", "plain", "end */"], syntax=C_LIKE)
    row_insert_char(cfg, cfg.rows[0], 0, "/")
    assert cfg.rows[1].hl == [HL_MLCOMMENT] * 5
    assert cfg.rows[2].hl == [HL_MLCOMMENT] * 6
    assert cfg.rows[2].hl_oc is False


def test_cascade_over_long_file_does_not_recurse():
    cfg = make_config(["x"] * 5000, syntax=C_LIKE)
    insert_row(cfg, 0, "/*")
    assert cfg.rows[-1].hl == [HL_MLCOMMENT]
    assert cfg.rows[-1].hl_oc is True


def test_cascade_stops_when_state_settles():
    cfg = make_config(["/* a", "b */", "int"], syntax=C_LIKE)
    before = cfg.rows[2].hl
    update_syntax(cfg, 0)
    assert cfg.rows[2].hl is before


def test_find_syntax_matches_extension_or_substring():
    make = EditorSyntax(filetype="make", filematch=("Makefile",), keywords=())
    c = EditorSyntax(filetype="c", filematch=(".c",), keywords=())
    syntaxes = [make, c]
    assert find_syntax(syntaxes, "src/main.c") is c
    assert find_syntax(syntaxes, "Makefile") is make
    assert find_syntax(syntaxes, "main.cpp") is None
    assert find_syntax(syntaxes, None) is None


def test_find_syntax_first_match_wins():
    first = EditorSyntax(filetype="a", filematch=(".x",), keywords=())
    second = EditorSyntax(filetype="b", filematch=(".x",), keywords=())
    assert find_syntax([first, second], "f.x") is first


def test_select_syntax_rehighlights_rows():
    cfg = make_config(["int x;"])
    assert cfg.rows[0].hl[0] == HL_NORMAL
    select_syntax_highlight(cfg, [C_LIKE], "main.c")
    assert cfg.syntax is C_LIKE
    assert cfg.rows[0].hl[:3] == [HL_KEYWORD2] * 3


def test_syntax_to_color_uses_palette():
    assert syntax_to_color(HL_NUMBER) == 33
    assert syntax_to_color(HL_NUMBER, {"number": 91}) == 91
    assert syntax_to_color(HL_KEYWORD1, {"number": 91}) == 94
