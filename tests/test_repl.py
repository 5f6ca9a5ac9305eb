from __future__ import annotations

import pytest
from prompt_toolkit.document import Document

from monkey.repl import Session, bracket_depth, clean_input, dispatch_slash, eval_line
from monkey.repl_highlight import STYLES, MonkeyLexer, highlight_line
from monkey.runtime import Builtins, init_builtins, register_builtin
from tests.support.harness import NULL, Environment, Integer


@pytest.mark.parametrize(
    "text, depth",
    [
        pytest.param("let x = 1;", 0, id="closed"),
        pytest.param("let f = fn(x) {", 1, id="open-brace"),
        pytest.param("[1, (2", 2, id="open-bracket-and-paren"),
        pytest.param("}", 0, id="stray-close"),
        pytest.param('"{"', 0, id="brace-in-string"),
    ],
)
def test_bracket_depth(text: str, depth: int) -> None:
    assert bracket_depth(text) == depth


def test_clean_input_strips_invisible() -> None:
    assert clean_input("1\u200b + 2\r") == "1 + 2"


def test_eval_line_keeps_bindings(capsys: pytest.CaptureFixture[str]) -> None:
    env = Environment()

    eval_line("let a = 40;", env)
    eval_line("a + 2", env)

    assert capsys.readouterr().out == "42\n"
    assert env.get("a") == Integer(40)


def test_eval_line_prints_diagnostics(capsys: pytest.CaptureFixture[str]) -> None:
    eval_line("let = 1;", Environment())

    assert capsys.readouterr().out == "\texpected next token to be IDENT, got = instead\n"


def test_eval_line_prints_runtime_errors(capsys: pytest.CaptureFixture[str]) -> None:
    eval_line("nope", Environment())

    assert capsys.readouterr().out == "ERROR: identifier not found: nope\n"


def test_slash_reset_replaces_environment(capsys: pytest.CaptureFixture[str]) -> None:
    session = Session()
    session.env.set("a", Integer(1))
    original = session.env

    assert dispatch_slash("/reset", session)
    assert session.env is not original
    assert session.env.get("a") is None
    assert "Environment reset." in capsys.readouterr().out


def test_slash_py_traceback(capsys: pytest.CaptureFixture[str]) -> None:
    session = Session()

    assert dispatch_slash("/py-traceback on", session)
    assert dispatch_slash("/py-traceback off", session)
    assert dispatch_slash("/py-traceback", session)

    assert capsys.readouterr().out == (
        "Python traceback: on\nPython traceback: off\nPython traceback: on\n"
    )


def test_slash_py_traceback_bad_argument(capsys: pytest.CaptureFixture[str]) -> None:
    assert dispatch_slash("/py-traceback maybe", Session())
    assert "Usage: /py-traceback [on|off]" in capsys.readouterr().err


def test_slash_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert dispatch_slash("/nope", Session())
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_non_slash_line_is_not_a_command() -> None:
    assert not dispatch_slash("1 / 2", Session())


def test_highlight_reassembles_line() -> None:
    line = 'let  s = "hi" + len(x); @'
    fragments = highlight_line(line)

    assert "".join(text for _style, text in fragments) == line


def test_highlight_styles_tokens() -> None:
    styles = {text: style for style, text in highlight_line('let s = "hi"; len')}

    assert styles["let"] == STYLES["keyword"]
    assert styles['"hi"'] == STYLES["string"]
    assert styles["len"] == STYLES["builtin"]
    assert styles["s"] == ""


def test_highlight_follows_builtin_registry(monkeypatch) -> None:
    init_builtins()
    monkeypatch.setattr(Builtins, "functions", dict(Builtins.functions))

    assert highlight_line("shout") == (("", "shout"),)

    register_builtin("shout")(lambda *args: NULL)

    assert highlight_line("shout") == ((STYLES["builtin"], "shout"),)


def test_highlight_empty_line() -> None:
    assert highlight_line("") == (("", ""),)


def test_lexer_document_lines() -> None:
    get_line = MonkeyLexer().lex_document(Document("1\ntrue"))

    assert get_line(0) == [(STYLES["number"], "1")]
    assert get_line(1) == [(STYLES["literal"], "true")]
    assert get_line(5) == [("", "")]
