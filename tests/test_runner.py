from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from monkey import runner
from monkey.runner import _load_source, format_parse_errors, main
from monkey.utils import configure_logging, debug_py_trace_enabled, log_level, set_debug_py_trace
from tests.support.harness import Environment, Integer, ParseError, run_program


def test_run_evaluates_source() -> None:
    assert run_program("let x = 2; x * 21") == Integer(42)


def test_run_raises_parse_error_with_all_diagnostics() -> None:
    with pytest.raises(ParseError) as exc_info:
        run_program("let x 5; let = 1;")

    assert exc_info.value.errors == [
        "expected next token to be =, got INT instead",
        "expected next token to be IDENT, got = instead",
    ]


def test_run_reuses_environment() -> None:
    env = Environment()
    run_program("let a = 1;", env)

    assert run_program("a + 1", env) == Integer(2)


def test_format_parse_errors_tab_indents() -> None:
    assert format_parse_errors(["one", "two"]) == "\tone\n\ttwo"


def test_load_source_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "prog.monkey"
    path.write_text("1 + 1", encoding="utf-8")

    assert _load_source(str(path)) == "1 + 1"


def test_load_source_literal_text() -> None:
    assert _load_source("let x = 1; x") == "let x = 1; x"


def test_load_source_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("5 * 5"))

    assert _load_source("-") == "5 * 5"


def test_load_source_empty_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    with pytest.raises(SystemExit):
        _load_source(None)


CLI_CASES = [
    pytest.param("1 + 2", 0, "3\n", "", id="prints-result"),
    pytest.param("let x = 1;", 0, "", "", id="null-prints-nothing"),
    pytest.param('"hi"', 0, "hi\n", "", id="string-result"),
    pytest.param(
        "5 + true",
        1,
        "",
        "ERROR: type mismatch: INTEGER + BOOLEAN\n",
        id="runtime-error",
    ),
    pytest.param(
        "let x 5;",
        1,
        "",
        "parser errors:\n\texpected next token to be =, got INT instead\n",
        id="parse-error",
    ),
    pytest.param(
        "let f = fn(n) { f(n + 1) }; f(0)",
        1,
        "",
        "Error: maximum recursion depth exceeded\n",
        id="recursion-limit",
    ),
]


@pytest.mark.parametrize("source, code, out, err", CLI_CASES)
def test_cli(
    source: str,
    code: int,
    out: str,
    err: str,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("MONKEY_DEBUG_PY_TRACE", raising=False)

    assert main([source]) == code

    captured = capsys.readouterr()
    assert captured.out == out
    assert captured.err == err


def test_cli_rejects_extra_arguments() -> None:
    with pytest.raises(SystemExit):
        main(["1", "2"])


def test_cli_reads_stdin_when_not_a_tty(
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("puts(7)"))

    assert main([]) == 0
    assert capsys.readouterr().out == "7\n"


def test_cli_starts_repl_on_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    class FakeTTY(io.StringIO):
        def isatty(self) -> bool:
            return True

    monkeypatch.setattr("sys.stdin", FakeTTY())
    monkeypatch.setattr("monkey.repl.repl", lambda: calls.append("repl"))

    assert main([]) == 0
    assert calls == ["repl"]


def test_py_trace_toggle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MONKEY_DEBUG_PY_TRACE", raising=False)
    assert not debug_py_trace_enabled()

    set_debug_py_trace(True)
    assert debug_py_trace_enabled()

    set_debug_py_trace(False)
    assert not debug_py_trace_enabled()


@pytest.mark.parametrize(
    "raw, level",
    [
        pytest.param(None, logging.WARNING, id="default"),
        pytest.param("debug", logging.DEBUG, id="lowercase"),
        pytest.param("ERROR", logging.ERROR, id="uppercase"),
        pytest.param("chatty", logging.WARNING, id="unknown"),
    ],
)
def test_log_level(raw, level: int, monkeypatch: pytest.MonkeyPatch) -> None:
    if raw is None:
        monkeypatch.delenv("MONKEY_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("MONKEY_LOG_LEVEL", raw)

    assert log_level() == level


def test_configure_logging_installs_one_handler() -> None:
    logger = configure_logging()
    configure_logging()

    ours = [h for h in logger.handlers if getattr(h, "_monkey_cli", False)]
    assert len(ours) == 1


def test_runner_logs_parse_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger=runner.__name__):
        run_program("1; 2;")

    assert "parsed 2 statement(s), 0 diagnostic(s)" in caplog.text
