"""Interactive Monkey session on top of prompt_toolkit."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Iterator

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.shortcuts import clear

from .environment import Environment
from .lexer import tokenize
from .parser import ParseError
from .repl_highlight import MonkeyLexer
from .runner import format_parse_errors, report_host_error, run
from .runtime import init_builtins
from .token_types import TT
from .types import NULL
from .utils import debug_py_trace_enabled, set_debug_py_trace

logger = logging.getLogger(__name__)

PROMPT = ">> "
CONTINUATION = ".. "

# Pasted text often carries these; none of them mean anything to the lexer
_JUNK_CHARS = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_OPENERS = {TT.LPAREN, TT.LBRACE, TT.LBRACKET}
_CLOSERS = {TT.RPAREN, TT.RBRACE, TT.RBRACKET}

_ON_WORDS = ("on", "1", "true", "yes")
_OFF_WORDS = ("off", "0", "false", "no")


class Session:
    """State shared by one interactive run: the live environment."""

    def __init__(self) -> None:
        self.env = Environment()

    def reset(self) -> None:
        self.env = Environment()


@dataclass(frozen=True)
class SlashCommand:
    help: str
    usage: str
    action: Callable[[Session, str], None]


def _cmd_clear(session: Session, arg: str) -> None:
    clear()


def _cmd_reset(session: Session, arg: str) -> None:
    session.reset()
    print("Environment reset.")


def _cmd_py_traceback(session: Session, arg: str) -> None:
    word = arg.lower()

    if word in _ON_WORDS:
        set_debug_py_trace(True)
    elif word in _OFF_WORDS:
        set_debug_py_trace(False)
    elif not word:
        set_debug_py_trace(not debug_py_trace_enabled())
    else:
        print("Usage: /py-traceback [on|off]", file=sys.stderr)
        return

    print("Python traceback: " + ("on" if debug_py_trace_enabled() else "off"))


SLASH_COMMANDS: Dict[str, SlashCommand] = {
    "/clear": SlashCommand("Clear the terminal screen", "", _cmd_clear),
    "/py-traceback": SlashCommand("Toggle Python traceback on errors", "[on|off]", _cmd_py_traceback),
    "/reset": SlashCommand("Reset the REPL environment", "", _cmd_reset),
}


def dispatch_slash(line: str, session: Session) -> bool:
    """Run *line* as a slash command; False means it is ordinary source."""
    words = line.strip().split(None, 1)
    if not words or not words[0].startswith("/"):
        return False

    name, arg = words[0], (words[1] if len(words) == 2 else "")
    command = SLASH_COMMANDS.get(name)

    if command is None:
        print(f"Unknown command: {name}", file=sys.stderr)
    else:
        command.action(session, arg)

    return True


class SlashCompleter(Completer):
    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterator[Completion]:
        typed = document.text_before_cursor
        if not typed.startswith("/"):
            return

        for name, command in SLASH_COMMANDS.items():
            if name.startswith(typed):
                meta = f"{command.help} {command.usage}".rstrip()
                yield Completion(name, start_position=-len(typed), display_meta=meta)


def bracket_depth(text: str) -> int:
    """Unclosed ( { [ count in *text*; positive means the input is still open."""
    depth = 0

    for tok in tokenize(text):
        if tok.type in _OPENERS:
            depth += 1
        elif tok.type in _CLOSERS and depth:
            depth -= 1

    return depth


def clean_input(text: str) -> str:
    return _JUNK_CHARS.sub("", text)


def eval_line(text: str, env: Environment) -> None:
    """Evaluate one submission in *env* and print what the user should see."""
    try:
        result = run(text, env)
    except ParseError as exc:
        print(format_parse_errors(exc.errors))
        return
    except RecursionError as exc:
        report_host_error(exc)
        return

    if result is not NULL:
        print(result.inspect())


def _key_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("backspace")
    def _(event: KeyPressEvent) -> None:
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @kb.add("enter")
    def _(event: KeyPressEvent) -> None:
        buf = event.app.current_buffer

        # An open bracket keeps the submission going on the next line
        if not buf.text.startswith("/") and bracket_depth(buf.text) > 0:
            buf.insert_text("\n")
        else:
            buf.validate_and_handle()

    return kb


def repl() -> None:
    init_builtins()
    session = Session()

    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        completer=SlashCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation=CONTINUATION,
    )

    print("monkey repl. Ctrl-D to exit, / for commands")

    while True:
        try:
            text = clean_input(prompt.prompt(PROMPT))
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue
        except EOFError:
            print()
            return

        if not text.strip() or dispatch_slash(text, session):
            continue

        logger.debug("evaluating %d chars", len(text))
        eval_line(text, session.env)
