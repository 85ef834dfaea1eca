from __future__ import annotations

import codecs
import logging
import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TextIO, TypeVar

from rich.console import Console

from .errors import TerminalError

LOG = logging.getLogger(__name__)

S = TypeVar("S")

# Single control bytes and their normalized key names
_CONTROL_KEYS = {
    "\x03": "quit",  # Ctrl+C
    "\x04": "quit",  # Ctrl+D
    "\r": "enter",
    "\n": "enter",
    "\t": "down",
    "\x0e": "down",  # Ctrl+N
    "\x10": "up",  # Ctrl+P
    "\x7f": "backspace",
    "\x08": "backspace",
}

_ESCAPE_FINALS = {"A": "up", "B": "down", "Z": "up"}


class Terminal:
    """Raw-mode keyboard reader with in-place redraw.

    Keys come back normalized: "up", "down", "enter", "escape", "backspace",
    "quit", or a single printable character.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="ignore")
        self._drawn = 0
        self._fd = -1

    @contextmanager
    def session(self) -> Iterator["Terminal"]:
        try:
            import termios
            import tty
        except ImportError as exc:  # pragma: no cover - platform dependent
            raise TerminalError("interactive terminal not available on this platform") from exc

        try:
            fd = self._stdin.fileno()
        except (AttributeError, ValueError, OSError):
            raise TerminalError("stdin is not a valid TTY")
        if not os.isatty(fd) or not self._stdout.isatty():
            raise TerminalError("interactive terminal not available")

        try:
            old_attrs = termios.tcgetattr(fd)
        except termios.error as exc:  # pragma: no cover - platform dependent
            raise TerminalError("failed to read terminal settings") from exc

        self._fd = fd
        self._drawn = 0
        try:
            tty.setraw(fd)
            self._stdout.write("\x1b[?25l")  # hide cursor
            self._stdout.flush()
            yield self
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_attrs)
            self._stdout.write("\x1b[?25h")  # show cursor
            self._stdout.flush()
            self._fd = -1

    def _read_char(self, timeout: Optional[float] = None) -> str:
        import select

        while True:
            if timeout is not None:
                ready, _, _ = select.select([self._fd], [], [], timeout)
                if not ready:
                    return ""
            data = os.read(self._fd, 1)
            if not data:
                raise EOFError
            ch = self._decoder.decode(data)
            if ch:
                return ch

    def _read_escape(self) -> Optional[str]:
        ch = self._read_char(0.25)
        if not ch:
            return "escape"
        if ch not in {"[", "O"}:
            return "escape"
        seq = ""
        while True:
            nxt = self._read_char(0.04)
            if not nxt:
                break
            seq += nxt
            if nxt.isalpha() or nxt == "~":
                break
        if not seq:
            return None
        return _ESCAPE_FINALS.get(seq[-1])

    def read_key(self) -> str:
        """Block until a recognized key is pressed. Raises EOFError when input closes."""
        while True:
            ch = self._read_char()
            if ch == "\x1b":
                key = self._read_escape()
            elif ch in _CONTROL_KEYS:
                key = _CONTROL_KEYS[ch]
            elif ch.isprintable():
                key = ch
            else:
                key = None
            if key is not None:
                return key

    def draw(self, text: str) -> None:
        """Replace the previously drawn frame with ``text``."""
        out = self._stdout
        lines = text.split("\n")
        if self._drawn:
            out.write(f"\x1b[{self._drawn}A")
        for line in lines:
            out.write(f"\r\x1b[2K{line}\r\n")
        extra = self._drawn - len(lines)
        if extra > 0:
            out.write("\r\x1b[2K\r\n" * extra)
            out.write(f"\x1b[{extra}A")
        self._drawn = len(lines)
        out.flush()

    def read_line(self, prompt: str) -> str:
        return Console().input(prompt)


def run_machine(
    terminal: Terminal,
    state: S,
    transition: Callable[[S, str], S],
    render: Callable[[S], str],
    is_final: Callable[[S], bool],
) -> S:
    """Feed keys through ``transition`` until a final state or end of input.

    Each key is fully handled (transition and redraw) before the next read.
    """
    with terminal.session():
        terminal.draw(render(state))
        while not is_final(state):
            try:
                key = terminal.read_key()
            except EOFError:
                LOG.debug("Input closed before the prompt finished")
                break
            state = transition(state, key)
            terminal.draw(render(state))
    return state
