"""Text screen with several numeric terminals, a status line and a console."""

from __future__ import annotations

import curses
import locale
import re
from collections import deque
from enum import Enum
from typing import Iterable

__all__ = [
    "N_LIN",
    "N_COL",
    "N_TERM",
    "QUEUE_SIZE",
    "CONSOLE_LINES",
    "HELP",
    "NumberQueue",
    "ConsoleMode",
    "Screen",
]

N_LIN = 24
N_COL = 80
N_TERM = 8
QUEUE_SIZE = 9
CONSOLE_LINES = N_LIN - 2 - N_TERM * 2

HELP = "P=para C=continua S=passo Lt=lê Zt=zera Etn=entra"
_EXIT_PROMPT = "  digite ENTER para sair  "
_FORMAT_LIMIT = CONSOLE_LINES * (N_COL + 1) - 1
_NUMBER = re.compile(r"\s*([+-]?[0-9]+)")

_COLOURS = (
    (curses.COLOR_GREEN, curses.COLOR_BLACK),
    (curses.COLOR_YELLOW, curses.COLOR_BLACK),
    (curses.COLOR_BLUE, curses.COLOR_BLACK),
    (curses.COLOR_GREEN, curses.COLOR_BLACK),
    (curses.COLOR_BLACK, curses.COLOR_RED),
)
_PAIR_STATUS = 4
_PAIR_CONSOLE = 3
_PAIR_ALERT = 5


class NumberQueue:
    """A queue holding at most QUEUE_SIZE numbers.

    ``pop`` hands back the most recently pushed number while discarding
    the oldest one.
    """

    def __init__(self) -> None:
        self._items: list[int] = []

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> int:
        return self._items[index]

    def full(self) -> bool:
        """Return True if no more numbers fit."""
        return len(self._items) >= QUEUE_SIZE

    def push(self, number: int) -> None:
        """Append a number; ignored when the queue is full."""
        if not self.full():
            self._items.append(number)

    def pop(self) -> int:
        """Remove an entry and return a number; 0 if the queue is empty."""
        if not self._items:
            return 0
        value = self._items[-1]
        del self._items[0]
        return value

    def clear(self) -> None:
        """Empty the queue."""
        self._items.clear()


class ConsoleMode(Enum):
    """Whether the simulation is paused, single-stepping or running."""

    STAY = "nao_sai_da_console"
    STEP = "deixa_executar_1"
    RUN = "executa_direto"


def _terminal_for(letter: str) -> int | None:
    if len(letter) != 1:
        return None
    terminal = ord(letter.lower()) - ord("a")
    return terminal if 0 <= terminal < N_TERM else None


def _queue_line(prefix: str, numbers: Iterable[int]) -> str:
    text = prefix + "".join(f"{number:8d}" for number in numbers)
    return text.ljust(N_COL)[:N_COL]


class Screen:
    """Terminals of numbers plus a free-form console, drawn with curses.

    Until ``start`` opens a window the screen is headless: all state is
    kept, and ``update`` returns at once.
    """

    def __init__(self) -> None:
        self.mode = ConsoleMode.STAY
        self.status_text = ""
        self._window = None
        self._reset()

    def _reset(self) -> None:
        self.inputs = [NumberQueue() for _ in range(N_TERM)]
        self.outputs = [NumberQueue() for _ in range(N_TERM)]
        self.console: deque[str] = deque([""] * CONSOLE_LINES, maxlen=CONSOLE_LINES)
        self.typing = ""

    @staticmethod
    def _check(terminal: int) -> None:
        if not 0 <= terminal < N_TERM:
            raise IndexError(f"terminal {terminal} out of range")

    def free(self, terminal: int) -> bool:
        """Return True if the terminal can take another output number."""
        self._check(terminal)
        return not self.outputs[terminal].full()

    def print_number(self, terminal: int, number: int) -> None:
        """Show a number on the terminal's output line."""
        self._check(terminal)
        self.outputs[terminal].push(number)

    def has_input(self, terminal: int) -> bool:
        """Return True if a number is waiting to be read from the terminal."""
        self._check(terminal)
        return len(self.inputs[terminal]) > 0

    def read_number(self, terminal: int) -> int:
        """Take a number from the terminal's input line."""
        self._check(terminal)
        return self.inputs[terminal].pop()

    def insert(self, terminal: int, number: int) -> None:
        """Queue a number to be read from the terminal."""
        self._check(terminal)
        self.inputs[terminal].push(number)

    def status(self, text: str) -> None:
        """Set the status line."""
        self.status_text = text.ljust(N_COL)

    def log(self, text: str) -> None:
        """Append text to the console, one console line per text line."""
        pieces = text[:_FORMAT_LIMIT].split("\n")
        if pieces[-1] == "":
            pieces.pop()
        for piece in pieces:
            self.console.append(piece[:N_COL])

    def interpret(self, command: str) -> str:
        """Run a typed console command and return its outcome message.

        Commands: ``etn`` enters number n on terminal t, ``lt`` removes an
        output number of terminal t, ``zt`` clears its output, ``p``
        pauses, ``s`` executes one instruction, ``c`` continues.
        """
        key = command[:1].lower()
        terminal = _terminal_for(command[1:2])
        err = "OK"
        if key == "e":
            match = _NUMBER.match(command, 2)
            if terminal is None:
                err = "terminal inválido"
            elif match is None:
                err = "esperava número"
            elif self.inputs[terminal].full():
                err = "fila cheia"
            else:
                self.inputs[terminal].push(int(match.group(1)))
        elif key == "l":
            if terminal is None:
                err = "terminal inválido"
            elif len(self.outputs[terminal]) == 0:
                err = "fila vazia"
            else:
                self.outputs[terminal].pop()
        elif key == "z":
            if terminal is None:
                err = "terminal inválido"
            else:
                self.outputs[terminal].clear()
        elif key == "p":
            self.mode = ConsoleMode.STAY
        elif key == "s":
            self.mode = ConsoleMode.STEP
        elif key == "c":
            self.mode = ConsoleMode.RUN
        else:
            err = "não reconhecido"
        self.log(f"{command} [{err}]")
        self.typing = ""
        return err

    def type_key(self, key: int | str) -> None:
        """Handle one typed key: edit the command line or run it on Enter."""
        code = ord(key) if isinstance(key, str) else key
        if code in (ord("\b"), 0x7F):
            self.typing = self.typing[:-1]
        elif code == ord("\n"):
            self.interpret(self.typing)
        elif ord(" ") <= code < 127 and len(self.typing) < N_COL:
            self.typing += chr(code)

    def render(self) -> list[str]:
        """Return the N_LIN text lines of the screen, each N_COL wide."""
        lines = []
        for terminal in range(N_TERM):
            letter = chr(ord("a") + terminal)
            lines.append(_queue_line("S" + letter, self.outputs[terminal]))
            lines.append(_queue_line("E" + letter, self.inputs[terminal]))
        lines.append(self.status_text.ljust(N_COL)[:N_COL])
        lines.extend(line.ljust(N_COL) for line in self.console)
        bottom = HELP.rjust(N_COL)
        lines.append(self.typing + bottom[len(self.typing):])
        return lines

    def start(self) -> None:
        """Reset the terminals and open the curses window."""
        self._reset()
        locale.setlocale(locale.LC_ALL, "")
        window = curses.initscr()
        curses.cbreak()
        curses.noecho()
        window.timeout(10)
        curses.start_color()
        for pair, (foreground, background) in enumerate(_COLOURS, start=1):
            curses.init_pair(pair, foreground, background)
        self._window = window

    def _put(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self._window.addstr(y, x, text, attr)
        except curses.error:
            pass  # writing the bottom-right cell or past a small window

    def _draw(self) -> None:
        for y, text in enumerate(self.render()):
            if y < 2 * N_TERM:
                pair = 1 + (y // 2) % 2
            elif y in (2 * N_TERM, N_LIN - 1):
                pair = _PAIR_STATUS
            else:
                pair = _PAIR_CONSOLE
            self._put(y, 0, text, curses.color_pair(pair))
        for terminal, queue in enumerate(self.outputs):
            if queue.full():
                self._put(
                    2 * terminal,
                    (QUEUE_SIZE - 1) * 8 + 2,
                    f"{queue[QUEUE_SIZE - 1]:8d}",
                    curses.color_pair(_PAIR_ALERT),
                )
        self._window.refresh()

    def update(self) -> None:
        """Process typed keys and redraw; blocks while the console is paused."""
        if self.mode is ConsoleMode.STEP:
            self.mode = ConsoleMode.STAY
        if self._window is None:
            return
        while True:
            key = self._window.getch()
            if key != -1:
                self.type_key(key)
            self._draw()
            if self.mode is not ConsoleMode.STAY:
                break

    def finish(self) -> None:
        """Redraw, wait for Enter and close the curses window."""
        if self._window is None:
            return
        self.update()
        window = self._window
        window.attron(curses.color_pair(_PAIR_ALERT))
        try:
            window.addstr(_EXIT_PROMPT)
        except curses.error:
            pass
        while window.getch() != ord("\n"):
            pass
        curses.endwin()
        self._window = None