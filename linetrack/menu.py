"""Key-driven tuning menu shown on a small text screen."""

from __future__ import annotations

import argparse
import os
import sys
import time
from enum import Enum, IntEnum
from pathlib import Path

from .pid import ControlParams
from .storage import load_params, save_params

FONT_WIDTH = 8
FONT_HEIGHT = 16
MAIN_ITEMS = 8
GYRO_ITEMS = 3
STEP = 0.1
DEFAULT_PARAMS_FILE = "params.bin"

_MAIN_LABELS = (
    "car_go",
    "gyro_pid",
    "angle_pid",
    "speed_pid",
    "turn_pppdd",
    "parameter",
    "save_param",
    "load_param",
)
_GYRO_FIELDS = {1: "kp", 2: "ki"}


class Key(Enum):
    """The four buttons of the menu."""

    UP = 1
    DOWN = 2
    SELECT = 3
    BACK = 4


class Page(IntEnum):
    """Menu pages; the value is the main-menu entry that opens the page."""

    MAIN = 1
    GYRO = 2
    ANGLE = 3
    SPEED = 4
    TURN = 5
    PARAMETER = 6


class Screen:
    """A character display addressed in pixel coordinates."""

    def __init__(self) -> None:
        self.items: dict[tuple[int, int], str] = {}

    def show_string(self, x: int, y: int, text: str) -> None:
        """Place ``text`` with its top-left corner at (x, y)."""
        self.items[(x, y)] = text

    def show_float(self, x: int, y: int, value: float) -> None:
        """Place ``value`` with three decimals at (x, y)."""
        self.show_string(x, y, f"{value:.3f}")

    def text_at(self, x: int, y: int) -> str | None:
        """Return the text placed at (x, y), if any."""
        return self.items.get((x, y))

    def clear(self) -> None:
        """Blank the whole display."""
        self.items.clear()

    def lines(self) -> list[str]:
        """Lay the placed texts out as rows of characters."""
        rows: dict[int, list[str]] = {}
        for (x, y), text in sorted(self.items.items()):
            row = rows.setdefault(y // FONT_HEIGHT, [])
            column = x // FONT_WIDTH
            if len(row) < column:
                row.extend(" " * (column - len(row)))
            row[column:column + len(text)] = list(text)
        if not rows:
            return []
        return ["".join(rows.get(i, [])).rstrip() for i in range(max(rows) + 1)]


class Menu:
    """Main menu plus the gyro-loop tuning page."""

    def __init__(
        self,
        params: ControlParams | None = None,
        storage_path: str | os.PathLike[str] = DEFAULT_PARAMS_FILE,
        screen: Screen | None = None,
        pause: float = 0.2,
    ) -> None:
        self.params = params if params is not None else ControlParams()
        self.storage_path = Path(storage_path)
        self.screen = screen if screen is not None else Screen()
        self.pause = pause
        self.page = Page.MAIN
        self.item = 1
        self.editing = False
        self.car_go = False

    def _move(self, key: Key, count: int) -> None:
        if key is Key.UP:
            self.item = count if self.item <= 1 else self.item - 1
        else:
            self.item = 1 if self.item >= count else self.item + 1
        self.screen.clear()

    def _flash(self, message: str) -> None:
        self.screen.show_string(60, 160, message)
        if self.pause > 0:
            time.sleep(self.pause)

    def press(self, key: Key | int) -> None:
        """Handle one short key press."""
        key = Key(key)
        if self.page is Page.MAIN:
            self._press_main(key)
        elif self.page is Page.GYRO:
            self._press_gyro(key)

    def _press_main(self, key: Key) -> None:
        if key in (Key.UP, Key.DOWN):
            self._move(key, MAIN_ITEMS)
            return
        if key is not Key.SELECT:
            return
        if self.item == 1:
            self.car_go = True
            self.screen.clear()
        elif 2 <= self.item <= 6:
            self.page = Page(self.item)
            self.item = 1
            self.screen.clear()
        elif self.item == 7:
            self.screen.show_string(60, 160, "Param Saved!")
            save_params(self.params, self.storage_path)
            self._flash("Param Saved!")
            self.screen.clear()
        elif self.item == 8:
            self.screen.show_string(60, 160, "Param Loaded!")
            load_params(self.params, self.storage_path)
            self._flash("Param Loaded!")
            self.screen.clear()

    def _press_gyro(self, key: Key) -> None:
        if not self.editing:
            if key in (Key.UP, Key.DOWN):
                self._move(key, GYRO_ITEMS)
            elif key is Key.SELECT:
                if self.item == GYRO_ITEMS:
                    self.page = Page.MAIN
                    self.item = 1
                else:
                    self.editing = True
                self.screen.clear()
            return
        name = _GYRO_FIELDS.get(self.item)
        if name is None:
            return
        gyro = self.params.gyro
        if key is Key.UP:
            setattr(gyro, name, getattr(gyro, name) + STEP)
        elif key is Key.DOWN:
            setattr(gyro, name, getattr(gyro, name) - STEP)
        elif key is Key.BACK:
            self.editing = False
        else:
            return
        self.screen.clear()

    def _cursor_y(self) -> int:
        return (self.item + 1) * FONT_HEIGHT

    def render(self) -> Screen:
        """Draw the current page and return the screen."""
        screen = self.screen
        if self.page is Page.MAIN:
            screen.show_string(60, 0, "main_menu")
            for index, label in enumerate(_MAIN_LABELS):
                screen.show_string(16, 30 + FONT_HEIGHT * index, label)
            screen.show_string(0, self._cursor_y(), "->")
        elif self.page is Page.GYRO:
            screen.show_string(60, 0, "gyro_pid")
            screen.show_string(16, 30, "gyro_kp:")
            screen.show_string(16, 30 + FONT_HEIGHT, "gyro_ki")
            screen.show_string(16, 30 + FONT_HEIGHT * 2, "back")
            screen.show_float(150, 30, self.params.gyro.kp)
            screen.show_float(150, 30 + FONT_HEIGHT, self.params.gyro.ki)
            screen.show_string(0, self._cursor_y(), "*" if self.editing else "->")
        return screen


_COMMANDS = {
    "1": Key.UP,
    "u": Key.UP,
    "up": Key.UP,
    "2": Key.DOWN,
    "d": Key.DOWN,
    "down": Key.DOWN,
    "3": Key.SELECT,
    "s": Key.SELECT,
    "select": Key.SELECT,
    "4": Key.BACK,
    "b": Key.BACK,
    "back": Key.BACK,
}


def main(argv: list[str] | None = None) -> int:
    """Run the menu on the terminal, one key per input line."""
    parser = argparse.ArgumentParser(
        prog="linetrack-menu",
        description="Tuning menu; keys: up/down/select/back (or 1-4), q to quit.",
    )
    parser.add_argument(
        "--params",
        default=DEFAULT_PARAMS_FILE,
        help="file holding the saved parameters",
    )
    args = parser.parse_args(argv)
    menu = Menu(storage_path=args.params, pause=0)
    while True:
        print("\n".join(menu.render().lines()))
        print("-" * 24)
        line = sys.stdin.readline()
        if not line:
            break
        command = line.strip().lower()
        if command in ("q", "quit"):
            break
        key = _COMMANDS.get(command)
        if key is None:
            print(f"unknown key: {command!r}", file=sys.stderr)
            continue
        try:
            menu.press(key)
        except (OSError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            menu.screen.clear()
        if menu.car_go:
            print("car go")
    return 0


if __name__ == "__main__":
    sys.exit(main())