"""Menu screens shown on the character display and the values they edit."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum

from .clock import RealTimeClock
from .display import LcdDisplay
from .io import log_line


@dataclass(frozen=True)
class PumpCycleTime:
    """How long one pump stays active before the other takes over."""

    hour: int = 0
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        for name in ("hour", "minute", "second"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} out of range: {value}")

    def total_seconds(self) -> int:
        """Return the cycle length in seconds."""
        return self.hour * 3600 + self.minute * 60 + self.second

    def is_set(self) -> bool:
        """Return True unless the cycle is the all-zero default."""
        return any((self.hour, self.minute, self.second))


class ControlMode(Enum):
    AUTO_BY_SENSORS = 0
    MANUAL = 1
    AUTO_BY_TIMER = 2


class ManualPumpSelection(IntEnum):
    NONE = 0
    PUMP_1 = 1
    PUMP_2 = 2
    BOTH = 3


class Screen(Enum):
    MAIN = 0
    MAIN_CFGS = 1
    CFG_CTRL_TYPE = 2
    CFG_RTC = 3
    CFG_PUMP1_CYCLE = 4
    CFG_PUMP2_CYCLE = 5


@dataclass(frozen=True)
class Buttons:
    """Debounced states of the navigation push buttons."""

    ok: bool = False
    esc: bool = False
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False


_MODE_LABELS = {
    ControlMode.MANUAL: "Manual ",
    ControlMode.AUTO_BY_SENSORS: "Sensors",
    ControlMode.AUTO_BY_TIMER: "Timers ",
}


def display_main(buttons: Buttons, mode: ControlMode, lcd: LcdDisplay, hour: str) -> Screen:
    """Show the control mode and the time; OK opens the settings menu."""
    lcd.print_message("Ctrl: " + _MODE_LABELS.get(mode, "UNKNOWN"), 0, 0)
    lcd.print_message(hour, 0, 1)
    return Screen.MAIN_CFGS if buttons.ok else Screen.MAIN


class ConfigMenu:
    """The settings menu: a scrolling two-line list of options."""

    OPTIONS = (
        ("Cfg Ctrl Type", Screen.CFG_CTRL_TYPE),
        ("Cfg Hour", Screen.CFG_RTC),
        ("Cfg Pump1 Time", Screen.CFG_PUMP1_CYCLE),
        ("Cfg Pump2 Time", Screen.CFG_PUMP2_CYCLE),
    )
    VISIBLE_ROWS = 2

    def __init__(self) -> None:
        self.selected = 0
        self.top = 0

    def _reset(self) -> None:
        self.selected = 0
        self.top = 0

    def show(self, buttons: Buttons, lcd: LcdDisplay) -> Screen:
        """Handle navigation, draw the visible options and return the next screen."""
        if buttons.up and self.selected > 0:
            self.selected -= 1
            if self.selected < self.top:
                self.top -= 1
        if buttons.down and self.selected < len(self.OPTIONS) - 1:
            self.selected += 1
            if self.selected > self.top + self.VISIBLE_ROWS - 1:
                self.top += 1

        visible = self.OPTIONS[self.top:self.top + self.VISIBLE_ROWS]
        for row, (label, _) in enumerate(visible):
            marker = ">" if self.top + row == self.selected else " "
            lcd.print_message(marker + label, 0, row)

        if buttons.ok:
            target = self.OPTIONS[self.selected][1]
            self._reset()
            return target
        if buttons.esc:
            self._reset()
            return Screen.MAIN
        return Screen.MAIN_CFGS


class ControlTypeScreen:
    """Choice between the two automatic control modes."""

    def __init__(self) -> None:
        self.selected = 0

    def show(self, buttons: Buttons, mode: ControlMode, lcd: LcdDisplay) -> tuple[Screen, ControlMode]:
        """Return the next screen and the (possibly changed) control mode."""
        if buttons.up and self.selected > 0:
            self.selected = 0
        if buttons.down and self.selected < 1:
            self.selected = 1

        if self.selected == 0:
            lcd.print_message(">Auto Sensors", 0, 0)
            lcd.print_message(" Auto Timer", 0, 1)
        else:
            lcd.print_message(" Auto Sensors", 0, 0)
            lcd.print_message(">Auto Timer", 0, 1)

        if buttons.ok:
            mode = ControlMode.AUTO_BY_SENSORS if self.selected == 0 else ControlMode.AUTO_BY_TIMER
            self.selected = 0
            return Screen.MAIN_CFGS, mode
        if buttons.esc:
            self.selected = 0
            return Screen.MAIN, mode
        return Screen.CFG_CTRL_TYPE, mode


class _FieldEditor:
    """Numeric fields edited with a cursor; values wrap within their limits."""

    def __init__(self, values: list[int], limits: tuple[tuple[int, int], ...]) -> None:
        self.values = values
        self.limits = limits
        self.cursor = 0

    def handle(self, buttons: Buttons) -> None:
        if buttons.left and self.cursor > 0:
            self.cursor -= 1
        if buttons.right and self.cursor < len(self.values) - 1:
            self.cursor += 1
        low, high = self.limits[self.cursor]
        value = self.values[self.cursor]
        if buttons.up:
            value = value + 1 if value < high else low
        if buttons.down:
            value = value - 1 if value > low else high
        self.values[self.cursor] = value

    def arrow_line(self, width: int) -> str:
        pos = self.cursor * 3
        return " " * pos + "^" + " " * (width - pos - 1)


class RtcScreen:
    """Editor for the clock's date and time as DD/MM/YY-HH:MM:SS."""

    _LIMITS = ((1, 31), (1, 12), (0, 99), (0, 23), (0, 59), (0, 59))
    _WIDTH = 16

    def __init__(self) -> None:
        self._editor: _FieldEditor | None = None

    def show(self, buttons: Buttons, lcd: LcdDisplay, rtc: RealTimeClock) -> Screen:
        """Edit the date and time; OK stores it in ``rtc``, ESC discards it."""
        if self._editor is None:
            now = rtc.now()
            values = [now.day, now.month, now.year % 100, now.hour, now.minute, now.second]
            self._editor = _FieldEditor(values, self._LIMITS)
        editor = self._editor
        editor.handle(buttons)

        day, month, year, hour, minute, second = editor.values
        text = f"{day:02d}/{month:02d}/{year:02d}-{hour:02d}:{minute:02d}:{second:02d}"
        lcd.print_message(text[:self._WIDTH], 0, 0)
        lcd.print_message(editor.arrow_line(self._WIDTH), 0, 1)

        if buttons.ok:
            full_year = 2000 + year
            # A day past the end of the month is taken as the month's last day.
            day = min(day, calendar.monthrange(full_year, month)[1])
            rtc.set_datetime(datetime(full_year, month, day, hour, minute, second))
            log_line("RTC set to: " + rtc.formatted(), True)
            self._editor = None
            return Screen.MAIN_CFGS
        if buttons.esc:
            self._editor = None
            return Screen.MAIN_CFGS
        return Screen.CFG_RTC


class PumpCycleScreen:
    """Editor for one pump's cycle time as HH:MM:SS."""

    _LIMITS = ((0, 23), (0, 59), (0, 59))
    _ARROW_WIDTH = 7

    def __init__(self, pump_index: int) -> None:
        if pump_index not in (0, 1):
            raise ValueError(f"pump index must be 0 or 1, not {pump_index}")
        self.pump_index = pump_index
        self._editor: _FieldEditor | None = None

    @property
    def screen(self) -> Screen:
        return Screen.CFG_PUMP1_CYCLE if self.pump_index == 0 else Screen.CFG_PUMP2_CYCLE

    def show(self, buttons: Buttons, cycles: list[PumpCycleTime], lcd: LcdDisplay) -> Screen:
        """Edit the cycle; OK stores it into ``cycles``, ESC discards it."""
        if self._editor is None:
            current = cycles[self.pump_index]
            self._editor = _FieldEditor([current.hour, current.minute, current.second], self._LIMITS)
        editor = self._editor
        editor.handle(buttons)

        hour, minute, second = editor.values
        text = f"{hour:02d}:{minute:02d}:{second:02d}"
        lcd.print_message(text, 0, 0)
        lcd.print_message(editor.arrow_line(self._ARROW_WIDTH), 0, 1)

        if buttons.ok:
            cycles[self.pump_index] = PumpCycleTime(hour, minute, second)
            self._editor = None
            log_line(f"Pump {self.pump_index + 1} cycle set to: {text}", True)
            return Screen.MAIN_CFGS
        if buttons.esc:
            self._editor = None
            return Screen.MAIN_CFGS
        return self.screen