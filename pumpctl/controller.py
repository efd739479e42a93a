"""Pump control: operating modes, pump alternation, menus and persisted cycle times."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from .clock import RealTimeClock
from .display import LcdDisplay
from .eeprom import START_ADDRESS, Eeprom
from .io import DigitalActuator, DigitalSensor, PinBank, log_line
from .ui import (
    Buttons,
    ConfigMenu,
    ControlMode,
    ControlTypeScreen,
    ManualPumpSelection,
    PumpCycleScreen,
    PumpCycleTime,
    RtcScreen,
    Screen,
    display_main,
)

POLL_ALL_SENSORS_TIMEOUT = 50
CONTROL_PUMPS_TIMEOUT = 200
DISPLAY_UPDATE_TIMEOUT = 400

DI_PB_UP = 2
DI_PB_DOWN = 3
DI_PB_LEFT = 4
DI_PB_RIGHT = 5
DI_PB_OK = 6
DI_PB_ESC = 7
DI_PB_MODE = 8
DI_PB_PUMP_SEL = 9
DI_WELL_SENSOR = 10
DI_CISTERN_SENSOR = 11

DO_LED_AUTO = 14
DO_LED_MANUAL = 15
DO_PUMP_1 = 16
DO_PUMP_2 = 17

SENSOR_FULL_LEVEL = False
SENSOR_EMPTY_LEVEL = True

PUMP_COUNT = 2
_CYCLE_RECORD_SIZE = 3
CYCLES_SIZE = PUMP_COUNT * _CYCLE_RECORD_SIZE
_ERASED_BYTE = 0xFF


def encode_cycles(cycles: Sequence[PumpCycleTime]) -> bytes:
    """Pack the two pump cycle times as hour, minute, second bytes each."""
    if len(cycles) != PUMP_COUNT:
        raise ValueError(f"expected {PUMP_COUNT} pump cycles, got {len(cycles)}")
    return bytes(value for c in cycles for value in (c.hour, c.minute, c.second))


def decode_cycles(data: bytes) -> list[PumpCycleTime]:
    """Unpack two pump cycle times stored by :func:`encode_cycles`."""
    data = bytes(data)
    if len(data) != CYCLES_SIZE:
        raise ValueError(f"expected {CYCLES_SIZE} bytes of pump cycles, got {len(data)}")
    return [
        PumpCycleTime(*data[start:start + _CYCLE_RECORD_SIZE])
        for start in range(0, CYCLES_SIZE, _CYCLE_RECORD_SIZE)
    ]


def _log_cycles(cycles: Sequence[PumpCycleTime]) -> None:
    for number, cycle in enumerate(cycles, start=1):
        log_line(f"Pump {number} Cycle: {cycle.hour}:{cycle.minute}:{cycle.second}", True)


class PumpController:
    """Two pumps filling a cistern from a well, with a two-line menu display."""

    def __init__(
        self,
        pins: PinBank | None = None,
        lcd: LcdDisplay | None = None,
        rtc: RealTimeClock | None = None,
        eeprom: Eeprom | None = None,
    ) -> None:
        self.pins = PinBank() if pins is None else pins
        self.lcd = LcdDisplay() if lcd is None else lcd
        self.rtc = RealTimeClock() if rtc is None else rtc
        self.eeprom = Eeprom() if eeprom is None else eeprom

        self.pb_up = DigitalSensor(self.pins, DI_PB_UP)
        self.pb_down = DigitalSensor(self.pins, DI_PB_DOWN)
        self.pb_left = DigitalSensor(self.pins, DI_PB_LEFT)
        self.pb_right = DigitalSensor(self.pins, DI_PB_RIGHT)
        self.pb_ok = DigitalSensor(self.pins, DI_PB_OK)
        self.pb_esc = DigitalSensor(self.pins, DI_PB_ESC)
        self.pb_mode = DigitalSensor(self.pins, DI_PB_MODE)
        self.pb_pump_sel = DigitalSensor(self.pins, DI_PB_PUMP_SEL)
        self.well_sensor = DigitalSensor(self.pins, DI_WELL_SENSOR)
        self.cistern_sensor = DigitalSensor(self.pins, DI_CISTERN_SENSOR)
        self.sensors = (
            self.pb_up, self.pb_down, self.pb_left, self.pb_right, self.pb_ok,
            self.pb_esc, self.pb_mode, self.pb_pump_sel, self.well_sensor,
            self.cistern_sensor,
        )

        self.led_auto = DigitalActuator(self.pins, DO_LED_AUTO)
        self.led_manual = DigitalActuator(self.pins, DO_LED_MANUAL)
        self.pump1 = DigitalActuator(self.pins, DO_PUMP_1)
        self.pump2 = DigitalActuator(self.pins, DO_PUMP_2)

        self.cycles: list[PumpCycleTime] = [PumpCycleTime(), PumpCycleTime()]
        self.mode = ControlMode.AUTO_BY_SENSORS

        # Scheduling
        self._last_sensors_ms = 0
        self._last_actuators_ms = 0
        self._last_display_ms = 0

        # Mode selection
        self._prev_mode_button = False
        self._prev_auto_mode = ControlMode.AUTO_BY_SENSORS

        # Manual control
        self._prev_pump_sel_button = False
        self.manual_selection = ManualPumpSelection.NONE

        # Control by sensors
        self._s_use_pump1 = True
        self._s_waiting_for_full = False
        self._s_last_cistern_full = True
        self._s_paused_by_well = False

        # Control by timer
        self._t_use_pump1 = True
        self._t_last_switch: datetime | None = None
        self._t_paused_by_well = False
        self._t_waiting_for_full = False
        self._t_last_cistern_full = True
        self._saved_cycles: list[PumpCycleTime] = [PumpCycleTime(), PumpCycleTime()]

        # Menus
        self.screen = Screen.MAIN
        self._last_screen = Screen.MAIN
        self._config_menu = ConfigMenu()
        self._control_type_screen = ControlTypeScreen()
        self._rtc_screen = RtcScreen()
        self._pump_screens = (PumpCycleScreen(0), PumpCycleScreen(1))

    def setup(self) -> None:
        """Start the display and clock and load the stored pump cycles."""
        log_line("Starting Water Pump Control System", True)
        self.lcd.init()
        self.rtc.begin()
        self.load_cycles()

    def step(self, now_ms: int) -> None:
        """Run whichever periodic tasks are due at ``now_ms``."""
        if now_ms - self._last_sensors_ms >= POLL_ALL_SENSORS_TIMEOUT:
            self.poll_sensors(now_ms)
            self._last_sensors_ms = now_ms

        if now_ms - self._last_actuators_ms >= CONTROL_PUMPS_TIMEOUT:
            self.select_mode()
            if self.mode is ControlMode.MANUAL:
                self.control_manual()
            elif self.mode is ControlMode.AUTO_BY_SENSORS:
                self.control_by_sensors()
            else:
                self.control_by_timer()
            self._last_actuators_ms = now_ms

        if now_ms - self._last_display_ms >= DISPLAY_UPDATE_TIMEOUT:
            self.show_menus()
            self._last_display_ms = now_ms

    def poll_sensors(self, now_ms: int) -> None:
        """Sample every input."""
        for sensor in self.sensors:
            sensor.poll(now_ms)

    def select_mode(self) -> ControlMode:
        """Toggle between manual and the last automatic mode on a mode-button release."""
        pressed = self.pb_mode.is_active()
        released = self._prev_mode_button and not pressed
        if self.mode is ControlMode.MANUAL:
            if released:
                self.mode = self._prev_auto_mode
        elif released:
            self._prev_auto_mode = self.mode
            self.mode = ControlMode.MANUAL
        self._prev_mode_button = pressed

        if self.mode is ControlMode.MANUAL:
            self.led_auto.deactivate()
            self.led_manual.activate()
        else:
            self.led_auto.activate()
            self.led_manual.deactivate()
        return self.mode

    def _pumps(self, pump1: bool, pump2: bool) -> None:
        self.pump1.write(pump1)
        self.pump2.write(pump2)

    def control_manual(self) -> None:
        """Run the pumps chosen with the pump-select button, if water allows."""
        pressed = self.pb_pump_sel.is_active()
        if self.well_sensor.is_active() == SENSOR_EMPTY_LEVEL:
            self._pumps(False, False)
            return
        if self.cistern_sensor.is_active() == SENSOR_FULL_LEVEL:
            self._pumps(False, False)
            return

        if self._prev_pump_sel_button and not pressed:
            following = (self.manual_selection + 1) % len(ManualPumpSelection)
            self.manual_selection = ManualPumpSelection(following)
        self._prev_pump_sel_button = pressed

        selection = self.manual_selection
        self._pumps(
            selection in (ManualPumpSelection.PUMP_1, ManualPumpSelection.BOTH),
            selection in (ManualPumpSelection.PUMP_2, ManualPumpSelection.BOTH),
        )

    def control_by_sensors(self) -> None:
        """Fill the cistern with one pump per cycle, alternating between cycles."""
        well = self.well_sensor.is_active()
        cistern = self.cistern_sensor.is_active()

        if cistern == SENSOR_EMPTY_LEVEL and self._s_last_cistern_full:
            self._s_waiting_for_full = True
            self._s_last_cistern_full = False
            self._s_paused_by_well = False
            self._pumps(self._s_use_pump1, not self._s_use_pump1)

        if self._s_waiting_for_full and cistern == SENSOR_FULL_LEVEL:
            self._pumps(False, False)
            self._s_waiting_for_full = False
            self._s_last_cistern_full = True
            self._s_paused_by_well = False
            self._s_use_pump1 = not self._s_use_pump1

        if self._s_waiting_for_full and well == SENSOR_EMPTY_LEVEL:
            self._pumps(False, False)
            self._s_paused_by_well = True
            return

        if self._s_waiting_for_full and self._s_paused_by_well and well == SENSOR_FULL_LEVEL:
            self._pumps(self._s_use_pump1, not self._s_use_pump1)
            self._s_paused_by_well = False

        if not self._s_waiting_for_full:
            self._pumps(False, False)

    def control_by_timer(self) -> None:
        """Fill the cistern, switching pumps whenever the active one's cycle ends."""
        well = self.well_sensor.is_active()
        cistern = self.cistern_sensor.is_active()
        now = self.rtc.now()

        both_set = all(cycle.is_set() for cycle in self.cycles)
        if both_set and self.cycles != self._saved_cycles:
            self.save_cycles()
            self._saved_cycles = list(self.cycles)

        if not both_set:
            self._pumps(False, False)
            self._t_waiting_for_full = False
            self._t_last_cistern_full = True
            self._t_paused_by_well = False
            return

        if cistern == SENSOR_EMPTY_LEVEL and self._t_last_cistern_full:
            self._t_waiting_for_full = True
            self._t_last_cistern_full = False
            self._t_paused_by_well = False
            self._t_last_switch = now
            self._pumps(self._t_use_pump1, not self._t_use_pump1)

        if self._t_waiting_for_full and cistern == SENSOR_FULL_LEVEL:
            self._pumps(False, False)
            self._t_waiting_for_full = False
            self._t_last_cistern_full = True
            self._t_paused_by_well = False
            return

        if self._t_waiting_for_full and well == SENSOR_EMPTY_LEVEL:
            self._pumps(False, False)
            self._t_paused_by_well = True
            return

        if self._t_waiting_for_full and self._t_paused_by_well and well == SENSOR_FULL_LEVEL:
            self._t_last_switch = now
            self._t_paused_by_well = False
            self._pumps(self._t_use_pump1, not self._t_use_pump1)

        if not self._t_waiting_for_full:
            self._pumps(False, False)
            return

        last_switch = now if self._t_last_switch is None else self._t_last_switch
        elapsed = int((now - last_switch).total_seconds())
        cycle_seconds = self.cycles[0 if self._t_use_pump1 else 1].total_seconds()
        # A clock set backwards counts as an expired cycle.
        if cycle_seconds > 0 and (elapsed < 0 or elapsed >= cycle_seconds):
            self._t_use_pump1 = not self._t_use_pump1
            self._t_last_switch = now
            self._pumps(self._t_use_pump1, not self._t_use_pump1)

    def _buttons(self) -> Buttons:
        return Buttons(
            ok=self.pb_ok.is_active(),
            esc=self.pb_esc.is_active(),
            up=self.pb_up.is_active(),
            down=self.pb_down.is_active(),
            left=self.pb_left.is_active(),
            right=self.pb_right.is_active(),
        )

    def show_menus(self) -> Screen:
        """Draw the current screen, handle its buttons and return the next screen."""
        buttons = self._buttons()
        if self.screen is not self._last_screen:
            self.lcd.clear()
            self._last_screen = self.screen

        screen = self.screen
        if screen is Screen.MAIN:
            self.screen = display_main(buttons, self.mode, self.lcd, self.rtc.formatted())
        elif screen is Screen.MAIN_CFGS:
            self.screen = self._config_menu.show(buttons, self.lcd)
        elif screen is Screen.CFG_CTRL_TYPE:
            self.screen, self.mode = self._control_type_screen.show(buttons, self.mode, self.lcd)
        elif screen is Screen.CFG_RTC:
            self.screen = self._rtc_screen.show(buttons, self.lcd, self.rtc)
        elif screen is Screen.CFG_PUMP1_CYCLE:
            self.screen = self._pump_screens[0].show(buttons, self.cycles, self.lcd)
        elif screen is Screen.CFG_PUMP2_CYCLE:
            self.screen = self._pump_screens[1].show(buttons, self.cycles, self.lcd)
        else:
            self.screen = Screen.MAIN
        return self.screen

    def save_cycles(self) -> None:
        """Store the pump cycle times in the EEPROM."""
        self.eeprom.write(START_ADDRESS, encode_cycles(self.cycles))
        log_line("Pump cycles saved to AT24C32", True)
        _log_cycles(self.cycles)

    def load_cycles(self) -> list[PumpCycleTime]:
        """Load the pump cycle times; an erased EEPROM is reset to zero cycles."""
        data = self.eeprom.read(START_ADDRESS, CYCLES_SIZE)
        if all(byte == _ERASED_BYTE for byte in data):
            self.cycles = [PumpCycleTime(), PumpCycleTime()]
            self.save_cycles()
            log_line("EEPROM uninitialized, set default pump cycles", True)
        else:
            self.cycles = decode_cycles(data)
        log_line("Pump cycles loaded from AT24C32", True)
        _log_cycles(self.cycles)
        return self.cycles