from datetime import datetime

import pytest

from pumpctl.clock import RealTimeClock
from pumpctl.display import LcdDisplay
from pumpctl.ui import (
    Buttons,
    ConfigMenu,
    ControlMode,
    ControlTypeScreen,
    PumpCycleScreen,
    PumpCycleTime,
    RtcScreen,
    Screen,
    display_main,
)

NONE = Buttons()
OK = Buttons(ok=True)
ESC = Buttons(esc=True)
UP = Buttons(up=True)
DOWN = Buttons(down=True)
LEFT = Buttons(left=True)
RIGHT = Buttons(right=True)


def make_lcd():
    lcd = LcdDisplay()
    lcd.init()
    return lcd


def fixed_clock(dt):
    rtc = RealTimeClock(time_source=lambda: dt)
    rtc.begin()
    return rtc


def test_pump_cycle_time_default_not_set():
    cycle = PumpCycleTime()
    assert not cycle.is_set()
    assert cycle.total_seconds() == 0


def test_pump_cycle_time_seconds_only():
    cycle = PumpCycleTime(0, 0, 45)
    assert cycle.is_set()
    assert cycle.total_seconds() == 45


def test_pump_cycle_time_one_minute():
    assert PumpCycleTime(0, 1, 0).total_seconds() == 60


def test_pump_cycle_time_rejects_out_of_byte_range():
    with pytest.raises(ValueError):
        PumpCycleTime(256, 0, 0)


def test_display_main_shows_mode_and_time():
    lcd = make_lcd()
    result = display_main(NONE, ControlMode.AUTO_BY_SENSORS, lcd, "06/05 07:08:09")
    assert result is Screen.MAIN
    assert lcd.lines()[0].startswith("Ctrl: Sensors")
    assert lcd.lines()[1].startswith("06/05 07:08:09")


@pytest.mark.parametrize(
    "mode,label",
    [(ControlMode.MANUAL, "Ctrl: Manual "), (ControlMode.AUTO_BY_TIMER, "Ctrl: Timers ")],
)
def test_display_main_labels(mode, label):
    lcd = make_lcd()
    display_main(NONE, mode, lcd, "x")
    assert lcd.lines()[0].startswith(label)


def test_display_main_ok_opens_settings():
    assert display_main(OK, ControlMode.MANUAL, make_lcd(), "x") is Screen.MAIN_CFGS


def test_config_menu_initial_draw():
    lcd = make_lcd()
    menu = ConfigMenu()
    assert menu.show(NONE, lcd) is Screen.MAIN_CFGS
    assert lcd.lines()[0].startswith(">Cfg Ctrl Type")
    assert lcd.lines()[1].startswith(" Cfg Hour")


def test_config_menu_scrolls_and_selects():
    lcd = make_lcd()
    menu = ConfigMenu()
    menu.show(DOWN, lcd)
    menu.show(DOWN, lcd)
    assert menu.top == 1
    assert lcd.lines()[1].startswith(">Cfg Pump1 Time")
    assert menu.show(OK, lcd) is Screen.CFG_PUMP1_CYCLE
    assert (menu.selected, menu.top) == (0, 0)


def test_config_menu_stops_at_ends():
    menu = ConfigMenu()
    lcd = make_lcd()
    menu.show(UP, lcd)
    assert menu.selected == 0
    for _ in range(10):
        menu.show(DOWN, lcd)
    assert menu.selected == len(ConfigMenu.OPTIONS) - 1
    assert menu.show(OK, lcd) is Screen.CFG_PUMP2_CYCLE


def test_config_menu_escape():
    menu = ConfigMenu()
    lcd = make_lcd()
    menu.show(DOWN, lcd)
    assert menu.show(ESC, lcd) is Screen.MAIN
    assert menu.selected == 0


def test_control_type_select_timer():
    lcd = make_lcd()
    screen = ControlTypeScreen()
    assert screen.show(DOWN, ControlMode.MANUAL, lcd) == (Screen.CFG_CTRL_TYPE, ControlMode.MANUAL)
    assert lcd.lines()[1].startswith(">Auto Timer")
    assert screen.show(OK, ControlMode.MANUAL, lcd) == (Screen.MAIN_CFGS, ControlMode.AUTO_BY_TIMER)
    assert screen.selected == 0


def test_control_type_select_sensors_and_escape():
    lcd = make_lcd()
    screen = ControlTypeScreen()
    assert screen.show(OK, ControlMode.AUTO_BY_TIMER, lcd)[1] is ControlMode.AUTO_BY_SENSORS
    assert lcd.lines()[0].startswith(">Auto Sensors")
    assert screen.show(ESC, ControlMode.MANUAL, lcd) == (Screen.MAIN, ControlMode.MANUAL)


def test_rtc_screen_loads_clock_and_draws():
    rtc = fixed_clock(datetime(2024, 5, 6, 7, 8, 9))
    lcd = make_lcd()
    screen = RtcScreen()
    assert screen.show(NONE, lcd, rtc) is Screen.CFG_RTC
    assert lcd.lines()[0] == "06/05/24-07:08:0"
    assert lcd.lines()[1].startswith("^")


def test_rtc_screen_edit_and_save(capsys):
    rtc = fixed_clock(datetime(2024, 5, 6, 7, 8, 9))
    lcd = make_lcd()
    screen = RtcScreen()
    screen.show(UP, lcd, rtc)
    screen.show(RIGHT, lcd, rtc)
    screen.show(RIGHT, lcd, rtc)
    assert lcd.lines()[1].index("^") == 6
    assert screen.show(OK, lcd, rtc) is Screen.MAIN_CFGS
    now = rtc.now()
    assert (now.day, now.month, now.year) == (7, 5, 2024)
    assert "RTC set to: " + rtc.formatted() in capsys.readouterr().out


def test_rtc_screen_wraps_and_escape_discards():
    rtc = fixed_clock(datetime(2024, 1, 1, 0, 0, 0))
    lcd = make_lcd()
    screen = RtcScreen()
    screen.show(DOWN, lcd, rtc)
    assert lcd.lines()[0].startswith("31/01")
    assert screen.show(ESC, lcd, rtc) is Screen.MAIN_CFGS
    assert rtc.now().day == 1
    screen.show(NONE, lcd, rtc)
    assert lcd.lines()[0].startswith("01/01")


def test_rtc_screen_clamps_day_to_month():
    rtc = fixed_clock(datetime(2024, 2, 1, 0, 0, 0))
    lcd = make_lcd()
    screen = RtcScreen()
    screen.show(DOWN, lcd, rtc)
    screen.show(OK, lcd, rtc)
    assert rtc.now().date() == datetime(2024, 2, 29).date()


def test_pump_cycle_screen_edit_and_save(capsys):
    cycles = [PumpCycleTime(), PumpCycleTime(0, 0, 5)]
    lcd = make_lcd()
    screen = PumpCycleScreen(0)
    assert screen.show(UP, cycles, lcd) is Screen.CFG_PUMP1_CYCLE
    assert lcd.lines()[0].startswith("01:00:00")
    assert screen.show(OK, cycles, lcd) is Screen.MAIN_CFGS
    assert cycles == [PumpCycleTime(1, 0, 0), PumpCycleTime(0, 0, 5)]
    assert "Pump 1 cycle set to: 01:00:00" in capsys.readouterr().out


def test_pump_cycle_screen_second_pump_wraps_and_cursor():
    cycles = [PumpCycleTime(), PumpCycleTime()]
    lcd = make_lcd()
    screen = PumpCycleScreen(1)
    screen.show(RIGHT, cycles, lcd)
    screen.show(RIGHT, cycles, lcd)
    screen.show(RIGHT, cycles, lcd)
    assert lcd.lines()[1].index("^") == 6
    assert screen.show(DOWN, cycles, lcd) is Screen.CFG_PUMP2_CYCLE
    assert lcd.lines()[0].startswith("00:00:59")
    screen.show(LEFT, cycles, lcd)
    screen.show(OK, cycles, lcd)
    assert cycles[1] == PumpCycleTime(0, 0, 59)
    assert cycles[0] == PumpCycleTime()


def test_pump_cycle_screen_escape_discards():
    cycles = [PumpCycleTime(2, 3, 4), PumpCycleTime()]
    lcd = make_lcd()
    screen = PumpCycleScreen(0)
    screen.show(UP, cycles, lcd)
    assert screen.show(ESC, cycles, lcd) is Screen.MAIN_CFGS
    assert cycles[0] == PumpCycleTime(2, 3, 4)
    screen.show(NONE, cycles, lcd)
    assert lcd.lines()[0].startswith("02:03:04")


def test_pump_cycle_screen_rejects_bad_index():
    with pytest.raises(ValueError):
        PumpCycleScreen(2)