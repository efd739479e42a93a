# pumpctl

A controller that fills a cistern from a well with two alternating pumps. The
whole control loop is modelled in plain Python: push buttons, level sensors,
pumps, status LEDs, a 16x2 character display, a real-time clock and a small
EEPROM for settings. You can drive the logic and inspect it without any
hardware attached.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `pumpctl.io` has these parts:
  - `PinBank` holds the pin levels. A pin that was never written reads LOW.
  - `DigitalInput` and `DigitalOutput` read and drive a single pin.
  - `DigitalSensor` is a debounced input. It accepts an active reading only when more than 100 ms have passed since the last accepted one. An inactive reading clears it at once.
  - `DigitalActuator` adds `activate`, `deactivate`, `toggle` and `is_active`.
  - `log_line` prints a line to standard output.
- `pumpctl.eeprom.Eeprom` is byte-addressed memory. It holds 4096 bytes by default, and erased cells read `0xFF`. Writes are split so that no write crosses a 32-byte page; each page write is recorded in `page_writes`. Addresses beyond the capacity wrap around.
- `pumpctl.display.LcdDisplay` is an in-memory character screen. Use `init`, `clear`, `set_cursor` and `print_message` to change it, and `lines()` to read the visible text back.
- `pumpctl.clock` provides `RealTimeClock`. It keeps its own time on top of a time source, which is `datetime.now` by default. It works to the whole second, and `set_datetime` accepts years 2000 to 2099. It also provides `format_datetime`, which formats as `DD/MM HH:MM:SS`.
- `pumpctl.ui` has these parts:
  - `PumpCycleTime`, `ControlMode`, `ManualPumpSelection`, `Screen` and `Buttons`.
  - The menu screens: `display_main`, `ConfigMenu`, `ControlTypeScreen`, `RtcScreen` and `PumpCycleScreen`.
- `pumpctl.controller` provides `PumpController`, which ties everything together, and `encode_cycles` / `decode_cycles`.

## Control modes

- **Sensors** (`ControlMode.AUTO_BY_SENSORS`, the default): a fill starts when the cistern sensor reports empty. One pump runs until the cistern reports full, and the next fill uses the other pump. If the well runs dry during a fill, the pump pauses. It resumes when the well recovers.
- **Timers** (`ControlMode.AUTO_BY_TIMER`): during a fill the pumps take turns. Each runs for its configured `PumpCycleTime`, measured with the real-time clock. If either cycle time is all zero, both pumps stay off. If the clock is set backwards, the running cycle counts as expired. In this mode, cycle times that have changed are saved to the EEPROM.
- **Manual** (`ControlMode.MANUAL`): each release of the pump-select button steps through none, pump 1, pump 2 and both. Both pumps stay off, and the button is ignored, while the well is empty or the cistern is full.

Releasing the mode button switches between manual and the automatic mode last in use. The LEDs on pins 14 (auto) and 15 (manual) show which side is active. You choose the automatic mode on the "control type" screen.

## Pins

| Pin | Role |
|-----|------|
| 2–7 | Up, Down, Left, Right, OK, Esc buttons |
| 8 | Mode button |
| 9 | Pump-select button |
| 10 | Well sensor (HIGH = empty) |
| 11 | Cistern sensor (HIGH = empty, LOW = full) |
| 14, 15 | Auto and manual LEDs |
| 16, 17 | Pump 1 and pump 2 |

## Using it

Give `PumpController` a `PinBank` and call `setup()` once. `setup()` starts the display and clock and loads the pump cycle times. After that, call `step(now_ms)` with a steadily increasing millisecond count:

```python
from pumpctl.controller import PumpController
from pumpctl.io import PinBank

pins = PinBank()
controller = PumpController(pins)
controller.setup()

now = 0
for _ in range(50):
    now += 50
    controller.step(now)

print(controller.lcd.lines())
print(pins.read(16), pins.read(17))  # pump 1, pump 2
```

`step` runs three jobs, each when its interval has passed:

- it polls the sensors every 50 ms;
- it selects the mode and drives the pumps every 200 ms;
- it redraws and handles the menus every 400 ms.

To simulate inputs, set pin levels with `PinBank.write`. To read outputs, use `PinBank.read`. `PumpController` also accepts your own `LcdDisplay`, `RealTimeClock` and `Eeprom`. A clock built on a fixed or stepped time source makes timer mode easy to test.

The pump cycle times are stored at EEPROM address 0 as six bytes: hour, minute and second for each pump. If those bytes are all `0xFF`, `load_cycles()` writes zero defaults back. `encode_cycles` and `decode_cycles` convert between cycle times and bytes.

Status messages go to standard output through `log_line`. These include start-up, loaded and saved cycles, and clock changes.

## Menus

The main screen shows the control mode on the first line and `DD/MM HH:MM:SS` on the second. **OK** opens the settings menu, a two-line scrolling list with these entries:

- **Cfg Ctrl Type**: choose Auto Sensors or Auto Timer. **OK** applies the choice and **Esc** returns to the main screen.
- **Cfg Hour**: edit the date and time as `DD/MM/YY-HH:MM:SS`. **OK** sets the clock; a day past the end of the month becomes the month's last day.
- **Cfg Pump1 Time** / **Cfg Pump2 Time**: edit that pump's cycle as `HH:MM:SS`, with hours from 0 to 23.

On the edit screens:

- **Left** and **Right** move between fields, and a `^` marks the current one.
- **Up** and **Down** change the value, wrapping around at its limits.
- **Esc** discards the changes.

From the settings menu, **Esc** returns to the main screen.

## What it does not do

The package does not talk to real GPIO pins, I2C devices or a serial port. All hardware is modelled in memory. It has no command-line program and no main loop of its own: your code must call `PumpController.step` repeatedly.