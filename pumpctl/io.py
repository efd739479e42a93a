"""Digital pins, debounced sensors, on/off actuators and line logging."""

from __future__ import annotations

DEBOUNCE_DELAY_MS = 100

_MAX_PIN = 255


def _check_pin(pin: int) -> int:
    if not 0 <= pin <= _MAX_PIN:
        raise ValueError(f"pin number out of range: {pin}")
    return pin


class PinBank:
    """A bank of digital pin levels; a pin never written reads LOW."""

    def __init__(self) -> None:
        self._levels: dict[int, bool] = {}

    def read(self, pin: int) -> bool:
        """Return the level of ``pin`` (True for HIGH)."""
        return self._levels.get(_check_pin(pin), False)

    def write(self, pin: int, state: bool) -> None:
        """Drive ``pin`` HIGH when ``state`` is true, LOW otherwise."""
        self._levels[_check_pin(pin)] = bool(state)


class DigitalInput:
    """A pin used as a digital input."""

    def __init__(self, pins: PinBank, pin: int) -> None:
        self.pins = pins
        self.pin = _check_pin(pin)

    def read(self) -> bool:
        """Return True when the input is HIGH."""
        return self.pins.read(self.pin)


class DigitalOutput:
    """A pin used as a digital output."""

    def __init__(self, pins: PinBank, pin: int) -> None:
        self.pins = pins
        self.pin = _check_pin(pin)

    def write(self, state: bool) -> None:
        """Drive the output HIGH or LOW."""
        self.pins.write(self.pin, state)


class DigitalSensor(DigitalInput):
    """A digital input whose active state is debounced."""

    def __init__(self, pins: PinBank, pin: int) -> None:
        super().__init__(pins, pin)
        self._state = False
        self._last_active_ms = 0

    def poll(self, now_ms: int) -> None:
        """Sample the input at time ``now_ms`` and update the debounced state.

        An active reading is accepted only when more than the debounce delay
        has passed since the last accepted one; an inactive reading clears the
        state at once.
        """
        if self.read():
            if now_ms - self._last_active_ms > DEBOUNCE_DELAY_MS:
                self._last_active_ms = now_ms
                self._state = True
        else:
            self._state = False

    def is_active(self) -> bool:
        """Return the debounced state."""
        return self._state


class DigitalActuator(DigitalOutput):
    """An output that switches a device on or off."""

    def activate(self) -> None:
        self.write(True)

    def deactivate(self) -> None:
        self.write(False)

    def toggle(self) -> None:
        self.write(not self.is_active())

    def is_active(self) -> bool:
        """Return True when the output pin is HIGH."""
        return self.pins.read(self.pin)


def log_line(data: str, enabled: bool) -> None:
    """Print ``data`` followed by a newline when ``enabled`` is true."""
    if enabled:
        print(data)