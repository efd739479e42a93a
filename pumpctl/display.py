"""A character LCD with an in-memory screen."""

from __future__ import annotations

I2C_ADDRESS = 0x27
COLUMNS = 16
ROWS = 2


class LcdDisplay:
    """A text display of ``cols`` x ``rows`` characters.

    Characters written past the last column fall outside the visible area.
    """

    def __init__(self, address: int = I2C_ADDRESS, cols: int = COLUMNS, rows: int = ROWS) -> None:
        if cols <= 0 or rows <= 0:
            raise ValueError("display needs at least one row and one column")
        self.address = address
        self.cols = cols
        self.rows = rows
        self.backlight = False
        self.initialized = False
        self.cursor = (0, 0)
        self._cells = [[" "] * cols for _ in range(rows)]

    def init(self) -> None:
        """Start the display: backlight on, screen cleared, cursor home."""
        self.initialized = True
        self.backlight = True
        self.clear()
        self.set_cursor(0, 0)

    def clear(self) -> None:
        """Blank the screen and return the cursor home."""
        self._cells = [[" "] * self.cols for _ in range(self.rows)]
        self.cursor = (0, 0)

    def set_cursor(self, col: int, row: int) -> None:
        """Move the cursor; a row past the last one selects the last row."""
        if col < 0 or row < 0:
            raise ValueError("cursor position must not be negative")
        if row >= self.rows:
            row = self.rows - 1
        self.cursor = (col, row)

    def print_message(self, message: object, col: int = 0, row: int = 0) -> None:
        """Write ``message`` (text or a number) starting at ``col``, ``row``."""
        self.set_cursor(col, row)
        col, row = self.cursor
        for char in str(message):
            if col < self.cols:
                self._cells[row][col] = char
            col += 1
        self.cursor = (col, row)

    def lines(self) -> list[str]:
        """Return the visible text, one string per row."""
        return ["".join(row) for row in self._cells]