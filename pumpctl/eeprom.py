"""An AT24C32-style serial EEPROM with 32-byte write pages."""

from __future__ import annotations

I2C_ADDRESS = 0x57
START_ADDRESS = 0x0000
PAGE_SIZE = 32
CAPACITY = 4096
ERASED = 0xFF

_MAX_WORD = 0xFFFF


def _check_range(address: int, length: int) -> None:
    if not 0 <= address <= _MAX_WORD:
        raise ValueError(f"EEPROM address out of range: {address}")
    if not 0 <= length <= _MAX_WORD:
        raise ValueError(f"EEPROM transfer length out of range: {length}")


class Eeprom:
    """Byte-addressed non-volatile memory; erased cells read 0xFF.

    Addresses beyond the capacity wrap around, as the device ignores the
    upper address bits.
    """

    def __init__(self, capacity: int = CAPACITY) -> None:
        if capacity <= 0 or capacity % PAGE_SIZE:
            raise ValueError("capacity must be a positive multiple of the page size")
        self._memory = bytearray([ERASED]) * capacity
        self.page_writes: list[tuple[int, bytes]] = []

    @property
    def capacity(self) -> int:
        return len(self._memory)

    def write(self, address: int, data: bytes) -> None:
        """Write ``data`` from ``address``, split so no write crosses a page."""
        data = bytes(data)
        _check_range(address, len(data))
        offset = 0
        while offset < len(data):
            chunk_len = min(len(data) - offset, PAGE_SIZE - address % PAGE_SIZE)
            chunk = data[offset:offset + chunk_len]
            for i, byte in enumerate(chunk):
                self._memory[(address + i) % self.capacity] = byte
            self.page_writes.append((address, chunk))
            address = (address + chunk_len) & _MAX_WORD
            offset += chunk_len

    def read(self, address: int, length: int) -> bytes:
        """Return ``length`` bytes starting at ``address``."""
        _check_range(address, length)
        size = self.capacity
        return bytes(self._memory[(address + i) % size] for i in range(length))