"""
Packet buffer
=============
A bytearray with a reader cursor. Bytes before ``reader_index`` have been
consumed; everything from the cursor to the end is readable. Writes always
append at the end.

Index-based accessors (``view``, ``set_bytes``) never move the cursor.
"""

import struct
from typing import Optional

from .errors import ArgumentError


class PacketBuffer:
    """Mutable byte buffer with a read cursor, as handed over by the transport."""

    def __init__(self, data: bytes = b""):
        self._data         = bytearray(data)
        self._reader_index = 0

    # -- cursor ----------------------------------------------------------------

    @property
    def reader_index(self) -> int:
        return self._reader_index

    @property
    def readable_bytes(self) -> int:
        return len(self._data) - self._reader_index

    def readable_view(self) -> memoryview:
        return memoryview(self._data)[self._reader_index:]

    # -- index-based access ----------------------------------------------------

    def view(self, index: int, length: int) -> Optional[bytes]:
        """Copy of ``length`` bytes at ``index``, or None if out of range."""
        if index < 0 or length < 0 or index + length > len(self._data):
            return None
        return bytes(self._data[index:index + length])

    def set_bytes(self, index: int, data: bytes) -> None:
        """Overwrite bytes in place. Grows the buffer if ``data`` runs past the end."""
        if index < 0 or index > len(self._data):
            raise ArgumentError(f"Index {index} outside buffer of {len(self._data)} bytes.")
        self._data[index:index + len(data)] = data

    # -- reads (advance the cursor) --------------------------------------------

    def read_bytes(self, length: int) -> Optional[bytes]:
        chunk = self.view(self._reader_index, length)
        if chunk is not None:
            self._reader_index += length
        return chunk

    def read_slice(self, length: int) -> Optional["PacketBuffer"]:
        chunk = self.read_bytes(length)
        return PacketBuffer(chunk) if chunk is not None else None

    def read_uint32(self) -> int:
        chunk = self.read_bytes(4)
        if chunk is None:
            raise ArgumentError("Need 4 readable bytes for a uint32.")
        return struct.unpack(">I", chunk)[0]

    # -- writes ----------------------------------------------------------------

    def write_bytes(self, data: bytes) -> int:
        self._data.extend(data)
        return len(data)

    def write_uint32(self, value: int) -> int:
        return self.write_bytes(struct.pack(">I", value))

    # -- dunder ----------------------------------------------------------------

    def __bytes__(self):
        return bytes(self._data[self._reader_index:])

    def __len__(self):
        return self.readable_bytes

    def __eq__(self, other):
        if isinstance(other, PacketBuffer):
            return bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray)):
            return bytes(self) == bytes(other)
        return NotImplemented

    def __repr__(self):
        return f"PacketBuffer(readable={self.readable_bytes}B  reader_index={self._reader_index})"
