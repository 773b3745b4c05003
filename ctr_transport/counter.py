"""
CTR-mode block counters
=======================
A counter is a mutable big-endian unsigned integer stored as a bytearray,
one cipher block wide. Incrementing wraps silently at 2^(8*width).
"""


def increment_counter(counter: bytearray) -> None:
    """Add one to ``counter`` in place, carrying from the last byte."""
    for i in range(len(counter) - 1, -1, -1):
        counter[i] = (counter[i] + 1) & 0xFF
        if counter[i] != 0:
            break


def advance_counter(counter: bytearray, blocks: int) -> None:
    """Apply ``blocks`` increments, one per cipher block consumed."""
    if blocks < 0:
        raise ValueError("Cannot move a counter backwards.")
    # Same result as calling increment_counter() repeatedly, without the loop.
    width = len(counter)
    value = (int.from_bytes(counter, "big") + blocks) % (1 << (8 * width))
    counter[:] = value.to_bytes(width, "big")
