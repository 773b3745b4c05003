"""
Binary packet framing (RFC 4253 section 6)
===========================================
Builds the plaintext packet the transport engine hands to ``encrypt_packet``:

    uint32   packet_length      = 1 + len(payload) + len(padding)
    byte     padding_length     4..255
    byte[n]  payload
    byte[p]  random padding

The whole packet, length field included, must be a multiple of
max(8, cipher block size).
"""

import os
import struct

MIN_PADDING = 4
MAX_PADDING = 255


def minimum_padding(payload_length: int, block_size: int = 16) -> int:
    """Smallest padding length >= 4 that aligns the packet to the block size."""
    align    = max(8, block_size)
    unpadded = 4 + 1 + payload_length
    padding  = (-unpadded) % align
    if padding < MIN_PADDING:
        padding += align
    return padding


def build_frame(payload: bytes, block_size: int = 16, padding: bytes = None) -> bytes:
    """
    Assemble a plaintext packet around ``payload``.
    Random padding of the minimum aligned length is used unless ``padding``
    is given, in which case it is used verbatim (alignment is not checked).
    """
    if padding is None:
        padding = os.urandom(minimum_padding(len(payload), block_size))
    if not MIN_PADDING <= len(padding) <= MAX_PADDING:
        raise ValueError(f"Padding must be {MIN_PADDING}..{MAX_PADDING} bytes, got {len(padding)}.")
    packet_length = 1 + len(payload) + len(padding)
    return struct.pack(">IB", packet_length, len(padding)) + payload + padding
