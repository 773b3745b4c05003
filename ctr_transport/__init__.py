"""
ctr_transport — SSH packet protection in counter mode
======================================================
aes128-ctr + hmac-sha2-256 for the SSH binary packet protocol
(RFC 4253 / RFC 4344 / RFC 6668).

Components:
    state    SessionCipherState   keys + one 128-bit CTR counter per direction
    codec    AES128CTRTransportProtection
                                  encrypt_packet / decrypt_first_block /
                                  decrypt_and_verify_remaining_packet
    buffer   PacketBuffer         bytearray with a reader cursor
    framing  build_frame          RFC 4253 packet assembly with padding

Key exchange, algorithm negotiation and socket I/O belong to the
surrounding transport engine.

License: Apache 2.0
"""

__version__ = "1.0.0"

from .buffer   import PacketBuffer
from .codec    import AES128CTRTransportProtection
from .counter  import increment_counter, advance_counter
from .errors   import (TransportProtectionError, InvalidKeySize, ArgumentError,
                       IntegrityError, TagMismatch, InsufficientPadding, ExcessPadding)
from .framing  import build_frame, minimum_padding
from .keys     import SessionKeys, ExpectedKeySizes
from .state    import SessionCipherState

__all__ = [
    "AES128CTRTransportProtection",
    "SessionCipherState",
    "SessionKeys",
    "ExpectedKeySizes",
    "PacketBuffer",
    "build_frame",
    "minimum_padding",
    "increment_counter",
    "advance_counter",
    "TransportProtectionError",
    "InvalidKeySize",
    "ArgumentError",
    "IntegrityError",
    "TagMismatch",
    "InsufficientPadding",
    "ExcessPadding",
]
