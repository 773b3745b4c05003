"""
Session cipher state
====================
Current keys plus one CTR counter per direction.

The counters are owned bytearrays. Only the packet codec mutates them,
one block at a time. Calls for the same direction must be serialized by
the caller, and a rekey may only happen between packets. No locking is
done here.
"""

import logging

from .errors import InvalidKeySize
from .keys import ExpectedKeySizes, SessionKeys

logger = logging.getLogger(__name__)


class SessionCipherState:
    """Keys and per-direction counters for one CTR session."""

    def __init__(self, keys: SessionKeys, key_sizes: ExpectedKeySizes,
                 block_size: int):
        self._key_sizes  = key_sizes
        self._block_size = block_size
        self._validate(keys)
        self._install(keys)

    # -- validation ------------------------------------------------------------

    def _validate(self, keys: SessionKeys) -> None:
        enc_size = self._key_sizes.encryption_key_size
        mac_size = self._key_sizes.mac_key_size
        checks = (
            ("inbound encryption key",  keys.inbound_encryption_key,  enc_size),
            ("outbound encryption key", keys.outbound_encryption_key, enc_size),
            ("inbound MAC key",         keys.inbound_mac_key,         mac_size),
            ("outbound MAC key",        keys.outbound_mac_key,        mac_size),
            ("initial inbound IV",      keys.initial_inbound_iv,      self._block_size),
            ("initial outbound IV",     keys.initial_outbound_iv,     self._block_size),
        )
        for label, value, expected in checks:
            if len(value) != expected:
                logger.warning(f"Rejected {label}: {len(value) * 8} bits, "
                               f"expected {expected * 8}")
                raise InvalidKeySize(
                    f"{label} must be {expected} bytes ({expected * 8} bits), "
                    f"got {len(value)}."
                )

    def _install(self, keys: SessionKeys) -> None:
        self._keys             = keys
        self._inbound_counter  = bytearray(keys.initial_inbound_iv)
        self._outbound_counter = bytearray(keys.initial_outbound_iv)

    # -- rekey -----------------------------------------------------------------

    def rekey(self, new_keys: SessionKeys) -> None:
        """
        Replace every key and reset both counters to the new IVs.
        Validation runs first; on failure the current state is untouched.
        """
        self._validate(new_keys)
        self._install(new_keys)
        logger.debug("Session keys replaced, counters reset to new IVs")

    # -- accessors for the codec -----------------------------------------------

    @property
    def keys(self) -> SessionKeys:
        return self._keys

    @property
    def inbound_counter(self) -> bytearray:
        return self._inbound_counter

    @property
    def outbound_counter(self) -> bytearray:
        return self._outbound_counter

    @property
    def block_size(self) -> int:
        return self._block_size

    def __repr__(self):
        return (f"SessionCipherState(block={self._block_size}B  "
                f"enc_key={self._key_sizes.encryption_key_size}B  "
                f"mac_key={self._key_sizes.mac_key_size}B)")
