"""
Session key material
====================
Keys and IVs negotiated by the key exchange, one set per direction.
Produced by the transport engine, replaced wholesale on every rekey.
"""

import os
from dataclasses import dataclass, field
from typing import NamedTuple


class ExpectedKeySizes(NamedTuple):
    """Byte lengths a cipher suite requires for each piece of key material."""

    iv_size: int
    encryption_key_size: int
    mac_key_size: int


@dataclass(frozen=True)
class SessionKeys:
    """Keys for both directions of one negotiated session. Never logged."""

    inbound_encryption_key:  bytes = field(repr=False)
    outbound_encryption_key: bytes = field(repr=False)
    inbound_mac_key:         bytes = field(repr=False)
    outbound_mac_key:        bytes = field(repr=False)
    initial_inbound_iv:      bytes = field(repr=False)
    initial_outbound_iv:     bytes = field(repr=False)

    @classmethod
    def generate(cls, key_sizes: ExpectedKeySizes) -> "SessionKeys":
        """Random key material of the right shape. For tests and demos."""
        return cls(
            inbound_encryption_key=os.urandom(key_sizes.encryption_key_size),
            outbound_encryption_key=os.urandom(key_sizes.encryption_key_size),
            inbound_mac_key=os.urandom(key_sizes.mac_key_size),
            outbound_mac_key=os.urandom(key_sizes.mac_key_size),
            initial_inbound_iv=os.urandom(key_sizes.iv_size),
            initial_outbound_iv=os.urandom(key_sizes.iv_size),
        )

    def mirrored(self) -> "SessionKeys":
        """The same session as seen from the peer: inbound and outbound swapped."""
        return SessionKeys(
            inbound_encryption_key=self.outbound_encryption_key,
            outbound_encryption_key=self.inbound_encryption_key,
            inbound_mac_key=self.outbound_mac_key,
            outbound_mac_key=self.inbound_mac_key,
            initial_inbound_iv=self.initial_outbound_iv,
            initial_outbound_iv=self.initial_inbound_iv,
        )
