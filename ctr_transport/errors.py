"""
Transport protection errors
============================
Every failure raised by the packet cipher is fatal to the connection.
The caller is expected to tear the session down, never to retry.

    TransportProtectionError
      ├── InvalidKeySize        key / IV / MAC key has the wrong length
      ├── ArgumentError         buffer too small or misaligned, bad seq no.
      └── IntegrityError        authentication of an inbound packet failed
            ├── TagMismatch
            ├── InsufficientPadding
            └── ExcessPadding

Errors from the underlying cryptography primitives are not wrapped.
"""


class TransportProtectionError(Exception):
    """Base class for all packet-protection failures."""


class InvalidKeySize(TransportProtectionError, ValueError):
    """Session key material does not match the suite's fixed sizes."""


class ArgumentError(TransportProtectionError, ValueError):
    """The caller handed over a buffer or value the codec cannot work with."""


class IntegrityError(TransportProtectionError):
    """An inbound packet failed verification. Do not process its payload."""


class TagMismatch(IntegrityError):
    """The MAC read from the wire differs from the one computed locally."""


class InsufficientPadding(IntegrityError):
    """Padding length byte is below the protocol minimum of 4."""


class ExcessPadding(IntegrityError):
    """Padding length byte runs past the start of the payload."""
