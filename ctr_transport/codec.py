"""
AES-128-CTR + HMAC-SHA-256 packet protection
=============================================
The "aes128-ctr" cipher (RFC 4344) paired with the "hmac-sha2-256" MAC
(RFC 6668) for the SSH binary packet protocol (RFC 4253 section 6).

Wire format of one packet:

    AES-CTR( uint32 length || byte padding_length || payload || padding )
    || HMAC-SHA-256( uint32 seq || uint32 length || padding_length || payload || padding )

The length field is encrypted, so an inbound packet is opened in two steps:

    1. decrypt_first_block()                  peek: exposes the length field
    2. decrypt_and_verify_remaining_packet()  once the whole packet is buffered

Each direction keeps its own 128-bit big-endian counter, advanced by one
for every 16-byte block that goes through the cipher. The transport engine
owns the sequence numbers and serializes calls per direction.

Dependencies: cryptography >= 41.0
"""

import logging
import struct

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .buffer import PacketBuffer
from .counter import advance_counter, increment_counter
from .errors import ArgumentError, ExcessPadding, InsufficientPadding, TagMismatch
from .framing import MIN_PADDING
from .keys import ExpectedKeySizes, SessionKeys
from .state import SessionCipherState

logger = logging.getLogger(__name__)

_UINT32_LIMIT = 1 << 32


class AES128CTRTransportProtection:
    """Encrypt-and-MAC packet protection for one SSH session."""

    cipher_name       = "aes128-ctr"
    mac_name          = "hmac-sha2-256"
    key_sizes         = ExpectedKeySizes(iv_size=16, encryption_key_size=16, mac_key_size=32)
    cipher_block_size = 16
    mac_bytes         = 32
    length_encrypted  = True

    def __init__(self, initial_keys: SessionKeys):
        """Raises InvalidKeySize if any key or IV has the wrong length."""
        self._state = SessionCipherState(initial_keys, self.key_sizes,
                                         self.cipher_block_size)
        logger.info(f"Transport protection ready: {self.cipher_name} + {self.mac_name}")

    def update_keys(self, new_keys: SessionKeys) -> None:
        """Rekey. Only call between packets; nothing changes if validation fails."""
        self._state.rekey(new_keys)
        logger.info(f"Rekeyed {self.cipher_name} session")

    @property
    def inbound_counter(self) -> bytes:
        return bytes(self._state.inbound_counter)

    @property
    def outbound_counter(self) -> bytes:
        return bytes(self._state.outbound_counter)

    # -- primitives ------------------------------------------------------------

    @staticmethod
    def _ctr_encrypt(key: bytes, counter: bytearray, data: bytes) -> bytes:
        encryptor = Cipher(algorithms.AES(key), modes.CTR(bytes(counter))).encryptor()
        return encryptor.update(data) + encryptor.finalize()

    @staticmethod
    def _ctr_decrypt(key: bytes, counter: bytearray, data: bytes) -> bytes:
        decryptor = Cipher(algorithms.AES(key), modes.CTR(bytes(counter))).decryptor()
        return decryptor.update(data) + decryptor.finalize()

    @staticmethod
    def _hmac(key: bytes, *parts: bytes) -> hmac.HMAC:
        h = hmac.HMAC(key, hashes.SHA256())
        for part in parts:
            h.update(part)
        return h

    @staticmethod
    def _check_sequence_number(sequence_number: int) -> None:
        if not isinstance(sequence_number, int) or not 0 <= sequence_number < _UINT32_LIMIT:
            raise ArgumentError(f"Sequence number must be a uint32, got {sequence_number!r}.")

    # -- inbound ---------------------------------------------------------------

    def decrypt_first_block(self, source: PacketBuffer) -> None:
        """
        Decrypt the block at the reader index in place and advance the inbound
        counter. The reader index does not move, so the caller can now read
        the plaintext length field and wait for the rest of the packet.
        """
        index = source.reader_index
        ciphertext = source.view(index, self.cipher_block_size)
        if ciphertext is None:
            raise ArgumentError("insufficient source buffer for one cipher block")

        plaintext = self._ctr_decrypt(self._state.keys.inbound_encryption_key,
                                      self._state.inbound_counter, ciphertext)
        increment_counter(self._state.inbound_counter)

        source.set_bytes(index, plaintext)

    def decrypt_and_verify_remaining_packet(self, source: PacketBuffer,
                                            sequence_number: int) -> bytes:
        """
        Decrypt the rest of the packet, verify its MAC and strip the padding.
        ``source`` must hold the already-decrypted first block, the remaining
        ciphertext and the tag, and nothing else. Returns the payload.
        """
        self._check_sequence_number(sequence_number)
        block = self.cipher_block_size

        remaining = source.readable_bytes - block - self.mac_bytes
        if remaining < 0:
            raise ArgumentError(
                f"corrupted source buffer: {source.readable_bytes} bytes cannot hold "
                f"a {block}-byte block and a {self.mac_bytes}-byte tag"
            )
        if remaining % block:
            raise ArgumentError(
                f"remaining ciphertext of {remaining} bytes is not a multiple of {block}"
            )

        first_block = source.read_slice(block)
        length = first_block.read_uint32()
        plaintext = bytearray(bytes(first_block))

        if remaining:
            ciphertext = source.read_bytes(remaining)
            plaintext += self._ctr_decrypt(self._state.keys.inbound_encryption_key,
                                           self._state.inbound_counter, ciphertext)
            advance_counter(self._state.inbound_counter, remaining // block)

        tag = source.read_bytes(self.mac_bytes)

        mac = self._hmac(self._state.keys.inbound_mac_key,
                         struct.pack(">II", sequence_number, length), bytes(plaintext))
        try:
            mac.verify(tag)
        except InvalidSignature as exc:
            logger.warning(f"MAC verification failed for inbound packet seq={sequence_number}")
            raise TagMismatch(f"MAC mismatch on packet {sequence_number}") from exc

        payload = _remove_padding(plaintext)
        logger.debug(f"Opened packet seq={sequence_number}: "
                     f"{block + remaining}B ciphertext -> {len(payload)}B payload")
        return payload

    # -- outbound --------------------------------------------------------------

    def encrypt_packet(self, destination: PacketBuffer, sequence_number: int) -> None:
        """
        Encrypt the framed packet between the reader index and the end of
        ``destination`` in place, then append the MAC. The packet must be a
        whole number of cipher blocks. On any failure the buffer and the
        outbound counter are left exactly as they were.
        """
        self._check_sequence_number(sequence_number)
        block = self.cipher_block_size

        packet_index = destination.reader_index
        packet_size  = destination.readable_bytes
        if packet_size == 0 or packet_size % block:
            raise ArgumentError(
                f"packet of {packet_size} bytes is not a non-empty multiple of {block}"
            )

        plaintext  = destination.view(packet_index, packet_size)
        ciphertext = self._ctr_encrypt(self._state.keys.outbound_encryption_key,
                                       self._state.outbound_counter, plaintext)

        # RFC 4253 section 6.4
        tag = self._hmac(self._state.keys.outbound_mac_key,
                         struct.pack(">I", sequence_number), plaintext).finalize()

        advance_counter(self._state.outbound_counter, packet_size // block)
        destination.set_bytes(packet_index, ciphertext)
        tag_length = destination.write_bytes(tag)
        if tag_length != self.mac_bytes:
            raise AssertionError("Unexpected short tag")

        logger.debug(f"Sealed packet seq={sequence_number}: "
                     f"{packet_size}B -> {packet_size + tag_length}B on the wire")

    def __repr__(self):
        return f"AES128CTRTransportProtection({self.cipher_name}, {self.mac_name})"


def _remove_padding(packet: bytearray) -> bytes:
    """
    ``packet`` starts at the padding length byte. Returns the payload between
    that byte and the padding.
    """
    if not packet or packet[0] < MIN_PADDING:
        raise InsufficientPadding("padding length below the minimum of 4")

    padding_length = packet[0]
    content_start  = 1
    content_end    = len(packet) - padding_length
    if content_end < content_start:
        raise ExcessPadding(f"padding length {padding_length} exceeds the packet")

    return bytes(packet[content_start:content_end])
