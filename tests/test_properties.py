"""
ctr_transport — Property Tests
==============================
Hypothesis-driven checks of the round-trip, tamper and counter properties.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ctr_transport import (
    AES128CTRTransportProtection, SessionKeys, PacketBuffer, build_frame,
    increment_counter, advance_counter, TagMismatch,
)

Protection = AES128CTRTransportProtection

key_material = st.builds(
    SessionKeys,
    inbound_encryption_key=st.binary(min_size=16, max_size=16),
    outbound_encryption_key=st.binary(min_size=16, max_size=16),
    inbound_mac_key=st.binary(min_size=32, max_size=32),
    outbound_mac_key=st.binary(min_size=32, max_size=32),
    initial_inbound_iv=st.binary(min_size=16, max_size=16),
    initial_outbound_iv=st.binary(min_size=16, max_size=16),
)
sequence_numbers = st.integers(min_value=0, max_value=2**32 - 1)


def exchange(keys, payload, seq, tamper=None):
    sender, receiver = Protection(keys), Protection(keys.mirrored())
    buf = PacketBuffer(build_frame(payload))
    sender.encrypt_packet(buf, seq)
    wire = bytearray(bytes(buf))
    if tamper is not None:
        index, bit = tamper
        wire[index % len(wire)] ^= 1 << bit
    inbound = PacketBuffer(bytes(wire))
    receiver.decrypt_first_block(inbound)
    return receiver.decrypt_and_verify_remaining_packet(inbound, seq)


# ── Round trip ───────────────────────────────────────────────────────────────
@settings(max_examples=50, deadline=None)
@given(keys=key_material, payload=st.binary(max_size=600), seq=sequence_numbers)
def test_roundtrip_recovers_payload(keys, payload, seq):
    assert exchange(keys, payload, seq) == payload


# ── Tamper ───────────────────────────────────────────────────────────────────
@settings(max_examples=50, deadline=None)
@given(keys=key_material, payload=st.binary(max_size=200), seq=sequence_numbers,
       index=st.integers(min_value=0), bit=st.integers(min_value=0, max_value=7))
def test_any_single_bit_flip_is_rejected(keys, payload, seq, index, bit):
    with pytest.raises(TagMismatch):
        exchange(keys, payload, seq, tamper=(index, bit))


# ── Counter ──────────────────────────────────────────────────────────────────
@given(start=st.binary(min_size=1, max_size=4), steps=st.integers(min_value=0, max_value=600))
def test_advance_is_repeated_increment(start, steps):
    stepped = bytearray(start)
    for _ in range(steps):
        increment_counter(stepped)
    jumped = bytearray(start)
    advance_counter(jumped, steps)
    assert stepped == jumped

@given(start=st.binary(min_size=1, max_size=16))
def test_increment_is_big_endian_plus_one(start):
    counter = bytearray(start)
    increment_counter(counter)
    modulus = 1 << (8 * len(start))
    assert int.from_bytes(counter, "big") == (int.from_bytes(start, "big") + 1) % modulus
    assert len(counter) == len(start)
