"""
ctr_transport — Live Demo: aes128-ctr + hmac-sha2-256
=====================================================
Run:  python examples/demo_packet_roundtrip.py

Two endpoints share one session. Packets flow both ways, the session is
rekeyed, and a tampered packet is rejected. Timing and sizes are printed
for each step.
"""

import sys, os, time, struct, logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ctr_transport import (AES128CTRTransportProtection, SessionKeys, PacketBuffer,
                           build_frame, TagMismatch)

LINE = "═" * 70
MSG  = b"SSH_MSG_CHANNEL_DATA: hello over aes128-ctr"

def header(step, name):
    print(f"\n{LINE}")
    print(f"  Step {step} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def send(sender, receiver, payload, seq):
    buf = PacketBuffer(build_frame(payload))
    sender.encrypt_packet(buf, seq)
    wire = bytes(buf)

    inbound = PacketBuffer(wire)
    receiver.decrypt_first_block(inbound)
    length = struct.unpack(">I", inbound.view(inbound.reader_index, 4))[0]
    return wire, length, receiver.decrypt_and_verify_remaining_packet(inbound, seq)

logging.basicConfig(level=logging.INFO, format=' %(name)s: %(message)s')

# ─────────────────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print("  ctr_transport — SSH packet protection demo")
print(LINE)

# ── STEP 1 ───────────────────────────────────────────────────────────────────
header(1, "Session setup")
keys   = SessionKeys.generate(AES128CTRTransportProtection.key_sizes)
client = AES128CTRTransportProtection(keys)
server = AES128CTRTransportProtection(keys.mirrored())
ok("Cipher", client.cipher_name)
ok("MAC",    client.mac_name)

# ── STEP 2 ───────────────────────────────────────────────────────────────────
header(2, "Client -> server, 5 packets")
t0 = time.perf_counter()
for seq in range(5):
    wire, length, payload = send(client, server, MSG, seq)
    assert payload == MSG
elapsed = time.perf_counter() - t0
ok("Wire size",  f"{len(wire)} bytes (length=4 + {length} + tag=32)")
ok("Round-trip", f"{elapsed*1000/5:.2f} ms per packet")
ok("Decrypted",  payload.decode())

# ── STEP 3 ───────────────────────────────────────────────────────────────────
header(3, "Server -> client reply")
before = client.outbound_counter
_, _, payload = send(server, client, b"ack", 0)
assert client.outbound_counter == before
ok("Decrypted", payload.decode())
ok("Client outbound counter untouched by inbound traffic")

# ── STEP 4 ───────────────────────────────────────────────────────────────────
header(4, "Rekey")
new_keys = SessionKeys.generate(AES128CTRTransportProtection.key_sizes)
client.update_keys(new_keys)
server.update_keys(new_keys.mirrored())
_, _, payload = send(client, server, b"after rekey", 5)
ok("Decrypted", payload.decode())

# ── STEP 5 ───────────────────────────────────────────────────────────────────
header(5, "Tamper detection")
buf = PacketBuffer(build_frame(MSG))
client.encrypt_packet(buf, 6)
wire = bytearray(bytes(buf))
wire[20] ^= 0x01
inbound = PacketBuffer(bytes(wire))
server.decrypt_first_block(inbound)
try:
    server.decrypt_and_verify_remaining_packet(inbound, 6)
    print("  ✗  Tamper NOT detected")
    sys.exit(1)
except TagMismatch:
    ok("Flipped bit rejected — connection must be torn down")

print(f"\n{LINE}")
print("  All steps passed")
print(f"{LINE}\n")
