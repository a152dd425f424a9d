from __future__ import annotations

import io
import logging
from typing import BinaryIO

from rsastream.errors import CiphertextFormatError, DecryptionError
from rsastream.framing import iter_values, write_value
from rsastream.keys import PrivateKey, PublicKey

logger = logging.getLogger(__name__)

# ===== Block layout =====
# A plaintext block is the payload followed by a 0xFF sentinel, read as a
# little-endian integer. The sentinel is the most significant byte, so the
# integer always has len(payload) + 1 significant bytes and zero bytes at
# either end of the payload survive the round trip.

SENTINEL = 0xFF


def blocksize(n: int) -> int:
    """Payload bytes per block; sentinel + payload stays strictly below n."""
    return (n.bit_length() - 1) // 8 - 1


def _checked_blocksize(n: int) -> int:
    size = blocksize(n)
    if size < 1:
        raise ValueError(f"RSA modulus too small for streaming ({n.bit_length()} bits)")
    return size


def _read_block(infile: BinaryIO, size: int) -> bytes:
    # raw streams and pipes may return short reads before EOF
    buf = bytearray()
    while len(buf) < size:
        chunk = infile.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return bytes(buf)


def encode_block(payload: bytes) -> int:
    return int.from_bytes(payload + bytes([SENTINEL]), "little")


def decode_block(m: int, index: int = 0) -> bytes:
    raw = m.to_bytes((m.bit_length() + 7) // 8, "little")
    if not raw or raw[-1] != SENTINEL:
        raise DecryptionError(index)
    return raw[:-1]


# ===== Streams =====

def encrypt_stream(pub: PublicKey, infile: BinaryIO, outfile: BinaryIO) -> int:
    size = _checked_blocksize(pub.n)

    count = 0
    while True:
        payload = _read_block(infile, size)
        if not payload:
            break
        write_value(outfile, pub.encrypt(encode_block(payload)))
        count += 1

    logger.debug("encrypted %d blocks of up to %d bytes", count, size)
    return count


def decrypt_stream(priv: PrivateKey, infile: BinaryIO, outfile: BinaryIO, strict: bool = False) -> int:
    """Decrypt ciphertext values until the input runs out.

    With strict=False an unparseable value ends the stream the same way EOF
    does (a warning is logged). With strict=True it raises CiphertextFormatError.
    """
    _checked_blocksize(priv.n)

    count = 0
    try:
        for c in iter_values(infile):
            outfile.write(decode_block(priv.decrypt(c), count))
            count += 1
    except CiphertextFormatError as e:
        if strict:
            raise
        logger.warning("stopping at block %d: %s", count, e)

    logger.debug("decrypted %d blocks", count)
    return count


def encrypt_bytes(data: bytes, pub: PublicKey) -> bytes:
    out = io.BytesIO()
    encrypt_stream(pub, io.BytesIO(data), out)
    return out.getvalue()


def decrypt_bytes(data: bytes, priv: PrivateKey, strict: bool = False) -> bytes:
    out = io.BytesIO()
    decrypt_stream(priv, io.BytesIO(data), out, strict=strict)
    return out.getvalue()
