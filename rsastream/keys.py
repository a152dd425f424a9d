from __future__ import annotations

import hashlib
import logging
import random
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Optional, Tuple

import orjson

from rsastream.errors import KeyFormatError, KeyGenerationInvariantError
from rsastream.numtheory import default_rng, gcd, makeprime, modinverse, powermod

logger = logging.getLogger(__name__)

MIN_KEY_BITS = 16


# ===== Key record codec =====
# A key file is one JSON object whose fields are decimal strings:
#   {"n": "3233", "e": "17"}

def _encode_fields(**fields: int) -> Dict[str, str]:
    return {name: str(value) for name, value in fields.items()}


def _decode_field(record: Dict[str, Any], name: str) -> int:
    if name not in record:
        raise KeyFormatError(f"missing field {name!r}")
    value = record[name]
    if isinstance(value, bool):
        raise KeyFormatError(f"field {name!r} is not an integer")
    if isinstance(value, int):
        if value < 0:
            raise KeyFormatError(f"field {name!r} is negative")
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise KeyFormatError(f"field {name!r} is not a decimal integer string")


def _decode_record(record: Any, *names: str) -> Tuple[int, ...]:
    if not isinstance(record, dict):
        raise KeyFormatError("record is not a JSON object")
    values = tuple(_decode_field(record, name) for name in names)
    if values[0] < 2:
        raise KeyFormatError("modulus must be at least 2")
    return values


def _load(stream: BinaryIO) -> Any:
    data = stream.read()
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise KeyFormatError(str(e)) from e


def fingerprint(key: PublicKey | PrivateKey, length: int = 16) -> str:
    """Short hex digest of a key record, safe to put in log lines."""
    digest = hashlib.sha256(orjson.dumps(key.to_json(), option=orjson.OPT_SORT_KEYS))
    return digest.hexdigest()[:length]


# ===== RSA keys =====

@dataclass(frozen=True)
class PublicKey:
    n: int
    e: int

    def encrypt(self, m: int) -> int:
        return powermod(m, self.e, self.n)

    def to_json(self) -> Dict[str, str]:
        return _encode_fields(n=self.n, e=self.e)

    @classmethod
    def from_json(cls, record: Any) -> PublicKey:
        n, e = _decode_record(record, "n", "e")
        return cls(n=n, e=e)

    def write(self, stream: BinaryIO) -> None:
        stream.write(orjson.dumps(self.to_json()))

    @classmethod
    def read(cls, stream: BinaryIO) -> PublicKey:
        return cls.from_json(_load(stream))


@dataclass(frozen=True)
class PrivateKey:
    n: int
    d: int

    def decrypt(self, c: int) -> int:
        return powermod(c, self.d, self.n)

    def to_json(self) -> Dict[str, str]:
        return _encode_fields(n=self.n, d=self.d)

    @classmethod
    def from_json(cls, record: Any) -> PrivateKey:
        n, d = _decode_record(record, "n", "d")
        return cls(n=n, d=d)

    def write(self, stream: BinaryIO) -> None:
        stream.write(orjson.dumps(self.to_json()))

    @classmethod
    def read(cls, stream: BinaryIO) -> PrivateKey:
        return cls.from_json(_load(stream))


def generate_keypair(bits: int = 512, rng: Optional[random.Random] = None, iterations: Optional[int] = None) -> Tuple[PublicKey, PrivateKey]:
    """Build a key pair whose modulus has (about) `bits` bits.

    The primes get unequal shares of the bits, pbits drawn from
    [bits/4, 3*bits/4), so that n does not have two balanced factors.
    """
    if bits < MIN_KEY_BITS:
        raise ValueError(f"bits must be at least {MIN_KEY_BITS}")
    rng = rng or default_rng()

    pbits = rng.randrange(bits // 4, 3 * bits // 4)
    qbits = bits - pbits
    logger.debug("generating %d-bit key: pbits=%d qbits=%d", bits, pbits, qbits)

    p = makeprime(pbits, iterations, rng=rng)
    q = makeprime(qbits, iterations, rng=rng)
    while q == p:
        q = makeprime(qbits, iterations, rng=rng)

    n = p * q
    totient = (p - 1) * (q - 1)

    e = rng.getrandbits(bits)
    while not (1 < e < totient) or gcd(e, totient) != 1:
        e = rng.getrandbits(bits)

    d = modinverse(e, totient)
    if d is None:
        raise KeyGenerationInvariantError(e, totient)

    pub, priv = PublicKey(n=n, e=e), PrivateKey(n=n, d=d)
    logger.debug("generated key pair, modulus %d bits, fingerprint %s", n.bit_length(), fingerprint(pub))
    return pub, priv
