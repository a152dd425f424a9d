import io
import random
from dataclasses import FrozenInstanceError

import orjson
import pytest

from rsastream import keys
from rsastream.errors import KeyFormatError, KeyGenerationInvariantError
from rsastream.keys import PrivateKey, PublicKey, fingerprint, generate_keypair


@pytest.mark.parametrize("bits", [16, 24, 32, 64, 128, 256])
def test_keypair_round_trip(bits, rng):
    pub, priv = generate_keypair(bits, rng=rng)
    assert pub.n == priv.n
    assert 1 < pub.e
    for _ in range(10):
        m = rng.randrange(pub.n)
        assert priv.decrypt(pub.encrypt(m)) == m


def test_keypair_exponents_are_inverse(rng):
    pub, priv = generate_keypair(64, rng=rng)
    # e*d == 1 mod totient implies m**(e*d) == m for every m
    for m in (0, 1, 2, pub.n - 1):
        assert pow(m, pub.e * priv.d, pub.n) == m


def test_keypair_modulus_size(keypair_512):
    pub, _ = keypair_512
    assert pub.n.bit_length() in (511, 512)


def test_generate_keypair_rejects_small_sizes():
    with pytest.raises(ValueError):
        generate_keypair(8)


def test_generate_keypair_reproducible_with_seeded_source():
    assert generate_keypair(64, rng=random.Random(3)) == generate_keypair(64, rng=random.Random(3))


def test_missing_inverse_is_an_invariant_error(monkeypatch):
    monkeypatch.setattr(keys, "modinverse", lambda a, n: None)
    with pytest.raises(KeyGenerationInvariantError):
        generate_keypair(64, rng=random.Random(1))


def test_encrypt_is_deterministic(keypair_256):
    pub, _ = keypair_256
    assert pub.encrypt(424242) == pub.encrypt(424242)


def test_keys_are_immutable(keypair_256):
    pub, _ = keypair_256
    with pytest.raises(FrozenInstanceError):
        pub.n = 5


def test_key_io_round_trip(keypair_512):
    pub, priv = keypair_512

    buf = io.BytesIO()
    pub.write(buf)
    buf.seek(0)
    assert PublicKey.read(buf) == pub

    buf = io.BytesIO()
    priv.write(buf)
    buf.seek(0)
    assert PrivateKey.read(buf) == priv


def test_key_record_format(keypair_256):
    pub, priv = keypair_256

    buf = io.BytesIO()
    pub.write(buf)
    assert orjson.loads(buf.getvalue()) == {"n": str(pub.n), "e": str(pub.e)}

    buf = io.BytesIO()
    priv.write(buf)
    assert orjson.loads(buf.getvalue()) == {"n": str(priv.n), "d": str(priv.d)}


def test_from_json_accepts_small_integer_fields():
    assert PublicKey.from_json({"n": 3233, "e": 17}) == PublicKey(n=3233, e=17)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"{",
        b"[1, 2]",
        b'{"n": "3233"}',
        b'{"e": "17"}',
        b'{"n": "3233", "e": "17x"}',
        b'{"n": "-3233", "e": "17"}',
        b'{"n": -3233, "e": 17}',
        b'{"n": true, "e": "17"}',
        b'{"n": "1", "e": "17"}',
        b'{"n": 3233.5, "e": "17"}',
    ],
)
def test_malformed_public_key(data):
    with pytest.raises(KeyFormatError):
        PublicKey.read(io.BytesIO(data))


def test_malformed_private_key_missing_exponent():
    with pytest.raises(KeyFormatError):
        PrivateKey.read(io.BytesIO(b'{"n": "3233", "e": "17"}'))


def test_fingerprint(keypair_256):
    pub, priv = keypair_256
    assert fingerprint(pub) == fingerprint(PublicKey(n=pub.n, e=pub.e))
    assert fingerprint(pub) != fingerprint(priv)
    assert len(fingerprint(pub)) == 16
