from rsastream.errors import (
    CiphertextFormatError,
    DecryptionError,
    KeyFormatError,
    KeyGenerationInvariantError,
    RSAStreamError,
)
from rsastream.keys import PrivateKey, PublicKey, fingerprint, generate_keypair
from rsastream.stream import decrypt_bytes, decrypt_stream, encrypt_bytes, encrypt_stream

__all__ = [
    "PublicKey",
    "PrivateKey",
    "generate_keypair",
    "fingerprint",
    "encrypt_stream",
    "decrypt_stream",
    "encrypt_bytes",
    "decrypt_bytes",
    "RSAStreamError",
    "KeyFormatError",
    "CiphertextFormatError",
    "DecryptionError",
    "KeyGenerationInvariantError",
]
