class RSAStreamError(Exception):
    """Base class for every error raised by rsastream."""


class KeyFormatError(RSAStreamError, ValueError):
    def __init__(self, message: str):
        super().__init__(f"Malformed key record: {message}")


class CiphertextFormatError(RSAStreamError, ValueError):
    def __init__(self, message: str):
        super().__init__(f"Malformed ciphertext: {message}")


class DecryptionError(RSAStreamError, ValueError):
    def __init__(self, block: int):
        super().__init__(f"Block {block} did not decrypt to a valid plaintext block (wrong key?)")


class KeyGenerationInvariantError(RSAStreamError, RuntimeError):
    def __init__(self, e: int, totient: int):
        super().__init__(f"No inverse for e={e} modulo totient={totient} although gcd is 1")
