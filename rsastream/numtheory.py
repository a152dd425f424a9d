from __future__ import annotations

import random
import secrets
from typing import Optional

from rsastream.config import RSA_MR_ROUNDS

# Randomness comes from a random.Random: seeded in tests, SystemRandom
# everywhere else.
_SYSTEM_RNG = secrets.SystemRandom()


def default_rng() -> random.Random:
    return _SYSTEM_RNG


# ===== Euclid =====

def gcd(a: int, b: int) -> int:
    while b != 0:
        a, b = b, a % b
    return a


def modinverse(a: int, n: int) -> Optional[int]:
    """Inverse of a modulo n via extended Euclid, or None when gcd(a, n) > 1.

    Only the coefficient of a is tracked; the result is normalised into [0, n).
    """
    r, r_next = n, a
    t, t_next = 0, 1

    while r_next != 0:
        q = r // r_next
        r, r_next = r_next, r - q * r_next
        t, t_next = t_next, t - q * t_next

    if r > 1:
        return None
    if t < 0:
        t += n
    return t % n if n else t


# ===== Exponentiation =====

def powermod(base: int, exponent: int, modulus: int) -> int:
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus <= 0:
        raise ValueError("modulus must be positive")

    result = 1 % modulus
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result


# ===== Primes =====

def isprime(n: int, iterations: Optional[int] = None, rng: Optional[random.Random] = None) -> bool:
    """Miller-Rabin. A composite survives with probability at most 4**-iterations."""
    if iterations is None:
        iterations = RSA_MR_ROUNDS
    rng = rng or default_rng()

    if n < 2:
        return False
    if n < 4:
        return True
    if n & 1 == 0:
        return False

    # n - 1 = r * 2**s with r odd
    r, s = n - 1, 0
    while r & 1 == 0:
        r >>= 1
        s += 1

    for _ in range(iterations):
        a = rng.randrange(2, n - 1)
        y = powermod(a, r, n)
        if y == 1 or y == n - 1:
            continue

        for _ in range(s - 1):
            y = (y * y) % n
            if y == 1:
                return False
            if y == n - 1:
                break

        if y != n - 1:
            return False

    return True


def makeprime(bits: int, iterations: Optional[int] = None, rng: Optional[random.Random] = None) -> int:
    """Random prime of exactly `bits` bits. Every candidate is an independent draw."""
    if bits < 2:
        raise ValueError("bits too small")
    rng = rng or default_rng()

    top = 1 << (bits - 1)
    while True:
        candidate = rng.getrandbits(bits) | top
        if isprime(candidate, iterations, rng=rng):
            return candidate
