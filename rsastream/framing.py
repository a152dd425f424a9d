"""Ciphertext framing.

Each ciphertext block travels as one line: the JSON string of the decimal
digits of the block integer, then a newline.

    "8734125909871236"\n
    "1029384756102938"\n

There is no header, count or trailer. A reader takes exactly one line per
value and learns the stream is over when a read returns no bytes. The last
value may omit its newline; the closing quote already ends it, while a value
cut off before that quote is malformed.
"""
from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

import orjson

from rsastream.errors import CiphertextFormatError

DELIMITER = b"\n"


def write_value(stream: BinaryIO, value: int) -> None:
    if value < 0:
        raise ValueError("ciphertext values are non-negative")
    stream.write(orjson.dumps(str(value)) + DELIMITER)


def read_value(stream: BinaryIO) -> Optional[int]:
    line = stream.readline()
    if not line:
        return None
    try:
        digits = orjson.loads(line)
    except orjson.JSONDecodeError as e:
        raise CiphertextFormatError(f"value is not JSON: {e}") from e

    if not (isinstance(digits, str) and digits.isascii() and digits.isdigit()):
        raise CiphertextFormatError("value is not a decimal integer string")
    return int(digits)


def iter_values(stream: BinaryIO) -> Iterator[int]:
    while True:
        value = read_value(stream)
        if value is None:
            return
        yield value
