"""
Big endian primitives for the binary results cache.

All integers are fixed width big endian; strings are written as a uint16
byte length followed by UTF-8 bytes.
"""

import struct

_INT = struct.Struct(">i")
_SHORT = struct.Struct(">H")
_DOUBLE = struct.Struct(">d")

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


class ResultsFormatError(OSError):
    """Raised when a results stream is truncated or malformed."""


def _read_exact(stream, size):
    data = stream.read(size)
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise ResultsFormatError(
            f"Truncated results stream: expected {size} bytes, got {got}"
        )
    return data


def read_int(stream) -> int:
    return _INT.unpack(_read_exact(stream, _INT.size))[0]


def write_int(stream, value: int):
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"Value out of int32 range: {value}")
    stream.write(_INT.pack(value))


def read_double(stream) -> float:
    return _DOUBLE.unpack(_read_exact(stream, _DOUBLE.size))[0]


def write_double(stream, value: float):
    stream.write(_DOUBLE.pack(value))


def read_utf(stream) -> str:
    length = _SHORT.unpack(_read_exact(stream, _SHORT.size))[0]
    try:
        return _read_exact(stream, length).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ResultsFormatError(f"Malformed string in results stream: {e}") from e


def write_utf(stream, value: str):
    data = value.encode("utf-8")
    if len(data) > 0xFFFF:
        raise ValueError(f"String too long for results stream: {len(data)} bytes")
    stream.write(_SHORT.pack(len(data)))
    stream.write(data)


def read_count(stream, what: str) -> int:
    """Read an int32 element count, rejecting negative values."""
    count = read_int(stream)
    if count < 0:
        raise ResultsFormatError(f"Negative {what} count in results stream: {count}")
    return count
