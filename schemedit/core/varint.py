"""
VarInt - Variable-Length Integer Codec
======================================

LEB128-style unsigned integers as used by the Sponge schematic
``BlockData`` stream: each byte carries 7 data bits, the high bit
flags that another byte follows.

Reads never raise on short input. A stream that ends before a
terminating byte simply has no more values.
"""

from typing import Iterable, List, Optional, Tuple


def read_varint(data: bytes, offset: int = 0) -> Optional[Tuple[int, int]]:
    """
    Read one varint starting at ``offset``.

    Args:
        data: Byte buffer to read from
        offset: Position of the first byte of the value

    Returns:
        Tuple of (value, next_offset), or None if the buffer ends
        before a byte with the high bit clear is seen
    """
    value = 0
    shift = 0
    position = offset
    size = len(data)

    while position < size:
        byte = data[position]
        position += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, position
        shift += 7

    return None


def write_varint(sink: bytearray, value: int) -> None:
    """
    Append ``value`` to ``sink`` as a varint.

    Args:
        sink: Buffer to extend
        value: Non-negative integer to encode
    """
    if value < 0:
        raise ValueError(f"VarInt value must be non-negative: {value}")

    while value & ~0x7F:
        sink.append((value & 0x7F) | 0x80)
        value >>= 7
    sink.append(value & 0x7F)


def encode_varints(values: Iterable[int]) -> bytes:
    """Encode a sequence of integers as one continuous varint stream."""
    sink = bytearray()
    for value in values:
        write_varint(sink, int(value))
    return bytes(sink)


def decode_varints(data: bytes, count: int) -> List[int]:
    """
    Decode up to ``count`` consecutive varints from the start of ``data``.

    Stops early, returning what was read so far, when the stream is
    exhausted or its last value is cut off.
    """
    values = []
    cursor = 0
    while len(values) < count:
        result = read_varint(data, cursor)
        if result is None:
            break
        value, cursor = result
        values.append(value)
    return values
