"""
NBT Adapter
===========

Thin layer over nbtlib: reads and writes root NBT documents from
in-memory buffers (GZIP-compressed or raw), and provides total
accessors that return None instead of raising when a field is
missing or has an unexpected tag type.
"""

import gzip
import io
import logging
import zlib
from typing import List as TypingList, Optional

import numpy as np
from nbtlib import (Byte, ByteArray, Compound, File, Int, IntArray, List, Long,
                    LongArray, Short, String)

from schemedit.formats.errors import NbtParseError


logger = logging.getLogger(__name__)

INTEGER_TAGS = (Byte, Short, Int, Long)


class StrictBytesIO(io.BytesIO):
    """
    BytesIO that raises EOFError on short reads.

    nbtlib reads fixed-size fields and treats a short read as zeros, so
    a truncated document would otherwise parse as a partial tree.
    """

    def read(self, size=-1):
        if size is None or size < 0:
            raise ValueError(f"Invalid NBT read length: {size}")
        chunk = super().read(size)
        if len(chunk) < size:
            raise EOFError(f"NBT data ended {size - len(chunk)} bytes early "
                           f"at offset {self.tell()}")
        return chunk


def gunzip(data: bytes) -> bytes:
    """
    Decompress a GZIP buffer.

    Raises:
        OSError, EOFError or zlib.error if the buffer is not valid GZIP
    """
    return gzip.decompress(data)


def gzip_bytes(data: bytes) -> bytes:
    """GZIP-compress a buffer with a fixed timestamp."""
    return gzip.compress(data, mtime=0)


def parse_root(data: bytes) -> File:
    """
    Parse an uncompressed big-endian NBT document.

    The root name is kept on the returned File as ``root_name``.

    Raises:
        EOFError: If the document is truncated
        TypeError: If the root tag is not a compound
    """
    return File.parse(StrictBytesIO(data), 'big')


def write_root(root: Compound, root_name: str = "") -> bytes:
    """Serialize a compound as an uncompressed big-endian NBT document."""
    fileobj = io.BytesIO()
    File(root, root_name=root_name).write(fileobj, 'big')
    return fileobj.getvalue()


def load_bytes(data: bytes) -> Compound:
    """
    Parse a schematic buffer into its root compound.

    GZIP decompression is attempted first; if the buffer is not GZIP,
    it is parsed as raw NBT.

    Raises:
        NbtParseError: If no NBT document can be read from the buffer
    """
    gzip_error = None
    try:
        payload = gunzip(data)
    except (OSError, EOFError, zlib.error) as e:
        gzip_error = e
        payload = data
        logger.debug("Buffer is not GZIP (%s), parsing as raw NBT", e)

    try:
        root = parse_root(payload)
    except (EOFError, TypeError, KeyError, ValueError) as e:
        if gzip_error is not None:
            raise NbtParseError(
                f"GZIP decompression failed ({gzip_error}) and raw NBT parse failed ({e})"
            ) from e
        raise NbtParseError(f"NBT parse failed after GZIP decompression: {e}") from e

    logger.debug("Parsed NBT root %r with keys %s", root.root_name, list(root.keys()))
    return root


def dump_bytes(root: Compound, root_name: str = "", compressed: bool = True) -> bytes:
    """Serialize a root compound, GZIP-compressed unless ``compressed`` is False."""
    data = write_root(root, root_name)
    return gzip_bytes(data) if compressed else data


def get_tag(tag, key: str):
    """Get a child tag of a compound, or None."""
    if not isinstance(tag, Compound):
        return None
    return tag.get(key)


def get_compound(tag, key: str) -> Optional[Compound]:
    value = get_tag(tag, key)
    return value if isinstance(value, Compound) else None


def get_int(tag, key: str) -> Optional[int]:
    """Get any integer-typed child (Byte, Short, Int or Long) as an int."""
    value = get_tag(tag, key)
    return int(value) if isinstance(value, INTEGER_TAGS) else None


def get_string(tag, key: str) -> Optional[str]:
    value = get_tag(tag, key)
    return str(value) if isinstance(value, String) else None


def get_list(tag, key: str) -> Optional[List]:
    value = get_tag(tag, key)
    return value if isinstance(value, List) else None


def get_byte_array(tag, key: str) -> Optional[bytes]:
    """Get a ByteArray child as unsigned bytes."""
    value = get_tag(tag, key)
    if not isinstance(value, ByteArray):
        return None
    return np.asarray(value, dtype=np.int8).view(np.uint8).tobytes()


def get_int_array(tag, key: str) -> Optional[TypingList[int]]:
    """
    Get an integer sequence child.

    Accepts IntArray, LongArray and lists of integer tags, which is how
    positions and palettes appear across the different layouts.
    """
    value = get_tag(tag, key)
    if isinstance(value, (IntArray, LongArray)):
        return [int(v) for v in value]
    if isinstance(value, List) and all(isinstance(v, INTEGER_TAGS) for v in value):
        return [int(v) for v in value]
    return None


def has_key(tag, key: str) -> bool:
    return isinstance(tag, Compound) and key in tag
