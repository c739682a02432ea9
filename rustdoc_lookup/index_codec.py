"""Binary encoding of the (paths, texts) index.

Layout, all integers little-endian:

    b"RDIX" | u16 version | u32 count | count x (u32 len, utf-8 path)
                                      | count x (u32 len, utf-8 text)
"""

import struct
from collections.abc import Sequence
from pathlib import Path

from rustdoc_lookup.errors import BrokenInvariant, MalformedIndex

MAGIC = b"RDIX"
FORMAT_VERSION = 1
_HEADER = struct.Struct("<4sHI")
_LENGTH = struct.Struct("<I")


def serialize(paths: Sequence[str], texts: Sequence[str]) -> bytes:
    """Encode the two parallel sequences."""
    if len(paths) != len(texts):
        raise BrokenInvariant(
            f"index sequences differ in length: {len(paths)} paths, {len(texts)} texts"
        )
    chunks = [_HEADER.pack(MAGIC, FORMAT_VERSION, len(paths))]
    for seq in (paths, texts):
        for s in seq:
            data = s.encode("utf-8")
            chunks.append(_LENGTH.pack(len(data)))
            chunks.append(data)
    return b"".join(chunks)


def deserialize(blob: bytes) -> tuple[list[str], list[str]]:
    """Decode a blob produced by `serialize`."""
    if len(blob) < _HEADER.size:
        raise MalformedIndex("index is shorter than its header")
    magic, version, count = _HEADER.unpack_from(blob, 0)
    if magic != MAGIC:
        raise MalformedIndex(f"not an index file (magic {magic!r})")
    if version != FORMAT_VERSION:
        raise MalformedIndex(f"unsupported index version {version}")

    offset = _HEADER.size
    sequences: list[list[str]] = []
    for _ in range(2):
        seq = []
        for _ in range(count):
            if offset + _LENGTH.size > len(blob):
                raise MalformedIndex("index is truncated")
            (length,) = _LENGTH.unpack_from(blob, offset)
            offset += _LENGTH.size
            end = offset + length
            if end > len(blob):
                raise MalformedIndex("index is truncated")
            try:
                seq.append(blob[offset:end].decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise MalformedIndex(f"invalid utf-8 at offset {offset}") from exc
            offset = end
        sequences.append(seq)
    if offset != len(blob):
        raise MalformedIndex(f"{len(blob) - offset} trailing bytes after index")
    return sequences[0], sequences[1]


def write_index(path: Path, paths: Sequence[str], texts: Sequence[str]) -> int:
    """Write the index to `path`, replacing any existing file."""
    blob = serialize(paths, texts)
    path.write_bytes(blob)
    return len(blob)


def read_index(path: Path) -> tuple[list[str], list[str]]:
    """Read an index written by `write_index`."""
    return deserialize(path.read_bytes())
