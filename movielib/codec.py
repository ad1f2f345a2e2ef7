#!/usr/bin/env python3
"""
Binary archive format for one genre's records

Layout (big-endian):

    header  magic b"MVRA" | version u8 | record count u32
    record  the ten Record fields in order, each as tag u8 + payload
            b'i'  int64
            b'd'  float64 (IEEE-754, exact)
            b's'  u32 byte length + UTF-8 text

Every field carries its own tag and length, so an archive can be read back
without any knowledge beyond RECORD_FIELDS.
"""

import os
import struct
import tempfile
from pathlib import Path
from typing import List, Sequence

from movielib.constants import RECORD_FIELDS
from movielib.record import Record

MAGIC = b'MVRA'
FORMAT_VERSION = 1

HEADER = struct.Struct('>4sBI')
TAG = struct.Struct('>B')
INT64 = struct.Struct('>q')
FLOAT64 = struct.Struct('>d')
LENGTH = struct.Struct('>I')

TAG_INT = ord('i')
TAG_FLOAT = ord('d')
TAG_STR = ord('s')

TYPE_TAGS = {int: TAG_INT, float: TAG_FLOAT, str: TAG_STR}


class ArchiveDecodeError(ValueError):
    """Raised when archive bytes are truncated, corrupt or not an archive"""


def encode_records(records: Sequence[Record]) -> bytes:
    """Encode records into archive bytes"""
    parts = [HEADER.pack(MAGIC, FORMAT_VERSION, len(records))]
    for record in records:
        for (name, field_type), value in zip(RECORD_FIELDS, record.values()):
            tag = TYPE_TAGS[field_type]
            parts.append(TAG.pack(tag))
            if tag == TAG_INT:
                parts.append(INT64.pack(value))
            elif tag == TAG_FLOAT:
                parts.append(FLOAT64.pack(value))
            else:
                data = value.encode('utf-8')
                parts.append(LENGTH.pack(len(data)))
                parts.append(data)
    return b''.join(parts)


class _Reader:
    """Cursor over archive bytes that refuses to read past the end"""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int, what: str) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise ArchiveDecodeError(
                f"Truncated archive: needed {size} byte(s) for {what} at offset {self.offset}, "
                f"{len(self.data) - self.offset} left"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: struct.Struct, what: str):
        return fmt.unpack(self.take(fmt.size, what))[0]


def decode_records(data: bytes) -> List[Record]:
    """
    Decode archive bytes back into records.

    Raises:
        ArchiveDecodeError: on bad magic/version, wrong field tags,
            invalid UTF-8, truncation or trailing bytes
    """
    reader = _Reader(data)
    magic, version, count = HEADER.unpack(reader.take(HEADER.size, 'header'))
    if magic != MAGIC:
        raise ArchiveDecodeError(f"Not a movie archive (magic {magic!r})")
    if version != FORMAT_VERSION:
        raise ArchiveDecodeError(f"Unsupported archive version {version}")

    records = []
    for index in range(count):
        values = []
        for name, field_type in RECORD_FIELDS:
            what = f"record {index} field '{name}'"
            tag = reader.unpack(TAG, what)
            expected = TYPE_TAGS[field_type]
            if tag != expected:
                raise ArchiveDecodeError(f"Bad tag {tag:#04x} for {what}, expected {expected:#04x}")
            if tag == TAG_INT:
                values.append(reader.unpack(INT64, what))
            elif tag == TAG_FLOAT:
                values.append(reader.unpack(FLOAT64, what))
            else:
                length = reader.unpack(LENGTH, what)
                raw = reader.take(length, what)
                try:
                    values.append(raw.decode('utf-8'))
                except UnicodeDecodeError as e:
                    raise ArchiveDecodeError(f"Invalid UTF-8 in {what}: {e}") from e
        records.append(Record(*values))

    if reader.offset != len(data):
        raise ArchiveDecodeError(f"{len(data) - reader.offset} trailing byte(s) after {count} record(s)")
    return records


def write_archive(path: Path, records: Sequence[Record]) -> None:
    """
    Write records to an archive file.

    Bytes go to a temporary file in the same directory first and are moved
    over the target, so the target is either the old archive or the new one.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = encode_records(records)

    fd, tmp_name = tempfile.mkstemp(prefix=path.name + '.', suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_archive(path: Path) -> List[Record]:
    """
    Read every record from an archive file.

    Raises:
        OSError: if the file cannot be read
        ArchiveDecodeError: if its contents are not a valid archive
    """
    with open(path, 'rb') as f:
        data = f.read()
    return decode_records(data)
