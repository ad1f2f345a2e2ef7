#!/usr/bin/env python3
"""
Test suite for movielib/codec.py - binary archive format
"""

import pytest
import struct
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from movielib.codec import (
    ArchiveDecodeError, HEADER, MAGIC, decode_records, encode_records,
    read_archive, write_archive,
)
from movielib.record import Record


def make_records(count):
    return [
        Record(1990 + i % 10, f'Title {i}, the sequel', 30 + i % 271, 'Drama', 'PG-13',
               (i % 101) / 10.0, f'Director {i}', 'Ann', 'Bo', 'Cé')
        for i in range(count)
    ]


class TestEncodeDecode:
    """Archive encoding"""

    @pytest.mark.parametrize("count", [0, 1, 1000])
    def test_records_come_back_equal(self, count):
        """Decoding gives back the encoded records"""
        records = make_records(count)
        assert decode_records(encode_records(records)) == records

    def test_score_is_exact(self):
        """Scores keep every bit of the float"""
        record = Record(1995, 'T', 100, 'Drama', 'R', 0.1 + 0.2, 'D', 'A', 'B', 'C')
        assert decode_records(encode_records([record]))[0].score == 0.1 + 0.2

    def test_header(self):
        """Header carries magic, version and count"""
        data = encode_records(make_records(3))
        magic, version, count = HEADER.unpack(data[:HEADER.size])
        assert magic == MAGIC
        assert version == 1
        assert count == 3

    def test_empty_archive_is_header_only(self):
        """No records is just the header"""
        assert len(encode_records([])) == HEADER.size


class TestDecodeErrors:
    """Corrupt and truncated archives"""

    def test_truncated(self):
        """Every truncation point is rejected"""
        data = encode_records(make_records(2))
        for cut in (1, HEADER.size, len(data) // 2, len(data) - 1):
            with pytest.raises(ArchiveDecodeError):
                decode_records(data[:cut])

    def test_bad_magic(self):
        """Wrong magic is rejected"""
        data = encode_records(make_records(1))
        with pytest.raises(ArchiveDecodeError, match='Not a movie archive'):
            decode_records(b'XXXX' + data[4:])

    def test_unsupported_version(self):
        """Another format version is rejected"""
        data = encode_records(make_records(1))
        with pytest.raises(ArchiveDecodeError, match='version'):
            decode_records(data[:4] + bytes([2]) + data[5:])

    def test_trailing_bytes(self):
        """Bytes after the last record are rejected"""
        data = encode_records(make_records(1))
        with pytest.raises(ArchiveDecodeError, match='trailing'):
            decode_records(data + b'\x00')

    def test_count_larger_than_data(self):
        """A record count past the data is rejected"""
        data = encode_records(make_records(1))
        forged = HEADER.pack(MAGIC, 1, 2) + data[HEADER.size:]
        with pytest.raises(ArchiveDecodeError, match='Truncated'):
            decode_records(forged)

    def test_wrong_tag(self):
        """A field tag of the wrong type is rejected"""
        data = bytearray(encode_records(make_records(1)))
        data[HEADER.size] = ord('s')
        with pytest.raises(ArchiveDecodeError, match='Bad tag'):
            decode_records(bytes(data))

    def test_invalid_utf8(self):
        """Text that is not UTF-8 is rejected"""
        record = Record(1995, 'T', 100, 'Drama', 'R', 5.0, 'D', 'A', 'B', 'C')
        data = encode_records([record])
        # title is the second field: tag(1) + int64(8) + tag(1) + length(4), then 'T'
        offset = HEADER.size + 1 + 8 + 1 + struct.calcsize('>I')
        assert data[offset:offset + 1] == b'T'
        corrupt = data[:offset] + b'\xff' + data[offset + 1:]
        with pytest.raises(ArchiveDecodeError, match='UTF-8'):
            decode_records(corrupt)

    def test_decode_error_is_value_error(self):
        """ArchiveDecodeError is a ValueError"""
        with pytest.raises(ValueError):
            decode_records(b'')


class TestArchiveFiles:
    """Archive files on disk"""

    def test_write_then_read(self, tmp_path):
        """A written archive reads back the same records"""
        records = make_records(5)
        path = tmp_path / 'drama.bin'
        write_archive(path, records)
        assert read_archive(path) == records

    def test_no_temp_files_left(self, tmp_path):
        """Only the archive remains after writing"""
        write_archive(tmp_path / 'drama.bin', make_records(2))
        assert [p.name for p in tmp_path.iterdir()] == ['drama.bin']

    def test_overwrite(self, tmp_path):
        """Writing again replaces the archive"""
        path = tmp_path / 'drama.bin'
        write_archive(path, make_records(5))
        write_archive(path, make_records(1))
        assert len(read_archive(path)) == 1

    def test_read_missing(self, tmp_path):
        """Reading a missing archive raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            read_archive(tmp_path / 'nope.bin')
