#!/usr/bin/env python3
"""
Test suite for movielib/report.py - per-genre audit and error log summary
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from movielib.codec import write_archive
from movielib.constants import CATEGORIES
from movielib.record import Record
from movielib.report import build_category_report, load_error_log, summarize_errors


def make_record(category):
    return Record(1995, 'T', 100, category, 'R', 5.0, 'D', 'A', 'B', 'C')


class TestCategoryReport:
    """Per-genre audit table"""

    def test_one_row_per_genre(self, tmp_path):
        """One row per genre, zeros when nothing exists"""
        report = build_category_report(tmp_path)
        assert list(report['category']) == list(CATEGORIES)
        assert report['container_records'].sum() == 0
        assert not report['has_archive'].any()

    def test_counts(self, tmp_path):
        """Container lines and archived records are counted"""
        (tmp_path / 'drama.csv').write_text('a\nb\n\nc\n', encoding='utf-8')
        write_archive(tmp_path / 'drama.bin', [make_record('Drama')] * 2)
        report = build_category_report(tmp_path).set_index('category')
        assert report.loc['drama', 'container_records'] == 3
        assert report.loc['drama', 'archived_records'] == 2
        assert bool(report.loc['drama', 'has_archive'])

    def test_corrupt_archive_not_counted(self, tmp_path):
        """An unreadable archive counts as absent"""
        (tmp_path / 'horror.bin').write_bytes(b'junk')
        report = build_category_report(tmp_path).set_index('category')
        assert not bool(report.loc['horror', 'has_archive'])
        assert report.loc['horror', 'archived_records'] == 0


class TestErrorLog:
    """Error log parsing"""

    def test_missing_log_is_empty(self, tmp_path):
        """No error log gives an empty frame"""
        errors = load_error_log(tmp_path / 'bad-movie_records.txt')
        assert errors.empty
        assert list(errors.columns) == ['file', 'line', 'error']
        assert summarize_errors(errors).empty

    def test_parse_and_summarize(self, tmp_path):
        """Error lines are parsed and counted per file"""
        log = tmp_path / 'bad-movie_records.txt'
        log.write_text(
            'File: a.csv, Line: 2, Error: Missing title\n'
            'File: b.csv, Line: 7, Error: Invalid rating: x\n'
            'not an error line\n'
            'File: b.csv, Line: 9, Error: Invalid year: 2005. The year must be between 1990 and 1999.\n',
            encoding='utf-8',
        )
        errors = load_error_log(log)
        assert len(errors) == 3
        assert errors.iloc[0].to_dict() == {'file': 'a.csv', 'line': 2, 'error': 'Missing title'}

        summary = summarize_errors(errors)
        assert list(summary['file']) == ['b.csv', 'a.csv']
        assert list(summary['errors']) == [2, 1]
