#!/usr/bin/env python3
"""
Pipeline audit report

Read-only. Counts what each stage left on disk per genre (container lines,
archived records) and summarizes the stage 1 error log.
"""

import logging
import re
from pathlib import Path

import pandas as pd

from movielib.codec import ArchiveDecodeError, read_archive
from movielib.constants import ARCHIVE_EXTENSION, CATEGORIES, CONTAINER_EXTENSION

logger = logging.getLogger(__name__)

ERROR_LINE_RE = re.compile(r'^File: (.*), Line: (\d+), Error: (.*)$')

REPORT_COLUMNS = ['category', 'container_records', 'archived_records', 'has_archive']
ERROR_COLUMNS = ['file', 'line', 'error']


def _count_lines(path: Path) -> int:
    with open(path, 'r', encoding='utf-8') as f:
        return sum(1 for line in f if line.strip())


def build_category_report(output_dir: Path, archive_extension: str = ARCHIVE_EXTENSION) -> pd.DataFrame:
    """One row per genre: non-blank container lines and records in its archive"""
    output_dir = Path(output_dir)
    rows = []
    for category in CATEGORIES:
        container = output_dir / (category + CONTAINER_EXTENSION)
        archive = output_dir / (category + archive_extension)

        container_records = _count_lines(container) if container.is_file() else 0

        archived_records = 0
        has_archive = archive.is_file()
        if has_archive:
            try:
                archived_records = len(read_archive(archive))
            except (OSError, ArchiveDecodeError) as e:
                logger.error(f"Unreadable archive {archive}: {e}")
                has_archive = False

        rows.append({
            'category': category,
            'container_records': container_records,
            'archived_records': archived_records,
            'has_archive': has_archive,
        })
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def load_error_log(error_log_path: Path) -> pd.DataFrame:
    """Parse the error log into file/line/error columns (empty frame if there is no log)"""
    error_log_path = Path(error_log_path)
    rows = []
    if error_log_path.is_file():
        with open(error_log_path, 'r', encoding='utf-8') as f:
            for raw in f:
                match = ERROR_LINE_RE.match(raw.rstrip('\r\n'))
                if not match:
                    if raw.strip():
                        logger.warning(f"Unrecognized error log line: {raw.strip()}")
                    continue
                rows.append({
                    'file': match.group(1),
                    'line': int(match.group(2)),
                    'error': match.group(3),
                })
    else:
        logger.info(f"No error log at {error_log_path}")
    return pd.DataFrame(rows, columns=ERROR_COLUMNS)


def summarize_errors(errors: pd.DataFrame) -> pd.DataFrame:
    """Rejected line count per input file, most errors first"""
    if errors.empty:
        return pd.DataFrame(columns=['file', 'errors'])
    counts = errors.groupby('file').size().reset_index(name='errors')
    return counts.sort_values(['errors', 'file'], ascending=[False, True]).reset_index(drop=True)
