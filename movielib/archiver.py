#!/usr/bin/env python3
"""
Stage 2 - convert genre containers into binary archives

Every container line is validated again, since containers are plain text and
may have been edited by hand. Lines that fail are skipped. A genre with at
least one valid record gets an archive (<genre><archive_extension>) and an
entry in manifest-3; a genre with none gets neither.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List

from movielib.codec import write_archive
from movielib.constants import ARCHIVE_EXTENSION, MAX_RECORDS_PER_CATEGORY
from movielib.manifest import read_manifest, write_manifest
from movielib.record import Record
from movielib.validator import parse_record

logger = logging.getLogger(__name__)


class Archiver:
    """Load, re-validate and archive genre containers"""

    def __init__(self, max_records: int = MAX_RECORDS_PER_CATEGORY,
                 archive_extension: str = ARCHIVE_EXTENSION):
        if max_records < 1:
            raise ValueError(f"max_records must be >= 1, got {max_records}")
        self.max_records = max_records
        self.archive_extension = archive_extension
        self.stats: Dict[str, int] = defaultdict(int)

    def load_container(self, container_path: Path) -> List[Record]:
        """
        Load up to max_records valid records from one container.

        Raises:
            OSError: if the container cannot be opened
        """
        records: List[Record] = []
        with open(container_path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                if len(records) >= self.max_records:
                    logger.warning(
                        f"{container_path}: reached limit of {self.max_records} records, "
                        f"ignoring line {line_number} onwards"
                    )
                    self.stats['over_limit'] += 1
                    break

                result = parse_record(line)
                if result.ok:
                    records.append(result.record)
                elif not result.skipped:
                    self.stats['invalid'] += 1
                    logger.debug(f"{container_path}:{line_number}: skipped ({result.failure.message})")
        return records

    def archive_name(self, container_entry: str) -> str:
        """Manifest entry of the archive for a container entry: drama.csv -> drama.bin"""
        return str(Path(container_entry).with_suffix(self.archive_extension))

    def archive(self, containers: Iterable[str], base_dir: Path) -> List[str]:
        """
        Archive every listed container.

        Args:
            containers: Manifest-2 entries
            base_dir: Directory the entries are relative to

        Returns:
            Manifest-3 entries, one per archive written
        """
        base_dir = Path(base_dir)
        archives: List[str] = []

        for entry in containers:
            container_path = base_dir / entry
            if not container_path.is_file():
                self.stats['skipped_missing'] += 1
                logger.info(f"No container for {entry}, skipping")
                continue

            try:
                records = self.load_container(container_path)
            except (OSError, UnicodeDecodeError) as e:
                self.stats['errors'] += 1
                logger.error(f"Error reading the file {container_path}: {e}")
                continue

            if not records:
                self.stats['empty'] += 1
                logger.info(f"No valid records in {entry}, no archive written")
                continue

            archive_entry = self.archive_name(entry)
            try:
                write_archive(base_dir / archive_entry, records)
            except OSError as e:
                self.stats['errors'] += 1
                logger.error(f"Error writing archive {archive_entry}: {e}")
                continue

            self.stats['archives'] += 1
            self.stats['records'] += len(records)
            archives.append(archive_entry)
            logger.info(f"Archived {len(records)} record(s) from {entry} -> {archive_entry}")

        return archives

    def archive_manifest(self, manifest2_path: Path, manifest3_path: Path) -> List[str]:
        """
        Run stage 2 from manifest-2 and write manifest-3.

        Raises:
            ManifestNotFoundError: if manifest2_path does not exist (nothing is written)
        """
        entries = read_manifest(manifest2_path)
        archives = self.archive(entries, Path(manifest2_path).parent)
        write_manifest(manifest3_path, archives)
        return archives
