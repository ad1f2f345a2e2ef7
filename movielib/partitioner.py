#!/usr/bin/env python3
"""
Stage 1 - partition raw movie files into per-genre containers

Reads each input file line by line. Valid records are appended to
<genre>.csv in the output directory, invalid lines are appended to the
shared error log as:

    File: <path>, Line: <n>, Error: <message>

A bad line never stops the file or the run. Lines are decoded one at a time,
so bytes that are not UTF-8 only reject the line they are on. The manifest
returned (and written by partition_manifest) always lists one container per
known genre.
"""

import logging
from collections import defaultdict
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, Iterable, List, TextIO

from movielib.constants import CATEGORIES, CONTAINER_EXTENSION, ERROR_LOG
from movielib.manifest import read_manifest, resolve_entry, write_manifest
from movielib.record import Record
from movielib.validator import parse_bytes

logger = logging.getLogger(__name__)


def container_manifest() -> List[str]:
    """Container file names for every known genre, in genre order"""
    return [category + CONTAINER_EXTENSION for category in CATEGORIES]


def format_error_line(input_file: str, line_number: int, message: str) -> str:
    return f"File: {input_file}, Line: {line_number}, Error: {message}"


class Partitioner:
    """Fan validated records out to genre containers, log the rest"""

    def __init__(self, output_dir: Path, error_log_name: str = ERROR_LOG):
        self.output_dir = Path(output_dir)
        self.error_log_path = self.output_dir / error_log_name
        self.stats: Dict[str, int] = defaultdict(int)

    def clear_outputs(self) -> int:
        """
        Remove containers and the error log left by a previous run.

        Containers are opened in append mode, so a re-run only reproduces
        identical containers after this.

        Returns:
            Number of files removed
        """
        removed = 0
        for name in container_manifest():
            path = self.output_dir / name
            if path.exists():
                path.unlink()
                removed += 1
        if self.error_log_path.exists():
            self.error_log_path.unlink()
            removed += 1
        logger.info(f"Cleared {removed} file(s) from {self.output_dir}")
        return removed

    def partition(self, input_files: Iterable[Path]) -> List[str]:
        """
        Partition every input file into genre containers.

        Args:
            input_files: Paths of raw movie files; missing ones are skipped

        Returns:
            Manifest-2 entries (container names for all genres)
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        for input_file in input_files:
            input_path = Path(input_file)
            if not input_path.is_file():
                self.stats['skipped_missing'] += 1
                logger.warning(f"Input file listed in manifest does not exist: {input_path}")
                continue
            try:
                self._partition_file(input_path)
            except OSError as e:
                self.stats['errors'] += 1
                logger.error(f"Error reading the input file {input_path}: {e}")

        return container_manifest()

    def _partition_file(self, input_path: Path) -> None:
        """Partition one file; every handle opened here is closed before returning"""
        self.stats['files'] += 1
        valid = invalid = 0

        with ExitStack() as stack:
            source = stack.enter_context(open(input_path, 'rb'))
            containers: Dict[str, TextIO] = {}
            error_log = None

            for line_number, raw in enumerate(source, start=1):
                self.stats['lines'] += 1
                result = parse_bytes(raw)

                if result.skipped:
                    self.stats['blank'] += 1
                    continue

                if result.ok:
                    self._write_record(stack, containers, result.record)
                    valid += 1
                    continue

                if error_log is None:
                    error_log = stack.enter_context(open(self.error_log_path, 'a', encoding='utf-8'))
                error_log.write(format_error_line(str(input_path), line_number, result.failure.message) + '\n')
                error_log.flush()
                invalid += 1
                logger.debug(f"{input_path}:{line_number}: {result.failure.kind.value}: {result.failure.message}")

        self.stats['valid'] += valid
        self.stats['invalid'] += invalid
        logger.info(f"Partitioned {input_path.name}: {valid} valid, {invalid} invalid")

    def _write_record(self, stack: ExitStack, containers: Dict[str, TextIO], record: Record) -> None:
        name = record.container_name
        if name not in containers:
            containers[name] = stack.enter_context(
                open(self.output_dir / name, 'a', encoding='utf-8')
            )
        containers[name].write(record.to_csv() + '\n')

    def partition_manifest(self, manifest_path: Path, manifest2_path: Path) -> List[str]:
        """
        Run stage 1 from a manifest of input files.

        Entries are resolved against the manifest's directory. Manifest-2 is
        written only after every input has been processed.

        Raises:
            ManifestNotFoundError: if manifest_path does not exist (nothing is written)
        """
        entries = read_manifest(manifest_path)
        logger.info(f"Found {len(entries)} input file(s) in {manifest_path}")

        input_files = [resolve_entry(manifest_path, entry) for entry in entries]
        manifest2 = self.partition(input_files)
        write_manifest(manifest2_path, manifest2)
        return manifest2
