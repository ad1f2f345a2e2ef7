#!/usr/bin/env python3
"""
Manifest files: plain lists of file paths, one per line, no header

Each pipeline stage reads the manifest produced by the previous one and writes
its own. Entries are resolved relative to the directory holding the manifest.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)


class ManifestNotFoundError(FileNotFoundError):
    """Raised when a stage's input manifest does not exist"""


def read_manifest(manifest_path: Path) -> List[str]:
    """
    Read manifest entries, skipping blank lines.

    Raises:
        ManifestNotFoundError: if the manifest file does not exist
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"Manifest file does not exist: {manifest_path}")

    with open(manifest_path, 'r', encoding='utf-8') as f:
        entries = [line.strip() for line in f if line.strip()]

    logger.debug(f"Read {len(entries)} entries from {manifest_path}")
    return entries


def write_manifest(manifest_path: Path, entries: Iterable[str]) -> None:
    """Write entries one per line, replacing any existing manifest"""
    manifest_path = Path(manifest_path)
    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    entries = list(entries)
    with open(manifest_path, 'w', encoding='utf-8') as f:
        for entry in entries:
            f.write(f"{entry}\n")
    logger.info(f"Wrote {len(entries)} entries to {manifest_path}")


def resolve_entry(manifest_path: Path, entry: Union[str, Path]) -> Path:
    """Resolve an entry against the manifest's own directory (absolute entries pass through)"""
    return Path(manifest_path).parent / entry
