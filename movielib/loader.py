#!/usr/bin/env python3
"""
Stage 3 (load) - rebuild the genre -> records mapping from archives

The genre of each archive is taken from its file name (case-insensitive
prefix match against the known genres). Missing, unrecognized or corrupt
archives are reported and skipped; their genre simply has no records.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from movielib.codec import ArchiveDecodeError, read_archive
from movielib.constants import CATEGORIES
from movielib.manifest import read_manifest
from movielib.record import Record

logger = logging.getLogger(__name__)

Library = Dict[str, List[Record]]


def empty_library() -> Library:
    """One empty record list per known genre, in genre order"""
    return {category: [] for category in CATEGORIES}


def category_for_archive(archive_name: str) -> Optional[str]:
    """Genre whose name prefixes the archive file name, or None"""
    name = Path(archive_name).name.lower()
    for category in CATEGORIES:
        if name.startswith(category):
            return category
    return None


def load_archives(archives: Iterable[str], base_dir: Path) -> Library:
    """
    Deserialize every listed archive into the genre mapping.

    Args:
        archives: Manifest-3 entries
        base_dir: Directory the entries are relative to

    Returns:
        Mapping with every known genre as a key; genres without a readable
        archive map to an empty list
    """
    library = empty_library()
    base_dir = Path(base_dir)

    for entry in archives:
        category = category_for_archive(entry)
        if category is None:
            logger.warning(f"No matching genre found for file: {entry}")
            continue

        path = base_dir / entry
        try:
            records = read_archive(path)
        except FileNotFoundError:
            logger.warning(f"Could not find archive for genre {category}: {path}")
            continue
        except (OSError, ArchiveDecodeError) as e:
            logger.error(f"Error deserializing archive for genre {category} ({path}): {e}")
            continue

        if library[category]:
            logger.warning(f"Genre {category} listed more than once, {path} replaces earlier archive")
        library[category] = records
        logger.info(f"Loaded {len(records)} {category} record(s) from {path.name}")

    return library


def load_manifest(manifest3_path: Path) -> Library:
    """
    Load every archive listed in manifest-3.

    Raises:
        ManifestNotFoundError: if manifest3_path does not exist
    """
    entries = read_manifest(manifest3_path)
    return load_archives(entries, Path(manifest3_path).parent)
