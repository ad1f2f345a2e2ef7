#!/usr/bin/env python3
"""
archive.py - Stage 2: turn genre containers into binary archives

Reads the part 2 manifest, re-validates every container line, writes one
archive per genre that still has valid records and writes the part 3 manifest.

Usage:
    python archive.py
    python archive.py --output-dir output --max-records 500
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict

from movielib.archiver import Archiver
from movielib.config import load_config, stage_paths
from movielib.manifest import ManifestNotFoundError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_archive(config: Dict[str, Any]) -> int:
    """
    Run stage 2 with the given config.

    Returns:
        Exit code: 0 on success, 1 if the part 2 manifest is missing or the
        record limit is not positive
    """
    paths = stage_paths(config)
    try:
        archiver = Archiver(
            max_records=config['max_records_per_category'],
            archive_extension=config['archive_extension'],
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        archives = archiver.archive_manifest(paths['part2_manifest'], paths['part3_manifest'])
    except ManifestNotFoundError as e:
        logger.error(str(e))
        return 1

    print_stats(archiver.stats, len(archives))
    return 0


def print_stats(stats: Dict[str, int], archive_count: int):
    """Print summary statistics"""
    print("\n" + "=" * 60)
    print("ARCHIVE SUMMARY")
    print("=" * 60)
    print(f"  Archives written:    {archive_count:5d}")
    print(f"  Records archived:    {stats['records']:5d}")
    print(f"  Lines skipped:       {stats['invalid']:5d}")
    print(f"  Empty containers:    {stats['empty']:5d}")
    print(f"  Missing containers:  {stats['skipped_missing']:5d}")
    print(f"  Over record limit:   {stats['over_limit']:5d}")
    print(f"  Errors:              {stats['errors']:5d}")
    print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Stage 2: archive genre containers')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--output-dir', '-o', type=Path, default=None,
                        help='Directory holding containers and manifests (default: from config)')
    parser.add_argument('--max-records', type=int, default=None,
                        help='Records kept per genre (default: max_records_per_category from config)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    if args.output_dir is not None:
        config['output_dir'] = str(args.output_dir)
    if args.max_records is not None:
        config['max_records_per_category'] = args.max_records

    return run_archive(config)


if __name__ == '__main__':
    sys.exit(main())
