#!/usr/bin/env python3
"""
partition.py - Stage 1: validate raw movie files and split them by genre

Reads the part 1 manifest (one input file per line, relative to the manifest),
appends valid records to <genre>.csv, logs rejected lines to
bad-movie_records.txt and writes the part 2 manifest.

Usage:
    python partition.py                              # manifest from config.yaml
    python partition.py data/part1_manifest.txt      # explicit manifest
    python partition.py --clean --output-dir output  # fresh containers
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from movielib.config import load_config, stage_paths
from movielib.manifest import ManifestNotFoundError
from movielib.partitioner import Partitioner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_partition(config: Dict[str, Any], manifest_path: Optional[Path] = None, clean: bool = False) -> int:
    """
    Run stage 1 with the given config.

    Returns:
        Exit code: 0 on success, 1 if the input manifest is missing
    """
    paths = stage_paths(config)
    manifest_path = manifest_path or paths['part1_manifest']

    partitioner = Partitioner(paths['output_dir'], config['error_log'])
    if clean:
        partitioner.clear_outputs()

    try:
        partitioner.partition_manifest(manifest_path, paths['part2_manifest'])
    except ManifestNotFoundError as e:
        logger.error(str(e))
        return 1

    print_stats(partitioner.stats)
    return 0


def print_stats(stats: Dict[str, int]):
    """Print summary statistics"""
    print("\n" + "=" * 60)
    print("PARTITION SUMMARY")
    print("=" * 60)
    print(f"  Input files read:    {stats['files']:5d}")
    print(f"  Lines read:          {stats['lines']:5d}")
    print(f"  Valid records:       {stats['valid']:5d}")
    print(f"  Rejected lines:      {stats['invalid']:5d}")
    print(f"  Blank lines:         {stats['blank']:5d}")
    print(f"  Missing files:       {stats['skipped_missing']:5d}")
    print(f"  Read errors:         {stats['errors']:5d}")
    print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Stage 1: partition movie records by genre')
    parser.add_argument('manifest', nargs='?', type=Path, default=None,
                        help='Part 1 manifest (default: part1_manifest from config)')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--output-dir', '-o', type=Path, default=None,
                        help='Directory for containers, manifests and error log (default: from config)')
    parser.add_argument('--clean', action='store_true',
                        help='Remove existing containers and error log first')
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

    return run_partition(config, args.manifest, clean=args.clean)


if __name__ == '__main__':
    sys.exit(main())
