#!/usr/bin/env python3
"""
pipeline.py - Run all three stages in order

1. partition  raw files -> genre containers + part 2 manifest + error log
2. archive    containers -> binary archives + part 3 manifest
3. browse     archives -> interactive navigation (skip with --no-browse)

A stage that aborts on a missing manifest stops the run.

Usage:
    python pipeline.py
    python pipeline.py data/part1_manifest.txt --clean
    python pipeline.py --no-browse --output-dir output
"""

import sys
import logging
import argparse
from pathlib import Path

from archive import run_archive
from browse import run_browse
from movielib.config import load_config
from partition import run_partition

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Partition, archive and browse movie records')
    parser.add_argument('manifest', nargs='?', type=Path, default=None,
                        help='Part 1 manifest (default: part1_manifest from config)')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--output-dir', '-o', type=Path, default=None,
                        help='Directory for all pipeline artifacts (default: from config)')
    parser.add_argument('--clean', action='store_true',
                        help='Remove containers and error log from a previous run first')
    parser.add_argument('--no-browse', action='store_true',
                        help='Stop after stage 2')
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

    logger.info("Stage 1: partition")
    code = run_partition(config, args.manifest, clean=args.clean)
    if code != 0:
        return code

    logger.info("Stage 2: archive")
    code = run_archive(config)
    if code != 0 or args.no_browse:
        return code

    logger.info("Stage 3: browse")
    return run_browse(config)


if __name__ == '__main__':
    sys.exit(main())
