#!/usr/bin/env python3
"""
browse.py - Stage 3: load genre archives and browse them on the console

Reads the part 3 manifest, deserializes each archive and starts the
interactive menu (s = select genre, n = navigate, x = exit).

Usage:
    python browse.py
    python browse.py --output-dir output
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from movielib.config import load_config, stage_paths
from movielib.loader import load_manifest
from movielib.manifest import ManifestNotFoundError
from movielib.navigator import run_session

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_browse(config: Dict[str, Any], stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Load archives and run the navigation session.

    Returns:
        Exit code: 0 after the user exits, 1 if the part 3 manifest is missing
    """
    paths = stage_paths(config)
    try:
        library = load_manifest(paths['part3_manifest'])
    except ManifestNotFoundError as e:
        logger.error(str(e))
        return 1

    total = sum(len(records) for records in library.values())
    logger.info(f"Loaded {total} record(s) across {sum(1 for r in library.values() if r)} genre(s)")

    run_session(library, stdin, stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Stage 3: browse archived movie records')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--output-dir', '-o', type=Path, default=None,
                        help='Directory holding archives and manifests (default: from config)')
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

    return run_browse(config)


if __name__ == '__main__':
    sys.exit(main())
