#!/usr/bin/env python3
"""
Pipeline configuration

Reads config.yaml and fills any missing key from DEFAULT_CONFIG. Command-line
flags in the stage scripts override what ends up here.

Example config.yaml:
    output_dir: output
    part1_manifest: data/part1_manifest.txt
    archive_extension: .bin
    max_records_per_category: 1000
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from movielib.constants import (
    PART1_MANIFEST, PART2_MANIFEST, PART3_MANIFEST, ERROR_LOG,
    ARCHIVE_EXTENSION, MAX_RECORDS_PER_CATEGORY, AUDIT_REPORT,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'output_dir': '.',
    'part1_manifest': PART1_MANIFEST,
    'part2_manifest': PART2_MANIFEST,
    'part3_manifest': PART3_MANIFEST,
    'error_log': ERROR_LOG,
    'archive_extension': ARCHIVE_EXTENSION,
    'max_records_per_category': MAX_RECORDS_PER_CATEGORY,
    'audit_report': AUDIT_REPORT,
}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file, merged over the defaults.

    A missing file is not an error: the defaults are used.

    Raises:
        ValueError: if the file is not valid YAML or is not a mapping
    """
    config = dict(DEFAULT_CONFIG)
    config_path = Path(config_path)

    if not config_path.exists():
        logger.info(f"Config file not found: {config_path}, using defaults")
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(loaded).__name__}")

    unknown = set(loaded) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {', '.join(sorted(unknown))}")

    for key in DEFAULT_CONFIG:
        if key in loaded and loaded[key] is not None:
            config[key] = loaded[key]

    config['max_records_per_category'] = int(config['max_records_per_category'])
    extension = str(config['archive_extension'])
    config['archive_extension'] = extension if extension.startswith('.') else '.' + extension
    return config


def stage_paths(config: Dict[str, Any]) -> Dict[str, Path]:
    """Resolve the artifact paths a run reads and writes"""
    output_dir = Path(config['output_dir'])
    return {
        'output_dir': output_dir,
        'part1_manifest': Path(config['part1_manifest']),
        'part2_manifest': output_dir / config['part2_manifest'],
        'part3_manifest': output_dir / config['part3_manifest'],
        'error_log': output_dir / config['error_log'],
        'audit_report': output_dir / config['audit_report'],
    }
