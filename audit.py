#!/usr/bin/env python3
"""
audit.py - Pipeline Audit: inventory of containers, archives and rejected lines

Read-only. Never partitions or archives anything.

For each genre, counts the records in its container (<genre>.csv) and in its
archive (<genre>.bin), writes that table to CSV and prints a summary of the
stage 1 error log per input file.

Output: <output_dir>/pipeline_audit.csv

Usage:
    python audit.py                           # uses config.yaml
    python audit.py --output-dir output       # explicit artifact directory
    python audit.py --output reports/a.csv    # custom report path
"""

import sys
import argparse
from pathlib import Path

from movielib.config import load_config, stage_paths
from movielib.report import build_category_report, load_error_log, summarize_errors


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Audit pipeline artifacts and write a per-genre CSV report'
    )
    parser.add_argument('--output-dir', '-d', type=Path, default=None,
                        help='Directory holding pipeline artifacts (default: from config)')
    parser.add_argument('--output', '-o', type=Path, default=None,
                        help='Output CSV path (default: audit_report from config)')
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Config file (default: config.yaml)')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.output_dir is not None:
        config['output_dir'] = str(args.output_dir)
    paths = stage_paths(config)
    output_path = args.output or paths['audit_report']

    if not paths['output_dir'].exists():
        print(f"Error: artifact directory not found: {paths['output_dir']}")
        return 1

    print(f"Auditing artifacts in: {paths['output_dir']}")

    report = build_category_report(paths['output_dir'], config['archive_extension'])
    errors = load_error_log(paths['error_log'])
    per_file = summarize_errors(errors)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    report.to_csv(output_path, index=False)

    print(f"\n{'=' * 50}")
    print("PIPELINE AUDIT COMPLETE")
    print(f"{'=' * 50}")
    for row in report.itertuples(index=False):
        marker = '' if row.has_archive or not row.container_records else '  (no archive)'
        print(f"  {row.category:<14} {row.container_records:5d} csv  {row.archived_records:5d} archived{marker}")
    print(f"  {'TOTAL':<14} {report['container_records'].sum():5d} csv  "
          f"{report['archived_records'].sum():5d} archived")

    print(f"\n  Rejected lines: {len(errors)}")
    for row in per_file.itertuples(index=False):
        print(f"    {row.errors:5d}  {row.file}")

    print(f"\nOutput: {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
