#!/usr/bin/env python3
"""
End-to-end tests for the stage scripts over sample_data/
"""

import io
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import archive
import audit
import pipeline
from archive import run_archive
from browse import run_browse
from movielib.codec import read_archive
from movielib.config import DEFAULT_CONFIG
from movielib.manifest import read_manifest
from partition import run_partition

SAMPLE_MANIFEST = Path(__file__).parent.parent / 'sample_data' / 'part1_manifest.txt'


@pytest.fixture
def config(tmp_path):
    return dict(DEFAULT_CONFIG, output_dir=str(tmp_path / 'out'), part1_manifest=str(SAMPLE_MANIFEST))


class TestStages:
    """Stage runners over sample_data"""

    def test_partition(self, config, tmp_path):
        """Stage 1 builds containers and logs the bad sample lines"""
        assert run_partition(config) == 0
        out = tmp_path / 'out'

        assert len(read_manifest(out / 'part2_manifest.txt')) == 17
        assert len((out / 'drama.csv').read_text(encoding='utf-8').splitlines()) == 4
        assert len((out / 'action.csv').read_text(encoding='utf-8').splitlines()) == 3
        log = (out / 'bad-movie_records.txt').read_text(encoding='utf-8').splitlines()
        assert len(log) == 5
        assert log[0].endswith('Line: 8, Error: Invalid year: 1989. The year must be between 1990 and 1999.')
        assert log[1].endswith('Line: 10, Error: Missing closing quote.')

    def test_missing_manifest_fails(self, config, tmp_path):
        """A missing stage 1 manifest exits 1 without output"""
        config['part1_manifest'] = str(tmp_path / 'missing.txt')
        assert run_partition(config) == 1
        assert not (tmp_path / 'out' / 'part2_manifest.txt').exists()

    def test_archive_requires_manifest2(self, config):
        """Stage 2 without manifest-2 exits 1"""
        assert run_archive(config) == 1

    def test_archive_rejects_nonpositive_limit(self, config, tmp_path):
        """A record limit below one exits 1 without writing manifest-3"""
        run_partition(config)
        config['max_records_per_category'] = 0
        assert run_archive(config) == 1
        assert not (tmp_path / 'out' / 'part3_manifest.txt').exists()

    def test_browse_requires_manifest3(self, config):
        """Stage 3 without manifest-3 exits 1"""
        assert run_browse(config, io.StringIO('x\n'), io.StringIO()) == 1

    def test_archive(self, config, tmp_path):
        """Stage 2 archives every genre with records"""
        run_partition(config)
        assert run_archive(config) == 0
        out = tmp_path / 'out'

        archives = read_manifest(out / 'part3_manifest.txt')
        assert len(archives) == 10
        assert 'musical.bin' not in archives
        titles = [r.title for r in read_archive(out / 'adventure.bin')]
        assert titles == ['Hook', 'Thelma, Louise and the Road']

    def test_clean_rerun_is_identical(self, config, tmp_path):
        """A clean re-run reproduces the containers"""
        run_partition(config)
        first = (tmp_path / 'out' / 'drama.csv').read_text(encoding='utf-8')
        run_partition(config, clean=True)
        assert (tmp_path / 'out' / 'drama.csv').read_text(encoding='utf-8') == first

    def test_browse(self, config):
        """Stage 3 browses the archived drama records"""
        run_partition(config)
        run_archive(config)
        stdout = io.StringIO()
        # drama is genre 5
        assert run_browse(config, io.StringIO('s\n5\nn\n10\n0\nx\n'), stdout) == 0
        text = stdout.getvalue()
        assert 'n: Navigate drama movies (4 records)' in text
        assert '4: JFK (1991)' in text
        assert 'EOF has been reached.' in text


class TestScripts:
    """Command-line entry points"""

    def test_pipeline_main(self, tmp_path):
        """pipeline.py runs stages 1 and 2"""
        out = tmp_path / 'out'
        code = pipeline.main([str(SAMPLE_MANIFEST), '--output-dir', str(out),
                              '--config', str(tmp_path / 'none.yaml'), '--no-browse'])
        assert code == 0
        assert (out / 'part3_manifest.txt').exists()

    def test_audit_main(self, tmp_path, capsys):
        """audit.py writes the report and counts rejected lines"""
        out = tmp_path / 'out'
        pipeline.main([str(SAMPLE_MANIFEST), '--output-dir', str(out),
                       '--config', str(tmp_path / 'none.yaml'), '--no-browse'])
        capsys.readouterr()

        code = audit.main(['--output-dir', str(out), '--config', str(tmp_path / 'none.yaml')])
        assert code == 0
        assert (out / 'pipeline_audit.csv').exists()
        assert 'Rejected lines: 5' in capsys.readouterr().out

    def test_audit_missing_dir(self, tmp_path):
        """audit.py exits 1 when the artifact directory is missing"""
        assert audit.main(['--output-dir', str(tmp_path / 'nope'),
                           '--config', str(tmp_path / 'none.yaml')]) == 1

    def test_archive_main_rejects_zero_limit(self, tmp_path):
        """archive.py --max-records 0 exits 1 instead of raising"""
        code = archive.main(['--output-dir', str(tmp_path), '--config', str(tmp_path / 'none.yaml'),
                             '--max-records', '0'])
        assert code == 1
