"""
Test suite for the run configuration and the sampling runner.
Run with: python -m pytest tests/test_config.py -v
"""

import argparse
import dataclasses
import json
import pytest
import numpy as np
import nibabel as nib
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from ctslices.config import RunConfig
from ctslices.errors import RangeError
import run_sampling


class TestRunConfig:
    """Tests for RunConfig validation and derived flags."""

    def test_defaults(self):
        config = RunConfig(phase='train', load_size=286, fine_size=256)

        assert config.hu_min == -1000.0
        assert config.hu_max == 3000.0
        assert config.exclude_slices == 0
        assert config.flip is False
        assert config.serial_batches is False

    def test_immutable(self):
        config = RunConfig(phase='train', load_size=286, fine_size=256)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.phase = 'eval'

    def test_randomize(self):
        assert RunConfig(phase='train', load_size=8, fine_size=8).randomize
        assert not RunConfig(phase='train', load_size=8, fine_size=8, serial_batches=True).randomize
        assert not RunConfig(phase='val', load_size=8, fine_size=8).randomize

    @pytest.mark.parametrize("kwargs", [
        {'input_nc': 3},
        {'output_nc': 2},
        {'fine_size': 300},
        {'load_size': 0},
        {'phase': ''},
    ])
    def test_invalid_values(self, kwargs):
        params = dict(phase='train', load_size=286, fine_size=256)
        params.update(kwargs)
        with pytest.raises(ValueError):
            RunConfig(**params)

    def test_invalid_hu_window(self):
        with pytest.raises(RangeError):
            RunConfig(phase='train', load_size=8, fine_size=8, hu_min=500.0, hu_max=500.0)

    def test_from_namespace(self):
        args = argparse.Namespace(
            phase='test', loadSize=64, fineSize=48, exclude_slices=4,
            hu_min=-160.0, hu_max=240.0, flip=True, serial_batches=False,
            input_nc=1, output_nc=1
        )
        config = RunConfig.from_namespace(args)

        assert config.load_size == 64
        assert config.fine_size == 48
        assert config.exclude_slices == 4
        assert config.hu_min == -160.0
        assert config.to_dict()['phase'] == 'test'


class TestRunSampling:
    """Tests for the command-line runner."""

    @pytest.fixture
    def data_root(self, tmp_path):
        for domain in ('A', 'B'):
            path = tmp_path / 'data' / domain / 'train' / 'case.nii.gz'
            path.parent.mkdir(parents=True)
            volume = np.random.uniform(-1000, 3000, size=(16, 16, 10)).astype(np.float32)
            nib.save(nib.Nifti1Image(volume, np.eye(4)), str(path))
        return tmp_path / 'data'

    def test_parse_defaults(self, monkeypatch):
        monkeypatch.delenv('DATA_ROOT', raising=False)
        args = run_sampling.parse_args([])

        assert args.loadSize == 286
        assert args.fineSize == 256
        assert args.hu_min == -1000.0
        assert args.serial_batches is False

    def test_main_writes_records(self, data_root, tmp_path):
        out_dir = tmp_path / 'out'
        code = run_sampling.main([
            '--dataroot', str(data_root), '--phase', 'train',
            '--loadSize', '16', '--fineSize', '12', '--exclude_slices', '2',
            '--num_samples', '3', '--seed', '0', '--flip', '--output_dir', str(out_dir)
        ])

        assert code == 0
        run_dirs = list(out_dir.iterdir())
        assert len(run_dirs) == 1
        records = json.loads((run_dirs[0] / 'samples.json').read_text())
        assert len(records) == 3
        assert all(2 <= r['index_a'] <= 7 for r in records)
        assert all(-1.0 <= r['min'] <= r['max'] <= 1.0 for r in records)
        config = json.loads((run_dirs[0] / 'config.json').read_text())
        assert config['fine_size'] == 12

    def test_main_invalid_config(self, data_root, tmp_path):
        code = run_sampling.main([
            '--dataroot', str(data_root), '--input_nc', '3', '--output_dir', str(tmp_path)
        ])
        assert code == 2

    def test_main_missing_pair(self, data_root, tmp_path):
        (data_root / 'B' / 'train' / 'case.nii.gz').unlink()
        code = run_sampling.main([
            '--dataroot', str(data_root), '--loadSize', '16', '--fineSize', '12',
            '--output_dir', str(tmp_path / 'out')
        ])
        assert code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
