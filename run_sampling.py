#!/usr/bin/env python3
"""
Paired CT Sampling Runner
=========================
Draws samples from a paired A/B CT dataset and reports what the loader
produces: slice indices, value ranges and optional preview figures.

Usage:
    DATA_ROOT=/data/ct python run_sampling.py --phase train --loadSize 286 --fineSize 256
    python run_sampling.py --dataroot /data/ct --phase test --exclude_slices 5 --save_previews
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from ctslices.config import RunConfig, DEFAULT_HU_MIN, DEFAULT_HU_MAX
from ctslices.dataset import PairedVolumeDataset
from ctslices.errors import SliceLoaderError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Paired CT slice sampling')
    parser.add_argument('--dataroot', type=str, default=os.environ.get('DATA_ROOT'),
                        help='Root with A/<phase> and B/<phase> (default: $DATA_ROOT)')
    parser.add_argument('--phase', type=str, default='train', help='train, val, test, ...')
    parser.add_argument('--loadSize', type=int, default=286, help='Resize slices to this size')
    parser.add_argument('--fineSize', type=int, default=256, help='Then crop to this size')
    parser.add_argument('--input_nc', type=int, default=1, help='Input channels (must be 1)')
    parser.add_argument('--output_nc', type=int, default=1, help='Output channels (must be 1)')
    parser.add_argument('--hu_min', type=float, default=DEFAULT_HU_MIN, help='HU mapped to -1')
    parser.add_argument('--hu_max', type=float, default=DEFAULT_HU_MAX, help='HU mapped to 1')
    parser.add_argument('--exclude_slices', type=int, default=0,
                        help='Slices skipped at each end of a volume')
    parser.add_argument('--serial_batches', action='store_true',
                        help='Take slices and crops deterministically')
    parser.add_argument('--flip', action='store_true', help='Random horizontal flips when training')
    parser.add_argument('--num_samples', type=int, default=8, help='Samples to draw')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--output_dir', type=str, default='./outputs', help='Output directory')
    parser.add_argument('--save_previews', action='store_true', help='Write PNG previews')
    parser.add_argument('--verbose', action='store_true', help='Log every sample')
    return parser.parse_args(argv)


def setup_output_dir(output_dir: str) -> str:
    """Create timestamped output directory."""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    run_dir = os.path.join(output_dir, f'run_{timestamp}')
    os.makedirs(run_dir, exist_ok=True)
    return run_dir


def save_config(config: RunConfig, args, run_dir: str):
    """Save sampling configuration."""
    payload = config.to_dict()
    payload.update({'dataroot': args.dataroot, 'seed': args.seed, 'num_samples': args.num_samples})
    config_path = os.path.join(run_dir, 'config.json')
    with open(config_path, 'w') as f:
        json.dump(payload, f, indent=2)
    print(f"Configuration saved to {config_path}")


def draw_samples(dataset: PairedVolumeDataset, num_samples: int):
    """
    Draw up to ``num_samples`` samples, cycling through the dataset.

    Returns:
        Tuple of (samples, records) where records describe each sample
    """
    samples = []
    records = []
    order = dataset.order()

    for i in range(num_samples):
        sample, info = dataset.sample_with_info(order[i % len(order)])
        path_a = info.path_a
        samples.append(sample)
        records.append({
            'file': path_a.name,
            'depth_a': info.depth_a,
            'depth_b': info.depth_b,
            'index_a': info.index_a,
            'index_b': info.index_b,
            'min': float(sample.min()),
            'max': float(sample.max()),
        })
        print(f"  [{i+1:3d}/{num_samples}] {path_a.name} | "
              f"depth {info.depth_a}/{info.depth_b} | slice {info.index_a}/{info.index_b} | "
              f"range [{sample.min():.3f}, {sample.max():.3f}]")

    return samples, records


def main(argv=None):
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    print("=" * 60)
    print("Paired CT Slice Sampling")
    print("=" * 60)

    try:
        config = RunConfig.from_namespace(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 2

    print(f"\nConfiguration:")
    print(f"  Data root: {args.dataroot}")
    print(f"  Phase: {config.phase}")
    print(f"  Load/fine size: {config.load_size}/{config.fine_size}")
    print(f"  HU window: [{config.hu_min}, {config.hu_max}]")
    print(f"  Excluded slices per end: {config.exclude_slices}")
    print(f"  Randomized: {config.randomize} | Flip: {config.flip}")

    rng = np.random.default_rng(args.seed)

    try:
        dataset = PairedVolumeDataset(config, data_root=args.dataroot, rng=rng)
    except (ValueError, NotADirectoryError) as e:
        print(f"Error loading data: {e}")
        return 1

    print(f"\nVolumes: {len(dataset)}")
    unpaired = dataset.find_unpaired()
    if unpaired:
        print(f"Missing B counterparts for {len(unpaired)} volume(s):")
        for path in unpaired:
            print(f"  {path}")
        return 1

    run_dir = setup_output_dir(args.output_dir)
    print(f"Output directory: {run_dir}")
    save_config(config, args, run_dir)

    print(f"\nDrawing {args.num_samples} samples...")
    print("-" * 60)
    try:
        samples, records = draw_samples(dataset, args.num_samples)
    except SliceLoaderError as e:
        print(f"Sampling failed: {e}")
        return 1

    records_path = os.path.join(run_dir, 'samples.json')
    with open(records_path, 'w') as f:
        json.dump(records, f, indent=2)

    if args.save_previews and samples:
        from evaluation.visualize import plot_intensity_histogram, save_sample_previews
        save_sample_previews(
            samples,
            [r['file'] for r in records],
            os.path.join(run_dir, 'previews'),
            hu_range=(config.hu_min, config.hu_max),
            num_samples=len(samples)
        )
        plot_intensity_histogram(samples, save_path=os.path.join(run_dir, 'intensity_histogram.png'))

    print("\n" + "=" * 60)
    print("Sampling Complete!")
    print("=" * 60)
    print(f"\nResults saved to: {run_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
