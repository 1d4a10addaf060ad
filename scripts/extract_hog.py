#!/usr/bin/env python3
"""
Batch HOG extraction over a directory of images

Every image is resized to the crop size, processed once and described by
the descriptor of the full crop. Descriptors are written to an .npz file
(filenames + hog_features) and a per-image status CSV.

Usage:
    python scripts/extract_hog.py --input-dir dataset/images/ --output outputs/hog_features.npz
    python scripts/extract_hog.py --input-dir dataset/images/ --output outputs/hog.npz --config configs/hog_default.yaml
    python scripts/extract_hog.py --input-dir dataset/images/ --output outputs/hog.npz --blocksize 16 --cellsize 8 --stride 8 --signed
"""

import argparse
import sys
import time
from pathlib import Path

import pandas as pd

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hogcache.exceptions import ConfigurationError
from hogcache.features import HOGConfig, extract_directory, save_features
from hogcache.utils.logger import setup_logger


def build_config(args) -> HOGConfig:
    """Config file first, then command-line overrides"""
    params = HOGConfig.from_yaml(args.config).to_dict() if args.config else {'blocksize': 32}

    overrides = {
        'blocksize': args.blocksize,
        'cellsize': args.cellsize,
        'stride': args.stride,
        'binning': args.binning,
        'block_norm': args.block_norm,
        'gradient_mode': 'signed' if args.signed else None,
    }
    for key, value in overrides.items():
        if value is not None:
            params[key] = value

    return HOGConfig.from_dict(params)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Batch HOG descriptor extraction')

    # Input/output
    parser.add_argument('--input-dir', type=str, required=True,
                        help='Input directory containing images')
    parser.add_argument('--output', type=str, required=True,
                        help='Output .npz file (filenames + hog_features)')
    parser.add_argument('--csv-output', type=str, default=None,
                        help='CSV status file (default: <output>_results.csv)')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Optional log file')

    # HOG parameters
    parser.add_argument('--config', type=str, default=None,
                        help='YAML config file (see configs/hog_default.yaml)')
    parser.add_argument('--blocksize', type=int, default=None,
                        help='Block size in pixels (default: 32)')
    parser.add_argument('--cellsize', type=int, default=None,
                        help='Cell size in pixels (default: blocksize/2)')
    parser.add_argument('--stride', type=int, default=None,
                        help='Block stride in pixels (default: blocksize/2)')
    parser.add_argument('--binning', type=int, default=None,
                        help='Orientation bins per cell (default: 9)')
    parser.add_argument('--signed', action='store_true',
                        help='Use signed gradients (0-360 degrees)')
    parser.add_argument('--block-norm', type=str, default=None,
                        choices=['none', 'L1', 'L1-sqrt', 'L2', 'L2-Hys'],
                        help='Block normalization (default: L2-Hys)')

    # Crop
    parser.add_argument('--crop-width', type=int, default=128,
                        help='Width images are resized to (default: 128)')
    parser.add_argument('--crop-height', type=int, default=256,
                        help='Height images are resized to (default: 256)')

    parser.add_argument('--n-jobs', type=int, default=1,
                        help='Worker threads for cell histograms (default: 1)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the progress bar')

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logger('hogcache', log_file=args.log_file)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Invalid HOG configuration: {e}")
        return 2

    output_path = Path(args.output)
    csv_path = Path(args.csv_output) if args.csv_output else \
        output_path.with_name(f"{output_path.stem}_results.csv")

    logger.info("=" * 60)
    logger.info("BATCH HOG EXTRACTION")
    logger.info("=" * 60)
    logger.info(f"Input: {args.input_dir}")
    logger.info(f"Output: {output_path}")
    logger.info(f"Config: {config}")
    logger.info(f"Crop: {args.crop_width}x{args.crop_height}")

    begin = time.perf_counter()
    filenames, features, results = extract_directory(
        args.input_dir,
        config,
        crop_size=(args.crop_width, args.crop_height),
        n_jobs=args.n_jobs,
        show_progress=not args.no_progress
    )
    elapsed = time.perf_counter() - begin

    output_path = save_features(output_path, filenames, features, config=config)

    df = pd.DataFrame(results)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(csv_path, index=False)

    logger.info("=" * 60)
    logger.info("RESULTS SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total images: {len(results)}")
    if len(df) > 0:
        for status, count in df['status'].value_counts().items():
            logger.info(f"  {status}: {count}")
    logger.info(f"Feature matrix: {features.shape}")
    logger.info(f"Total elapsed time = {elapsed * 1000:.0f} ms")
    logger.info(f"Results saved to: {csv_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
