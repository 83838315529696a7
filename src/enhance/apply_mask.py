# src/enhance/apply_mask.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from masks.irm import apply_mask
from stft.errors import DimensionMismatch, MaskRangeError
from .common import add_config_argument, load_config, run_paired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Apply a learned IRM to noisy LPS to predict clean LPS.")
    parser.add_argument('noisy', type=str, help='Noisy LPS archive')
    parser.add_argument('mask', type=str, help='Mask archive')
    parser.add_argument('output', type=str, help='Output enhanced LPS archive')
    parser.add_argument('--ignore-range', action='store_true', help='Allow mask values outside [0, 1]')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.noisy, args.mask], writer,
                             lambda key, noisy, mask: apply_mask(noisy, mask, ignore_range=args.ignore_range),
                             skip_on=(DimensionMismatch, MaskRangeError))
    return counter.report("applying IRM")


if __name__ == "__main__":
    sys.exit(main())
