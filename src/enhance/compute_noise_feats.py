# src/enhance/compute_noise_feats.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from masks.irm import noise_from_mask
from .common import add_config_argument, load_config, run_paired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Given clean LPS and its IRM, output noise LPS.")
    parser.add_argument('clean', type=str, help='Clean LPS archive')
    parser.add_argument('mask', type=str, help='IRM archive, values in (0, 1]')
    parser.add_argument('output', type=str, help='Output noise LPS archive')
    parser.add_argument('--mask-floor', type=float, default=1e-12, help='Floor preventing 1/0 and log(0)')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))

    # A mask outside (0, 1] here means corrupted input; MaskRangeError aborts.
    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.clean, args.mask], writer,
                             lambda key, clean, mask: noise_from_mask(clean, mask, mask_floor=args.mask_floor))
    return counter.report("calculating noise feats")


if __name__ == "__main__":
    sys.exit(main())
