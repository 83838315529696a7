# src/enhance/irm_post_process.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from masks.postprocess import irm_post_process, validate_bounds
from stft.errors import ConfigurationError, DimensionMismatch, MaskRangeError
from .common import add_config_argument, load_config, run_paired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Post-process enhanced LPS with a predicted IRM: keep noisy bins where the mask is "
                    "high, predicted bins where it is low, and their average in between."
    )
    parser.add_argument('noisy', type=str, help='Noisy LPS archive')
    parser.add_argument('pred', type=str, help='Predicted (enhanced) LPS archive')
    parser.add_argument('mask', type=str, help='Predicted IRM archive')
    parser.add_argument('output', type=str, help='Output LPS archive')
    parser.add_argument('--upper-bound', type=float, default=0.75, help='Mask above this uses the noisy LPS')
    parser.add_argument('--lower-bound', type=float, default=0.1, help='Mask below this uses the predicted LPS')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))
    try:
        validate_bounds(args.upper_bound, args.lower_bound)
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 1

    def transform(key, noisy, pred, mask):
        return irm_post_process(noisy, pred, mask, upper_bound=args.upper_bound, lower_bound=args.lower_bound)

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.noisy, args.pred, args.mask], writer, transform,
                             skip_on=(DimensionMismatch, MaskRangeError))
    return counter.report("IRM post-processing")


if __name__ == "__main__":
    sys.exit(main())
