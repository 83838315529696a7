# src/enhance/compute_irm_feats.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from masks.irm import FLOORING_MODES, compute_irm
from .common import add_config_argument, load_config, run_paired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Given clean and noise (not noisy!) LPS, output the IRM.")
    parser.add_argument('clean', type=str, help='Clean LPS archive')
    parser.add_argument('noise', type=str, help='Noise LPS archive')
    parser.add_argument('output', type=str, help='Output mask archive')
    parser.add_argument('--ibm', type=float, default=0.0,
                        help='If > 0, output an IBM that is 1 where Ps/Pn exceeds this value')
    parser.add_argument('--flooring', type=str, choices=FLOORING_MODES, default='none',
                        help='none: raw IRM | mean: zero bins with clean LPS below the utterance mean | '
                             'custom: zero bins with clean LPS below --lps-floor')
    parser.add_argument('--lps-floor', type=float, default=0.0, help='Clean LPS floor for --flooring custom')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))
    if args.flooring not in FLOORING_MODES:
        print(f"[ERROR] Unknown flooring {args.flooring!r}")
        return 1

    def transform(key, clean, noise):
        return compute_irm(clean, noise, flooring=args.flooring, lps_floor=args.lps_floor,
                           ibm_threshold=args.ibm)

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.clean, args.noise], writer, transform)
    return counter.report("calculating IRM")


if __name__ == "__main__":
    sys.exit(main())
