# src/enhance/phase_deducted_lps.py
import argparse
import sys

from audioio.archive import MatrixArchiveWriter
from stft.decoder import phase_deducted_lps
from .common import add_config_argument, load_config, run_paired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Approximate LPS directly from frame FFT features (Re + Im of the sign-log code)."
    )
    parser.add_argument('input', type=str, help='Frame FFT feature archive')
    parser.add_argument('output', type=str, help='Output LPS archive')
    add_config_argument(parser)
    args = load_config(parser.parse_args(argv))

    with MatrixArchiveWriter(args.output) as writer:
        counter = run_paired([args.input], writer, lambda key, feats: phase_deducted_lps(feats))
    return counter.report("computing phase-deducted LPS")


if __name__ == "__main__":
    sys.exit(main())
