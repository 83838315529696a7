# src/enhance/frame_feats_to_lps.py
import argparse
import sys
from contextlib import ExitStack

from audioio.archive import MatrixArchiveWriter, read_matrix_archive
from stft.decoder import frame_features_to_lps
from stft.errors import DimensionMismatch
from .common import UtteranceCounter, add_config_argument, load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recover LPS and phase from frame FFT features. With one output archive the "
                    "LPS and phase are concatenated column-wise as [lps | phase]."
    )
    parser.add_argument('input', type=str, help='Frame FFT feature archive')
    parser.add_argument('lps_output', type=str, help='LPS archive (or combined archive)')
    parser.add_argument('phase_output', type=str, nargs='?', help='Phase archive (optional)')
    add_config_argument(parser)
    return parser


def main(argv=None) -> int:
    args = load_config(build_parser().parse_args(argv))
    counter = UtteranceCounter()
    combine = args.phase_output is None

    with ExitStack() as stack:
        lps_writer = stack.enter_context(MatrixArchiveWriter(args.lps_output))
        phase_writer = None if combine else stack.enter_context(MatrixArchiveWriter(args.phase_output))
        for key, feats in read_matrix_archive(args.input):
            if feats.shape[0] == 0:
                print(f"[WARN] Empty feature matrix for key {key}")
                counter.skipped += 1
                continue
            try:
                decoded = frame_features_to_lps(feats, combine=combine)
            except DimensionMismatch as e:
                print(f"[WARN] Skipping {key}: {e}")
                counter.skipped += 1
                continue
            if combine:
                lps_writer.write(key, decoded)
            else:
                lps_writer.write(key, decoded[0])
                phase_writer.write(key, decoded[1])
            counter.done += 1
    return counter.report("decoding LPS and phase")


if __name__ == "__main__":
    sys.exit(main())
