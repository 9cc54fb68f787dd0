"""
Command line entry point: pair defects in a detection file and print reports.
"""
import argparse
import logging
import sys

from analysis.parameter_sweep import format_sweep_chart, sweep_thresholds
from analysis.queries import PairCategory, percent_tracked
from analysis.reporting import format_pair_report, format_summary, summarize
from core.config import DEFAULT_DISTANCE_THRESHOLD, DEFAULT_TIME_THRESHOLD, EligibilityPolicy, PairingParams, SweepGrid
from core.errors import DefectPairingError
from core.file_writer import write_tracked_only
from core.pairing import PairingEngine
from core.records import FileFormat, read_detections
from core.trajectory_store import TrajectoryStore

logger = logging.getLogger(__name__)


def _add_input_arguments(parser):
    parser.add_argument("input", help="Path to the detection file (one header line, one detection per line)")
    parser.add_argument("--delimiter", default=",", help="Field delimiter (default: ',')")


def _add_pairing_arguments(parser):
    parser.add_argument(
        "--eligibility", default=EligibilityPolicy.ALL.value,
        choices=[policy.value for policy in EligibilityPolicy],
        help="Which opposite-charge defects may be claimed (default: all)"
    )
    parser.add_argument(
        "--seeker", default="positive", choices=["positive", "negative"],
        help="Partition whose defects look for partners (default: positive)"
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="defect-pairing",
        description="Reconstruct defect trajectories and pair creations (twins) and annihilations (spouses)"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    report = commands.add_parser("report", help="Pair once and print the pairs and a summary")
    _add_input_arguments(report)
    _add_pairing_arguments(report)
    report.add_argument("-d", "--distance", type=float, default=DEFAULT_DISTANCE_THRESHOLD,
                        help=f"Distance threshold (default: {DEFAULT_DISTANCE_THRESHOLD:g})")
    report.add_argument("-t", "--time", type=int, default=DEFAULT_TIME_THRESHOLD,
                        help=f"Time threshold in frames (default: {DEFAULT_TIME_THRESHOLD})")

    sweep = commands.add_parser("sweep", help="Tabulate a pair count over a grid of thresholds")
    _add_input_arguments(sweep)
    _add_pairing_arguments(sweep)
    sweep.add_argument("--time-range", type=int, nargs=3, metavar=("START", "STOP", "STEP"), default=[1, 10, 1])
    sweep.add_argument("--distance-range", type=float, nargs=3, metavar=("START", "STOP", "STEP"), default=[5, 50, 5])
    sweep.add_argument("--metric", default=PairCategory.BOTH.value, choices=[c.value for c in PairCategory],
                       help="Category counted in each cell (default: both)")
    sweep.add_argument("--html", default=None, help="Also write the sweep as a plotly heat map to this HTML file")

    prune = commands.add_parser("prune", help="Write a copy of the file without untracked lines")
    _add_input_arguments(prune)
    prune.add_argument("-o", "--output", default=None, help="Output path (default: modified<name> beside the input)")

    return parser


def _load(args):
    file_format = FileFormat(delimiter=args.delimiter)
    store = TrajectoryStore().load(read_detections(args.input, file_format))
    params = PairingParams(seeker_charge=args.seeker, eligibility=args.eligibility)
    return store, PairingEngine(store, params), file_format


def run_report(args):
    store, engine, file_format = _load(args)
    engine.pair(args.distance, args.time)
    tracked = percent_tracked(read_detections(args.input, file_format)) if store.frame_count else None
    print(format_pair_report(store, engine.params.seeker_charge), end="")
    print(format_summary(summarize(store, engine.params.seeker_charge, tracked)), end="")


def run_sweep(args):
    store, engine, _ = _load(args)
    grid = SweepGrid(*args.time_range, *args.distance_range)
    table = sweep_thresholds(engine, grid, args.metric)
    print(format_sweep_chart(table), end="")
    if args.html:
        from visualization.sweep_viz import create_sweep_heatmap

        create_sweep_heatmap(table, metric_name=args.metric).write_html(args.html)
        logger.info(f"Heat map written to {args.html}")


def run_prune(args):
    destination = write_tracked_only(args.input, args.output, FileFormat(delimiter=args.delimiter))
    print(destination)


COMMANDS = {"report": run_report, "sweep": run_sweep, "prune": run_prune}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        COMMANDS[args.command](args)
    except (DefectPairingError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
