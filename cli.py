"""Command-line front end for the multi-word anagram finder."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path

from tqdm import tqdm

from models import SolveOptions, SolveReport
from solver import AnagramSolver
from utils import DEFAULT_WORDLIST, LOG_PATH, export_report, load_config, save_config, setup_logging

logger = logging.getLogger(__name__)


def get_args(argv: list[str] | None, config: dict) -> Namespace:
    p = ArgumentParser(prog="multiword-anagram", description="Find multi-word anagrams of a query")
    p.add_argument("query", nargs="?", default="", help="Letters to rearrange (spaces are ignored)")
    p.add_argument("-w", "--wordlist", default=config.get("last_wordlist_path", str(DEFAULT_WORDLIST)),
                   help="Newline-delimited word list")

    bound = p.add_mutually_exclusive_group()
    bound.add_argument("--all", dest="force_all", action="store_true",
                       help="Pair sub-words of every length (slow for long queries)")
    bound.add_argument("--auto", dest="auto_min_length", action="store_true",
                       help="Pick the minimum sub-word length from an iteration estimate")
    bound.add_argument("--min-length", type=int, default=None,
                       help="Explicit minimum sub-word length")

    p.add_argument("--slack", type=int, default=config.get("min_length_slack", 3),
                   help="Minimum sub-word length is half the query length minus this")
    p.add_argument("--max-iterations", type=int, default=config.get("max_estimated_iterations", 100_000),
                   help="Iteration budget used by --auto")
    p.add_argument("--ignore-case", action="store_true", help="Lowercase query and words before matching")
    p.add_argument("--strip-punctuation", action="store_true", help="Drop non-alphanumeric characters")
    p.add_argument("--limit", type=int, default=config.get("max_results"), help="Show at most this many answers")
    p.add_argument("--dump", action="store_true", help="Log every bucket's words after solving")
    p.add_argument("--export-json", type=Path, default=None, help="Write answers to a JSON file")
    p.add_argument("--export-csv", type=Path, default=None, help="Write answers to a CSV file")
    p.add_argument("-l", "--log", default="INFO", type=str.upper,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Log level")

    dest = p.add_mutually_exclusive_group()
    dest.add_argument("--log-file", type=Path, default=LOG_PATH, help="Diagnostics log file")
    dest.add_argument("--log-stderr", action="store_true", help="Send diagnostics to stderr")

    p.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    return p.parse_args(argv)


def options_from_args(args: Namespace) -> SolveOptions:
    return SolveOptions(
        normalize_case=args.ignore_case,
        strip_non_alphanumerics=args.strip_punctuation,
        force_all=args.force_all,
        auto_min_length=args.auto_min_length,
        min_length=args.min_length,
        min_length_slack=args.slack,
        max_estimated_iterations=args.max_iterations,
        max_results=args.limit,
    )


def print_report(report: SolveReport) -> None:
    print(f"Found {len(report.answers)} answers.")
    for entry in report.answers:
        print(f" * {entry.text} [score: {entry.score}]")


def main(argv: list[str] | None = None) -> int:
    config = load_config()
    args = get_args(argv, config)

    if not args.query.strip():
        print("Syntax: multiword-anagram [letters]")
        return 0

    setup_logging(args.log, None if args.log_stderr else args.log_file)
    options = options_from_args(args)

    solver = AnagramSolver(args.query, options)
    seeded = solver.seed_file(args.wordlist)
    if not seeded.source_available:
        print(f"Failed to load wordlist: {seeded.error}", file=sys.stderr)
        return 1

    config["last_wordlist_path"] = str(Path(args.wordlist).resolve())
    save_config(config)

    try:
        if args.no_progress:
            report = solver.solve(options)
        else:
            with tqdm(total=solver.max_length + 1, desc="lengths", unit="len", file=sys.stderr) as bar:
                report = solver.solve(options, progress_callback=lambda pct: bar.update(
                    round(pct * bar.total) - bar.n))
    except ValueError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return 2

    if args.dump:
        solver.dump(dump_words=True)

    print_report(report)

    if args.export_json or args.export_csv:
        export_report(args.export_json, args.export_csv, report, args.wordlist, options)
        logger.info("Exported results for '%s'", report.query)
    return 0


if __name__ == "__main__":
    sys.exit(main())
