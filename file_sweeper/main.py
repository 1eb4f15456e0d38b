import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List

from .core import FileSweeperApp
from .exceptions import FileSweeperError, InputError
from .exclude import ExcludeMatcher
from .models import FileCollection
from .parse import parse_duration, parse_number_ranges, parse_size
from .reporting import ReportGenerator
from .selection.duplicates import KeepPolicy


def setup_logging(verbose: bool):
    """Logs to stderr so that listings on stdout stay clean."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="file-sweeper", description="Clean up unused files.")

    p.add_argument("--exclude", action="append", default=[], metavar="PATTERN",
                   help="Exclude files that match this shell globbing pattern")
    p.add_argument("--exclude-from", type=Path, default=None, metavar="FILE",
                   help="Exclude files that match shell globbing patterns in this file")
    p.add_argument("-t", "--min-time", default="0h", metavar="TIME",
                   help="Only include files last accessed at least this long ago (units h, d, m, y)")
    p.add_argument("--no-duplicates", action="store_true", help="Don't automatically include duplicate files")
    p.add_argument("--keep", choices=[k.value for k in KeepPolicy], default=KeepPolicy.NEWEST.value,
                   help="Which copy of a duplicate group to keep (default: newest)")
    p.add_argument("--no-budget-deduction", action="store_true",
                   help="Don't count duplicates against the size budget")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = p.add_subparsers(dest="command", required=True)

    lp = sub.add_parser("list", help="Print a list of files that should be cleaned up")
    lp.add_argument("size", help="Maximum total size of files to list (e.g. 10GiB)")
    lp.add_argument("source", type=Path, help="Directory to scan")
    lp.add_argument("--paths-only", action="store_true", help="Print only newline-separated file paths")
    lp.add_argument("--csv", type=Path, default=None, help="Also write the list to this CSV file")

    mp = sub.add_parser("move", help="Move files that should be cleaned up")
    mp.add_argument("size", help="Maximum total size of files to move (e.g. 10GiB)")
    mp.add_argument("source", type=Path, help="Directory to scan")
    mp.add_argument("dest", type=Path, help="Directory to move files into")
    mp.add_argument("--no-prompt", action="store_true", help="Don't prompt for confirmation before moving")
    mp.add_argument("--flat", action="store_true", help="Don't preserve directory structure under dest")
    mp.add_argument("--dry-run", action="store_true", help="Simulate the move without modifying disk")

    return p.parse_args(argv)


def get_selection(args, app: FileSweeperApp) -> FileCollection:
    budget = parse_size(args.size)
    min_staleness = parse_duration(args.min_time)

    exclude = ExcludeMatcher.from_file(args.exclude_from) if args.exclude_from else ExcludeMatcher()
    for pattern in args.exclude:
        exclude.add(pattern)

    return app.select(
        root=args.source.resolve(),
        budget=budget,
        min_staleness=min_staleness,
        exclude=exclude,
        deduplicate=not args.no_duplicates,
        keep=KeepPolicy(args.keep),
        deduct_duplicates=not args.no_budget_deduction,
    )


def choose_files(selection: FileCollection, reporter: ReportGenerator,
                 read_input: Callable[[str], str] = input) -> FileCollection:
    """
    Asks which of the listed files to move, then asks for confirmation.
    Returns an empty collection if the user declines.
    """
    print(reporter.format_table(selection))

    while True:
        print("\nSelect which files to transfer. You can specify comma-separated ranges "
              "of numbers (e.g. '1-9,15,17-20'). Leave blank to select all files.")
        try:
            numbers = parse_number_ranges(read_input("> "))
            chosen = _pick(selection, numbers)
            break
        except InputError as e:
            print(f"Invalid selection: {e}")

    print()
    print(reporter.format_table(chosen))
    answer = read_input(f"\nMove these {len(chosen)} files? [y/N] ").strip().lower()
    if answer in ("y", "yes"):
        return chosen
    return FileCollection()


def _pick(selection: FileCollection, numbers: List[int]) -> FileCollection:
    if not numbers:
        return selection
    for num in numbers:
        if not 1 <= num <= len(selection):
            raise InputError(f"{num} is not between 1 and {len(selection)}")
    # Records keep their rank, so duplicates in the input collapse by path
    seen = set()
    chosen = FileCollection()
    for num in numbers:
        record = selection[num - 1]
        if record.path not in seen:
            seen.add(record.path)
            chosen.append(record)
    return chosen


def run(args) -> int:
    app = FileSweeperApp()
    reporter = ReportGenerator()

    logging.debug(f"Source: {args.source}")
    selection = get_selection(args, app)

    if args.command == "list":
        if args.paths_only:
            output = reporter.format_paths(selection)
        else:
            output = reporter.format_table(selection)
        if output:
            print(output)
        if args.csv:
            reporter.write_csv(selection, args.csv)
        return 0

    # move
    if args.no_prompt:
        chosen = selection
    else:
        chosen = choose_files(selection, reporter)

    moved = 0
    if chosen:
        moved = app.move(chosen, args.source.resolve(), args.dest.resolve(),
                         preserve_structure=not args.flat, dry_run=args.dry_run)
    print(f"{moved} files moved")
    return 0


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(130)
    except FileSweeperError as e:
        logging.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
