"""
CLI command entry points for orsr_parser.

These functions are registered as console scripts in pyproject.toml.
"""

import argparse
import sys
from pathlib import Path

from orsr_parser.cli.args import add_common_arguments, add_output_arguments, settings_from_args
from orsr_parser.cli.logging import setup_logging
from orsr_parser.constants import COURT_ANY
from orsr_parser.exceptions import OrsrError


def _print(rendered) -> None:
    print(rendered if isinstance(rendered, str) else repr(rendered))


def _connector(args):
    from orsr_parser.connector import OrsrConnector

    return OrsrConnector(settings=settings_from_args(args))


def run_detail(argv: list[str] | None = None) -> int:
    """Entry point for orsr-detail command."""
    parser = argparse.ArgumentParser(description="Extract the detail record of a register entity")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", type=int, help="Entity ID (requires --sid)")
    target.add_argument("--ico", help="IČO (8 digits)")
    target.add_argument("--link", help='Partial link from search results, e.g. "vypis.asp?ID=54190&SID=7&P=0"')
    parser.add_argument("--sid", type=int, default=COURT_ANY, help="Court ID 0-9 (default: 0 = any)")
    parser.add_argument("--full", action="store_true", help="Full historical extract instead of the current one")
    parser.add_argument("--normalize", action="store_true", help="Print the flat form view only")
    add_output_arguments(parser)
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    logger = setup_logging("orsr_detail", verbose=args.verbose, log_dir=args.log_dir)
    connector = _connector(args)
    full = True if args.full else None

    try:
        if args.id is not None:
            record = connector.get_detail_by_id(args.id, args.sid, args.full)
        elif args.ico:
            record = connector.get_detail_by_ico(args.ico, full=full)
        else:
            record = connector.get_detail_by_partial_link(args.link, full=full)
    except OrsrError as e:
        logger.error(f"Error: {e}")
        return 1
    finally:
        connector.close()

    if not record:
        logger.warning("Nothing found")
        return 1

    if args.normalize:
        record = connector.normalize_data(record)
    _print(connector.render(record, args.format))
    return 0


def run_search(argv: list[str] | None = None) -> int:
    """Entry point for orsr-search command."""
    parser = argparse.ArgumentParser(description="Search the register")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--name", help="Company name (or its part)")
    target.add_argument("--ico", help="IČO (8 digits)")
    target.add_argument("--surname", help="Surname of a person")
    parser.add_argument("--first-name", default="", help="First name of the person (with --surname)")
    add_output_arguments(parser)
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    logger = setup_logging("orsr_search", verbose=args.verbose, log_dir=args.log_dir)
    connector = _connector(args)

    try:
        if args.name:
            results = connector.find_by_obchodne_meno(args.name)
        elif args.ico:
            results = connector.find_by_ico(args.ico)
        else:
            results = connector.find_by_priezvisko_meno(args.surname, args.first_name)
    except OrsrError as e:
        logger.error(f"Error: {e}")
        return 1
    finally:
        connector.close()

    logger.info(f"Found {len(results)} results")
    _print(connector.render(results, args.format))
    return 0


def read_identifiers(path: Path) -> list[str]:
    """
    Read batch input: one IČO or partial detail link per line.

    Blank lines and lines starting with # are ignored.
    """
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def run_batch(argv: list[str] | None = None) -> int:
    """Entry point for orsr-batch command."""
    from tqdm import tqdm

    from orsr_parser.output.serializers import to_json

    parser = argparse.ArgumentParser(description="Extract detail records for many entities")
    parser.add_argument("input", type=Path, help="File with one IČO or partial link per line")
    parser.add_argument("--output", "-o", type=Path, required=True, help="Output file (JSON lines)")
    parser.add_argument("--full", action="store_true", help="Full historical extracts")
    add_common_arguments(parser)
    args = parser.parse_args(argv)

    logger = setup_logging("orsr_batch", verbose=args.verbose, log_dir=args.log_dir)
    identifiers = read_identifiers(args.input)
    logger.info(f"Extracting {len(identifiers)} entities")

    connector = _connector(args)
    full = True if args.full else None
    failed = 0
    written = 0

    try:
        with open(args.output, "w", encoding="utf-8") as out:
            for identifier in tqdm(identifiers, desc="Extracting", unit="entity"):
                try:
                    if "vypis.asp" in identifier:
                        record = connector.get_detail_by_partial_link(identifier, full=full)
                    else:
                        record = connector.get_detail_by_ico(identifier, full=full)
                except OrsrError as e:
                    logger.warning(f"{identifier}: {e}")
                    failed += 1
                    continue
                if not record:
                    logger.warning(f"{identifier}: nothing found")
                    failed += 1
                    continue
                out.write(to_json(record) + "\n")
                written += 1
    finally:
        connector.close()

    logger.info(f"Wrote {written} records to {args.output} ({failed} failed)")
    return 0 if not failed else 2


def run_cache(argv: list[str] | None = None) -> int:
    """Entry point for orsr-cache command."""
    from orsr_parser.cache import get_cache

    parser = argparse.ArgumentParser(description="Manage the page cache")
    parser.add_argument("command", choices=["stats", "list", "clear"])
    parser.add_argument("--namespace", "-n", help="Filter by namespace (detail, search)")
    parser.add_argument("--limit", type=int, default=20, help="Limit for list")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    args = parser.parse_args(argv)

    cache = get_cache()

    if args.command == "stats":
        stats = cache.stats()
        print(f"Cache: {stats['cache_dir']}")
        print(f"  Total entries: {stats['total']}")
        print(f"  Size: {stats['size_mb']} MB")
        print("  By namespace:")
        for ns, count in sorted(stats["by_namespace"].items()):
            print(f"    {ns}: {count}")

    elif args.command == "list":
        keys = cache.keys(namespace=args.namespace, limit=args.limit)
        print(f"Keys ({args.namespace or 'all'}, limit {args.limit}):")
        for key in keys:
            print(f"  {key}")

    elif args.command == "clear":
        if not args.namespace:
            print("Specify --namespace to clear (detail or search)")
            return 1
        if not args.yes:
            confirm = input(f"Clear all {args.namespace} entries? [y/N] ")
            if confirm.lower() != "y":
                print("Aborted")
                return 1
        count = cache.clear_namespace(args.namespace)
        print(f"Cleared {count} entries from {args.namespace}")

    return 0


def main_detail():
    sys.exit(run_detail())


def main_search():
    sys.exit(run_search())


def main_batch():
    sys.exit(run_batch())


def main_cache():
    sys.exit(run_cache())
