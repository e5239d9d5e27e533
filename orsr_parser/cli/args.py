"""
Argument parsing utilities for the orsr_parser CLI.

Provides the argument groups shared by the commands.
"""

from pathlib import Path

from orsr_parser.constants import OUTPUT_FORMATS


def add_output_arguments(parser):
    """
    Add --format and --indent arguments to an ArgumentParser.

    Args:
        parser: argparse.ArgumentParser instance
    """
    parser.add_argument(
        "--format",
        "-f",
        choices=[fmt for fmt in OUTPUT_FORMATS if fmt],
        default="json",
        help="Output format (default: json)",
    )


def add_common_arguments(parser):
    """
    Add --cache, --lenient, --verbose and --log-dir arguments.

    Args:
        parser: argparse.ArgumentParser instance
    """
    parser.add_argument(
        "--cache",
        action="store_true",
        help="Read and write fetched pages from the disk cache",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Return an empty record for unparseable pages instead of failing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug messages")
    parser.add_argument("--log-dir", type=Path, default=None, help="Write a debug log file to this directory")


def settings_from_args(args):
    """Settings with the command line overrides applied."""
    from orsr_parser.config import get_settings

    overrides = {}
    if getattr(args, "cache", False):
        overrides["cache_enabled"] = True
    if getattr(args, "lenient", False):
        overrides["strict_markup"] = False
    settings = get_settings()
    return settings.model_copy(update=overrides) if overrides else settings
