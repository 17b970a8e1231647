"""CLI entry point for the Project File Finder."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from projfind.config import ConfigurationError, ProjectConfig, create_config_template, load_config
from projfind.interactive import Picker, open_file, prompt_choice
from projfind.tools import (
    CommandFailedError,
    RootLocator,
    SearchCommandBuilder,
    build_catalog,
    run_search,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_EMPTY = 1
EXIT_ERROR = 2


def load_effective_config(args: argparse.Namespace) -> ProjectConfig:
    """Load the configuration file and apply command line overrides."""
    result = load_config(args.config)
    return result.config.with_overrides(
        project_root=args.root,
        patterns=args.patterns,
    )


def find_file(start: str, config: ProjectConfig, picker: Picker = prompt_choice, print_only: bool = False) -> int:
    """Build the catalog, let the user pick a file, and open it.

    Args:
        start: File or directory inside the project
        config: Effective configuration
        picker: Chooses one label from the catalog
        print_only: Print the chosen path instead of opening it

    Returns:
        Process exit status
    """
    catalog = build_catalog(start, config)
    if catalog.is_empty():
        print(f"No files found under {catalog.root}", file=sys.stderr)
        return EXIT_EMPTY

    label = picker(catalog.labels())
    if label is None:
        return EXIT_OK

    path = catalog.lookup(label)
    if path is None:
        print(f"Unknown selection: {label}", file=sys.stderr)
        return EXIT_ERROR

    if print_only:
        print(path)
        return EXIT_OK
    return open_file(path)


def list_files(start: str, config: ProjectConfig) -> int:
    """Print the catalog as label<TAB>path lines."""
    catalog = build_catalog(start, config)
    for entry in catalog.entries:
        print(f"{entry.label}\t{entry.full_path}")
    return EXIT_OK if not catalog.is_empty() else EXIT_EMPTY


def grep_project(query: Optional[str], start: str, config: ProjectConfig, dry_run: bool = False) -> int:
    """Search project sources for ``query`` and print the matches.

    Prompts for the query when it is not given. The search's own exit status
    is returned unchanged.
    """
    if query is None:
        try:
            query = input("Grep project for: ")
        except EOFError:
            return EXIT_OK
    if not query.strip():
        return EXIT_OK

    root = RootLocator(config).locate(start)
    command = SearchCommandBuilder(config).build(query, root)

    if dry_run:
        print(command.to_shell())
        return EXIT_OK

    result = run_search(command, config)
    sys.stdout.write(result.stdout)
    if result.stderr:
        sys.stderr.write(result.stderr)
    return result.exit_status


def show_root(start: str, config: ProjectConfig) -> int:
    print(RootLocator(config).locate(start))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projfind",
        description="Find files in the current project and search its sources",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--root", help="Use this directory as the project root")
    parser.add_argument(
        "--pattern",
        dest="patterns",
        action="append",
        help="File name glob to include (repeatable, replaces configured patterns)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    find_parser = subparsers.add_parser("find-file", help="Pick a project file and open it")
    find_parser.add_argument("start", nargs="?", default=".", help="File or directory inside the project")
    find_parser.add_argument("--print", dest="print_only", action="store_true",
                             help="Print the chosen path instead of opening it")

    list_parser = subparsers.add_parser("list", help="Print the project file catalog")
    list_parser.add_argument("start", nargs="?", default=".", help="File or directory inside the project")

    grep_parser = subparsers.add_parser("grep", help="Search project sources")
    grep_parser.add_argument("query", nargs="?", help="Pattern to search for (prompted when omitted)")
    grep_parser.add_argument("--start", default=".", help="File or directory inside the project")
    grep_parser.add_argument("--dry-run", action="store_true", help="Print the search command instead of running it")

    root_parser = subparsers.add_parser("root", help="Print the detected project root")
    root_parser.add_argument("start", nargs="?", default=".", help="File or directory inside the project")

    init_parser = subparsers.add_parser("init-config", help="Write a template configuration file")
    init_parser.add_argument("path", help="Where to write the template")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "init-config":
            create_config_template(args.path)
            print(f"Wrote configuration template to {Path(args.path)}")
            return EXIT_OK

        config = load_effective_config(args)

        if args.command == "find-file":
            return find_file(args.start, config, print_only=args.print_only)
        if args.command == "list":
            return list_files(args.start, config)
        if args.command == "grep":
            return grep_project(args.query, args.start, config, dry_run=args.dry_run)
        if args.command == "root":
            return show_root(args.start, config)
    except (ConfigurationError, CommandFailedError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"projfind: {e}", file=sys.stderr)
        return EXIT_ERROR

    parser.error(f"Unknown command: {args.command}")
    return EXIT_ERROR


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
