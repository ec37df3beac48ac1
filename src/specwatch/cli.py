"""CLI entry point for specwatch: list, watch and name test spec files."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from spec_sources.config import (
    DEFAULT_CONFIG_NAME,
    ProjectConfig,
    create_default_config,
    default_project_config,
    load_project_config,
)
from spec_sources.default_name import get_default_spec_file_name
from spec_sources.models import TESTING_TYPES, SpecRecord
from spec_sources.notifier import LoggingNotifier
from specwatch import __version__
from specwatch.project import ProjectContext, ProjectDataSource

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="specwatch",
        description="Find test spec files in a project and watch them for changes.",
        epilog="Examples:\n"
        "  specwatch                                  # List e2e specs\n"
        "  specwatch -t component --watch             # Watch component specs\n"
        "  specwatch --spec 'cypress/e2e/login*'      # Narrow the configured pattern\n"
        "  specwatch --default-name '**/*.cy.{js,ts}' --lang ts\n"
        "  specwatch --init                           # Write specwatch.toml",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_NAME,
        help=f"Path to config file (default: {DEFAULT_CONFIG_NAME}; built-in defaults if missing)",
    )
    parser.add_argument(
        "-t",
        "--testing-type",
        choices=TESTING_TYPES,
        default=None,
        help="Testing type (default: from config)",
    )
    parser.add_argument(
        "--spec",
        nargs="+",
        default=None,
        metavar="PATTERN",
        help="Spec pattern(s) overriding the configured one",
    )
    parser.add_argument("--json", action="store_true", help="Print specs as JSON")
    parser.add_argument("--watch", action="store_true", help="Keep running and print specs on change")
    parser.add_argument(
        "--default-name",
        metavar="PATTERN",
        default=None,
        help="Print an example spec path for PATTERN and exit",
    )
    parser.add_argument("--lang", default=None, help="Preferred file extension for --default-name (e.g. ts)")
    parser.add_argument("--init", action="store_true", help="Create a default config file and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def load_config_or_defaults(config_path: Path) -> ProjectConfig:
    """Load ``config_path`` if it exists, else defaults rooted at the current directory."""
    if config_path.exists():
        return load_project_config(config_path)
    logger.debug(f"No config at {config_path}; using defaults")
    return default_project_config(Path.cwd())


def format_specs(specs: list[SpecRecord], as_json: bool = False) -> str:
    """Render a spec list for the terminal."""
    if as_json:
        return json.dumps([spec.to_dict() for spec in specs], indent=2)
    return "\n".join(spec.relative for spec in specs)


async def watch_specs(source: ProjectDataSource, config: ProjectConfig, args: argparse.Namespace) -> None:
    """Print the spec list now and after every change, until cancelled."""
    options = config.find_specs_options(args.testing_type, args.spec)
    specs = await source.find_specs(options)
    source.set_specs(specs)
    print(format_specs(specs, args.json), flush=True)

    source.start_spec_watcher(options)
    try:
        await asyncio.Event().wait()
    finally:
        source.stop_spec_watcher()


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for specwatch CLI.

    Handles:
    - Argument parsing
    - Config creation and loading
    - One-shot listing or watch mode
    - Error handling and exit codes
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config).resolve()

    try:
        if args.init:
            if create_default_config(config_path):
                print(f"Created default config at: {config_path}")
            else:
                print(f"Config already exists: {config_path}")
            return

        config = load_config_or_defaults(config_path)
        testing_type = args.testing_type or config.testing_type

        if args.default_name:
            print(get_default_spec_file_name(args.default_name, testing_type, args.lang))
            return

        ctx = ProjectContext(current_project=config.project_root)

        if args.watch:
            source = ProjectDataSource(
                ctx,
                on_specs_changed=lambda specs: print(format_specs(specs, args.json), flush=True),
                notifier=LoggingNotifier(project=str(config.project_root)),
                debounce_ms=config.debounce_ms,
            )
            asyncio.run(watch_specs(source, config, args))
            return

        source = ProjectDataSource(ctx)
        specs = source.find_specs_sync(config.find_specs_options(testing_type, args.spec))
        output = format_specs(specs, args.json)
        if output:
            print(output)

    except KeyboardInterrupt:
        # Gracefully handle Ctrl+C
        sys.exit(130)
    except PermissionError as e:
        print(f"Error: Permission denied: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
