"""
CLI - Command-line interface for kerntune.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .commands import TunerCommands
from .config import Config
from .errors import TunerError
from .ui.console import ConsoleUI

logger = logging.getLogger(__name__)

PROFILE_CHOICES = "server, desktop, laptop"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kerntune",
        description="Profile-based Linux kernel tunable manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    kerntune profile
    kerntune suggest --profile server
    sudo kerntune apply --auto
    sudo kerntune save
    sudo kerntune reset

Environment Variables:
    KERNTUNE_SYSFS_ROOT   Directory standing in for / (testing)
    KERNTUNE_BACKUP_FILE  Backup location (default /etc/kerntune/backup.json)
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to a TOML config file")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", default=None,
                        help="Only warnings, errors and prompts")
    parser.add_argument("--no-color", action="store_true", default=None,
                        help="Disable colored output")
    parser.add_argument("--sysfs-root", help=argparse.SUPPRESS)
    parser.add_argument("--backup-file", help=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    def add_profile_option(sub):
        sub.add_argument("-p", "--profile", help=f"Profile to use ({PROFILE_CHOICES}); detected if omitted")

    sub = subparsers.add_parser("profile", help="Show the detected profile and its targets")
    add_profile_option(sub)

    sub = subparsers.add_parser("suggest", help="Show the changes a profile would make")
    add_profile_option(sub)

    sub = subparsers.add_parser("apply", help="Apply profile changes now (root)")
    add_profile_option(sub)
    sub.add_argument("-y", "--auto", action="store_true", default=None,
                     help="Apply without confirmation or per-change progress")

    sub = subparsers.add_parser("save", help="Persist a profile across reboots (root)")
    add_profile_option(sub)
    sub.add_argument("--no-reload", action="store_true", default=None,
                     help="Do not reload sysctl/udev after writing drop-ins")

    sub = subparsers.add_parser("reset", help="Restore original values from backup (root)")
    sub.add_argument("--no-reload", action="store_true", default=None,
                     help="Do not reload sysctl/udev after removing drop-ins")

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False, quiet: bool = False, console: Optional[Console] = None) -> None:
    """Route log records through rich on stderr."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)

    try:
        config = Config.load(args.config)
    except (OSError, ValueError, ImportError) as e:
        ConsoleUI().print_error(f"Cannot load configuration: {e}")
        return 1
    config.override_from_args(args)

    setup_logging(config.output.verbose, config.output.quiet)
    logger.debug("Configuration:\n%s", config.summary())
    ui = ConsoleUI(quiet=config.output.quiet, color=config.output.color)

    problems = config.validate()
    if problems:
        for problem in problems:
            ui.print_error(problem)
        return 1

    commands = TunerCommands(config, ui=ui)
    profile_name = getattr(args, "profile", None)

    try:
        if args.command == "profile":
            commands.profile(profile_name)
        elif args.command == "suggest":
            commands.suggest(profile_name)
        elif args.command == "apply":
            commands.apply(profile_name, auto=args.auto)
        elif args.command == "save":
            commands.save(profile_name)
        elif args.command == "reset":
            commands.reset()
    except TunerError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        ui.print_error(str(e))
        return 1
    except OSError as e:
        ui.print_error(f"{args.command} failed: {e}")
        return 1
    except KeyboardInterrupt:
        ui.print_error("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
