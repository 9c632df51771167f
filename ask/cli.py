import argparse
import sys
from functools import partial
from typing import List, Optional

from rich.console import Console

from . import __version__, ui
from .api import CommandSynthesizer, create_client
from .config import get_config, set_config_value
from .errors import ConfigError
from .executor import executor
from .logger import setup_logging
from .messages import get_message
from .session import AskSession

console = Console()


def is_config_command(argv: List[str]) -> bool:
    """Only `set config KEY=VALUE` and `show config`, exactly, are subcommands."""
    if argv == ["show", "config"]:
        return True
    return len(argv) == 3 and argv[:2] == ["set", "config"] and "=" in argv[2]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ask",
        description="Turn a natural-language request into a shell command, screen it and run it.",
        epilog="Use `ask set config KEY=VALUE` to persist settings and `ask show config` to inspect them.",
    )
    parser.add_argument("prompt", nargs="+", help="What you want to do, in plain language.")
    parser.add_argument("-d", "--dry-run", action="store_true", help="Only show the command, do not run it.")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", default=True,
                        help="Show command output (default).")
    parser.add_argument("-q", "--quiet", dest="verbose", action="store_false", help="Hide command output.")
    parser.add_argument("-D", "--debug", action="store_true", help="Show the prompts sent to the model.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ask", description="Manage persisted configuration.")
    subparsers = parser.add_subparsers(dest="action", required=True)

    set_parser = subparsers.add_parser("set", help="Persist a configuration value.")
    set_parser.add_argument("target", choices=["config"])
    set_parser.add_argument("assignment", metavar="KEY=VALUE", help="e.g. model=gpt-4o-mini")

    show_parser = subparsers.add_parser("show", help="Print the resolved configuration.")
    show_parser.add_argument("target", choices=["config"])
    return parser


def handle_config_command(argv: List[str]) -> int:
    """Handler for `ask set config KEY=VALUE` and `ask show config`."""
    args = build_config_parser().parse_args(argv)
    config = get_config()

    if args.action == "show":
        console.print(str(config), markup=False)
        return 0

    key, sep, value = args.assignment.partition("=")
    if not sep or not key.strip():
        console.print(f"Error: expected KEY=VALUE, got '{args.assignment}'.", style="bold red", markup=False)
        return 1

    try:
        name, _ = set_config_value(key, value.strip(), config.config_file)
    except ConfigError as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        return e.exit_code

    console.print(get_message("config_saved", config.language, key=name, path=config.config_file), markup=False)
    return 0


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the request and return the exit code."""
    if argv is None:
        argv = sys.argv[1:]

    if is_config_command(argv):
        return handle_config_command(argv)

    args = build_parser().parse_args(argv)
    config = get_config()
    setup_logging(config, debug=args.debug)

    problems = config.validate()
    if problems:
        ui.display_config_problems(problems, config.language)
        return 1

    synthesizer = CommandSynthesizer(
        create_client(config),
        language=config.language,
        debug=args.debug,
        on_debug=partial(ui.display_debug, language=config.language),
    )
    session = AskSession(
        config,
        synthesizer,
        executor,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )
    return session.run(" ".join(args.prompt))
