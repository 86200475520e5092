"""
Entry point for the ``fsmkit`` command.

Commands are ``fsmkit <domain> <command>``. Every subfolder of this package
is a domain (today only ``graph``) and every public module in it is a
command exposing ``SUMMARY``, ``register_args(parser)`` and
``main(args) -> int``. Modules are imported when the parser is built.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from types import ModuleType

from fsmkit.core.stdlib_logging import configure_logging

logger = logging.getLogger(__name__)

CLI_DIR = Path(__file__).parent


def _is_public_module(path: Path) -> bool:
    return path.suffix == ".py" and not path.name.startswith("_")


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """Map each command domain (e.g. ``graph``) to its folder."""
    return {
        item.name: item
        for item in sorted(CLI_DIR.iterdir())
        if item.is_dir()
        and not item.name.startswith("_")
        and any(_is_public_module(f) for f in item.iterdir())
    }


@lru_cache(maxsize=8)
def discover_commands(domain: str) -> dict[str, dict]:
    """Import the command modules of ``domain``.

    Returns a mapping of command name to its ``module``, ``summary``,
    ``register_args`` and ``main``. Import errors propagate.
    """
    commands: dict[str, dict] = {}
    for item in sorted((CLI_DIR / domain).glob("*.py")):
        if not _is_public_module(item):
            continue
        module: ModuleType = importlib.import_module(f"fsmkit.cli.{domain}.{item.stem}")
        commands[item.stem] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", f"{domain} {item.stem}"),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build ``fsmkit`` with one sub-parser per domain and command."""
    from fsmkit import __version__

    parser = argparse.ArgumentParser(
        prog="fsmkit",
        description="fsmkit - declarative finite state machines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        help="Logging level for fsmkit loggers (default: $FSMKIT_LOG_LEVEL or WARNING)",
    )

    domains = parser.add_subparsers(dest="domain", title="domains", metavar="<domain>")
    for domain_name in discover_domains():
        commands = discover_commands(domain_name)
        if not commands:
            continue

        domain_parser = domains.add_parser(domain_name, help=f"{domain_name.title()} commands")
        domain_parser.set_defaults(_domain_parser=domain_parser)
        command_parsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            metavar="<command>",
        )
        for cmd_name, info in commands.items():
            cmd_parser = command_parsers.add_parser(cmd_name.replace("_", "-"), help=info["summary"])
            if info["register_args"]:
                info["register_args"](cmd_parser)
            if info["main"]:
                cmd_parser.set_defaults(_func=info["main"])

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run ``fsmkit`` and return its exit code.

    0 on success, 1 when a command fails, 130 on Ctrl-C. Argument errors
    exit with argparse's status 2.
    """
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    configure_logging(level=args.log_level)

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if func is None:
        getattr(args, "_domain_parser", parser).print_help()
        return 0

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Command %s %s failed", args.domain, args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
