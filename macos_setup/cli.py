from __future__ import annotations

import argparse
from typing import NoReturn, Optional, Sequence

from .catalog import Catalog
from .lib.env import PATHS
from .report import Console
from .session import RunContext


class ToolArgumentParser(argparse.ArgumentParser):
    """argparse with the tools' error contract: labeled error, hint, exit 1."""

    def error(self, message: str) -> NoReturn:
        prefix = "unrecognized arguments: "
        if message.startswith(prefix):
            message = f"Unknown option: {message[len(prefix):].split()[0]}"
        console = Console()
        console.error(message)
        console.echo("Use --help for usage information", error=True)
        self.exit(1)


def _add_config_file(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-f",
        "--config-file",
        metavar="FILE",
        default=PATHS.config_default,
        help="Use specific config file (default: ~/.macos-setup.cfg)",
    )


def peek_config_path(argv: Optional[Sequence[str]] = None) -> str:
    """Config path from `-f` alone, so `--help` can show the file in effect."""
    pre = ToolArgumentParser(add_help=False, allow_abbrev=False)
    _add_config_file(pre)
    known, _ = pre.parse_known_args(argv)
    return str(known.config_file)


def build_parser(catalog: Catalog, prog: str, config_path: str = PATHS.config_default) -> ToolArgumentParser:
    p = ToolArgumentParser(
        prog=prog,
        description=f"macOS {catalog.title} Script v{catalog.version}",
        epilog=f"Config file location: {config_path}",
        allow_abbrev=False,
    )
    p.add_argument(
        "-c",
        "--use-config",
        action="store_true",
        help="Load settings from config file (still prompts for missing values)",
    )
    p.add_argument(
        "-s",
        "--skip-prompts",
        action="store_true",
        help="Use config file without any prompts (fails if no config)",
    )
    p.add_argument(
        "-o",
        "--save-config",
        action="store_true",
        help=f"Only save configuration, don't run {catalog.verb}",
    )
    _add_config_file(p)
    return p


def context_from_args(args: argparse.Namespace) -> RunContext:
    return RunContext(
        config_path=str(args.config_file),
        use_config=bool(args.use_config),
        skip_prompts=bool(args.skip_prompts),
        save_only=bool(args.save_config),
    )
