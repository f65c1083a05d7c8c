from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .backends import Backends, real_backends
from .catalog import load_catalog
from .cli import build_parser, context_from_args, peek_config_path
from .config_store import ConfigNotFoundError
from .executor import ExecutionContext, execute_plan
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .planner import plan_for
from .report import Console, render_summary
from .session import AskFn, default_answer, prompt_with_default, run_session

logger = logging.getLogger(__name__)

PROGS = {
    "software": "macos-install-software",
    "system": "macos-customize-system",
}

DIVIDER_GLYPHS = {
    "software": "🔷",
    "system": "🎨",
}


def run_tool(
    tool: str,
    argv: Optional[list[str]] = None,
    *,
    backends: Optional[Backends] = None,
    ask: Optional[AskFn] = None,
    console: Optional[Console] = None,
    log_path: str = DEFAULT_LOG_PATH,
) -> int:
    """Parse flags, resolve settings, then plan and execute unless save-only."""

    catalog = load_catalog(tool)
    try:
        parser = build_parser(catalog, PROGS[tool], config_path=peek_config_path(argv))
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    ctx = context_from_args(args)
    actual_log_path = configure_logging(log_path=log_path)
    logger.info("%s v%s starting (mode=%s, config=%s)", PROGS[tool], catalog.version, ctx.mode.value, ctx.config_path)

    console = console or Console(divider_glyph=DIVIDER_GLYPHS[tool])
    ask = ask or prompt_with_default

    console.echo(f"{catalog.banner} v{catalog.version}")
    console.echo("=" * 37)
    console.echo()

    try:
        session = run_session(catalog, ctx, ask, console)
    except ConfigNotFoundError:
        console.error(f"No config file found at {ctx.config_path} and --skip-prompts specified")
        console.echo("Use --help for usage information", error=True)
        return 1

    if session.stop:
        return 0

    backends = backends or real_backends()
    plan = plan_for(catalog, session.settings, backends.capabilities())
    logger.info("Planned %d actions: %s", len(plan), ", ".join(a.action_id for a in plan))

    exec_ask = default_answer if ctx.skip_prompts else ask
    result = execute_plan(plan, ExecutionContext(backends=backends, ask=exec_ask, console=console))

    render_summary(
        catalog,
        result,
        console,
        config_path=ctx.config_path,
        config_exists=Path(ctx.config_path).expanduser().is_file(),
    )
    logger.info("Log written to %s", actual_log_path)
    return 0


def install_software_main(argv: Optional[list[str]] = None) -> int:
    return run_tool("software", argv)


def customize_system_main(argv: Optional[list[str]] = None) -> int:
    return run_tool("system", argv)
