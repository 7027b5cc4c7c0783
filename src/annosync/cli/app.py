"""
annosync - Store Recogito annotations in GitHub issues.

Commands:
    serve     Serve the annotation frontend and the annotation endpoints
    export    Write the stored annotations of a workflow as JSON (read-only)
    retitle   Move issue titles from one prefix to another
    relabel   Swap one label for another on annotation issues

Maintenance commands run in DRY-RUN mode unless --execute is given.

Configuration is read from the environment and a .env file
(ANNOSYNC_OWNER, ANNOSYNC_REPO, GITHUB_TOKEN, ANNOSYNC_MODE, ...).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import uvicorn

from ..adapters.config import EnvironmentConfigProvider
from ..adapters.github import GitHubAdapter
from ..application.maintenance import IssueMaintenance
from ..application.sync import AnnotationSyncEngine
from ..core.exceptions import ConfigError
from ..core.ports.config_provider import AppConfig
from ..core.ports.issue_tracker import IssueTrackerError, IssueTrackerPort
from ..web import create_app
from .exit_codes import ExitCode
from .output import Console


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="annosync",
        description="Store Recogito annotations in GitHub issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file (defaults to ./.env)",
    )

    parser.add_argument(
        "--owner",
        type=str,
        help="Repository owner (or set ANNOSYNC_OWNER)",
    )

    parser.add_argument(
        "--repo",
        type=str,
        help="Repository name (or set ANNOSYNC_REPO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    serve = subparsers.add_parser("serve", help="Run the annotation server")
    serve.add_argument("--host", type=str, help="Address to bind (default 127.0.0.1)")
    serve.add_argument("--port", type=int, help="Port to listen on (default 3000)")
    mode = serve.add_mutually_exclusive_group()
    mode.add_argument(
        "--read-only",
        dest="mode",
        action="store_const",
        const="read-only",
        help="Reject annotation writes",
    )
    mode.add_argument(
        "--read-write",
        dest="mode",
        action="store_const",
        const="read-write",
        help="Accept annotation writes (needs a token)",
    )

    # export
    export = subparsers.add_parser("export", help="Export stored annotations as JSON")
    export.add_argument(
        "--workflow", "-w",
        type=str,
        default=AppConfig.DEFAULT_WORKFLOW,
        help="Workflow to export (annotation or validation)",
    )
    export.add_argument(
        "--output", "-o",
        type=Path,
        help="File to write (defaults to stdout)",
    )

    # retitle
    retitle = subparsers.add_parser("retitle", help="Rewrite issue title prefixes")
    retitle.add_argument("--from", dest="old", required=True, help="Prefix to replace")
    retitle.add_argument("--to", dest="new", required=True, help="Replacement prefix")
    _add_execution_flags(retitle)

    # relabel
    relabel = subparsers.add_parser("relabel", help="Swap a label on annotation issues")
    relabel.add_argument("--from", dest="old", required=True, help="Label to remove")
    relabel.add_argument("--to", dest="new", required=True, help="Label to add")
    relabel.add_argument(
        "--workflow", "-w",
        type=str,
        default=AppConfig.DEFAULT_WORKFLOW,
        help="Only touch issues titled with this workflow's prefix",
    )
    _add_execution_flags(relabel)

    return parser


def _add_execution_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually execute changes (default is dry-run)",
    )
    parser.add_argument(
        "--no-confirm",
        action="store_true",
        help="Skip confirmation prompts (use with caution!)",
    )


# =============================================================================
# Commands
# =============================================================================

def run_serve(
    args: argparse.Namespace,
    config: AppConfig,
    tracker: IssueTrackerPort,
    console: Console,
) -> int:
    """Serve the web app until interrupted."""
    app = create_app(config, tracker)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )
    return ExitCode.SUCCESS


def run_export(
    args: argparse.Namespace,
    config: AppConfig,
    tracker: IssueTrackerPort,
    console: Console,
) -> int:
    """Write the annotations of one workflow, ``meta`` included."""
    logger = logging.getLogger("export")

    try:
        workflow = config.workflow(args.workflow)
    except KeyError:
        logger.error(f"Unknown workflow: {args.workflow}")
        return ExitCode.ERROR

    engine = AnnotationSyncEngine(tracker, workflow, per_page=config.tracker.per_page)
    annotations = [a.to_dict() for a in engine.list_annotations()]
    text = json.dumps(annotations, indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Exported {len(annotations)} annotations to {args.output}")
    else:
        console.print(text)

    return ExitCode.SUCCESS


def run_retitle(
    args: argparse.Namespace,
    config: AppConfig,
    tracker: IssueTrackerPort,
    console: Console,
) -> int:
    """Rewrite issue titles starting with one prefix to another."""
    stop = _check_write(args, tracker, console, f"Retitle '{args.old}' to '{args.new}'?")
    if stop is not None:
        return stop

    maintenance = IssueMaintenance(
        tracker,
        config.repository,
        dry_run=not args.execute,
        per_page=config.tracker.per_page,
    )
    result = maintenance.retitle(args.old, args.new)
    console.maintenance_result("Retitle", result)
    return ExitCode.SUCCESS if result.success else ExitCode.TRACKER_ERROR


def run_relabel(
    args: argparse.Namespace,
    config: AppConfig,
    tracker: IssueTrackerPort,
    console: Console,
) -> int:
    """Swap one label for another on the issues of a workflow."""
    logger = logging.getLogger("relabel")

    try:
        workflow = config.workflow(args.workflow)
    except KeyError:
        logger.error(f"Unknown workflow: {args.workflow}")
        return ExitCode.ERROR

    stop = _check_write(args, tracker, console, f"Relabel '{args.old}' to '{args.new}'?")
    if stop is not None:
        return stop

    maintenance = IssueMaintenance(
        tracker,
        config.repository,
        dry_run=not args.execute,
        per_page=config.tracker.per_page,
    )
    result = maintenance.relabel(args.old, args.new, title_prefix=workflow.title_prefix)
    console.maintenance_result("Relabel", result)
    return ExitCode.SUCCESS if result.success else ExitCode.TRACKER_ERROR


def _check_write(
    args: argparse.Namespace,
    tracker: IssueTrackerPort,
    console: Console,
    question: str,
) -> Optional[int]:
    """
    Show the mode banner; in execute mode check the token and confirm.

    Returns:
        The exit code to stop with, or None to go ahead
    """
    if not args.execute:
        console.dry_run_banner()
        return None

    if not tracker.can_write:
        logging.getLogger("main").error(
            "Executing needs a token - set GITHUB_TOKEN or ANNOSYNC_TOKEN_FILE"
        )
        return ExitCode.CONFIG_ERROR

    if args.no_confirm or console.confirm(question):
        return None

    console.info("Aborted.")
    return ExitCode.SUCCESS


COMMANDS: dict[str, Callable[..., int]] = {
    "serve": run_serve,
    "export": run_export,
    "retitle": run_retitle,
    "relabel": run_relabel,
}


# =============================================================================
# Main
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("main")

    overrides = {
        "owner": args.owner,
        "repo": args.repo,
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
        "mode": getattr(args, "mode", None),
        "verbose": True if args.verbose else None,
    }

    provider = EnvironmentConfigProvider(env_file=args.env_file, cli_overrides=overrides)
    try:
        config = provider.load()
    except ConfigError as e:
        logger.error(str(e))
        return ExitCode.CONFIG_ERROR

    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    tracker = GitHubAdapter(config.tracker)
    console = Console(verbose=config.verbose)

    try:
        return COMMANDS[args.command](args, config, tracker, console)
    except IssueTrackerError as e:
        logger.error(f"Tracker error: {e}")
        return ExitCode.TRACKER_ERROR


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
