"""Command-line entry point.

Usage::

    stackseed
    stackseed --mode frontend
    stackseed --yes --base-dir ./my-app
    python -m stackseed --package-manager pnpm
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from .collector import DefaultsCollector, RichPromptCollector, SelectionCollector
from .config import ScaffoldConfig
from .orchestrator import ScaffoldOrchestrator
from .utils import console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackseed",
        description="stackseed -- scaffold an Express backend and a Vite frontend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stackseed\n"
            "  stackseed --mode frontend\n"
            "  stackseed --yes --base-dir ./my-app\n"
        ),
    )
    parser.add_argument(
        "--base-dir", "-C",
        default=None,
        help="Directory in which the project folders are created (default: cwd)",
    )
    parser.add_argument(
        "--mode",
        choices=["fullstack", "backend", "frontend"],
        default=None,
        help="Which branches to scaffold (default: fullstack)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Accept every default without prompting",
    )
    parser.add_argument(
        "--package-manager",
        default=None,
        help="Package manager executable (default: npm)",
    )
    return parser


def build_config(args: argparse.Namespace) -> ScaffoldConfig:
    """Environment defaults, overridden by explicit flags."""
    config = ScaffoldConfig.from_env()
    updates: dict[str, object] = {}
    if args.base_dir:
        updates["base_dir"] = Path(args.base_dir)
    if args.mode:
        updates["mode"] = args.mode
    if args.package_manager:
        updates["package_manager"] = config.package_manager.model_copy(
            update={"executable": args.package_manager}
        )
    if updates:
        config = ScaffoldConfig.model_validate({**config.model_dump(), **updates})
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``stackseed`` and ``python -m stackseed``."""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except (ValidationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {exc}")
        sys.exit(2)

    if not config.base_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Base directory not found: {config.base_dir}")
        sys.exit(2)

    collector: SelectionCollector = DefaultsCollector() if args.yes else RichPromptCollector()
    orchestrator = ScaffoldOrchestrator(config, collector)

    try:
        report = asyncio.run(orchestrator.run())
    except KeyboardInterrupt:
        console.print("[bold red]Aborted.[/bold red]")
        sys.exit(130)

    if report.success:
        console.print("[bold green]Scaffold completed successfully![/bold green]")
    else:
        console.print("[bold red]Scaffold failed.[/bold red]")
        sys.exit(1)
