"""Command-line builders for the package manager and template tool.

Each builder returns a :class:`~stackseed.runner.CommandSpec` assembled with
``shlex.join`` from already-validated names, so the orchestrator never
formats shell strings itself.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from pathlib import Path

from ..config import PackageManagerConfig
from ..runner import CommandSpec
from .css import CssRule


def _spec(parts: list[str], cwd: Path) -> CommandSpec:
    return CommandSpec(command_line=shlex.join(parts), cwd=Path(cwd))


def init_manifest(pm: PackageManagerConfig, cwd: Path) -> CommandSpec:
    """``npm init -y``"""
    return _spec([*shlex.split(pm.executable), "init", "-y"], cwd)


def install_packages(
    pm: PackageManagerConfig,
    packages: Iterable[str],
    cwd: Path,
    *,
    dev: bool = False,
) -> CommandSpec:
    """``npm install [-D] <packages...>``; with no packages, a plain install."""
    parts = [*shlex.split(pm.executable), "install"]
    if dev:
        parts.append(pm.dev_flag)
    parts.extend(packages)
    return _spec(parts, cwd)


def create_frontend_project(
    pm: PackageManagerConfig,
    project_name: str,
    template: str,
    parent_dir: Path,
) -> CommandSpec:
    """``npm create vite@latest <name> -- --template <template>`` in the parent dir."""
    parts = [*shlex.split(pm.template_tool), project_name, "--", "--template", template]
    return _spec(parts, parent_dir)


def install_css_library(pm: PackageManagerConfig, rule: CssRule, cwd: Path) -> CommandSpec:
    return install_packages(pm, rule.packages, cwd, dev=rule.dev)


def init_tailwind(pm: PackageManagerConfig, cwd: Path) -> CommandSpec:
    """``npx tailwindcss init -p`` (writes the config files it later overwrites)."""
    return _spec([*shlex.split(pm.runner), "tailwindcss", "init", "-p"], cwd)
