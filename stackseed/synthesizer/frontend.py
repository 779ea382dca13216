"""Frontend file synthesis and command planning for the CSS step."""

from __future__ import annotations

from pathlib import Path

from ..config import PackageManagerConfig
from ..runner import CommandSpec
from .commands import init_tailwind, install_css_library
from .css import get_css_rule
from .files import GeneratedFile
from .templates import TemplateRenderer, default_renderer

TEMPLATE_CHOICES: tuple[str, ...] = ("vanilla", "react", "vue", "preact")
DEFAULT_TEMPLATE = "react"

# Build-config templates, rendered to paths relative to the frontend root.
_BUILD_CONFIG_FILES: tuple[tuple[str, str], ...] = (
    ("frontend/tailwind.config.js.j2", "tailwind.config.js"),
    ("frontend/index.css.j2", "src/index.css"),
)


def css_commands(
    pm: PackageManagerConfig,
    library_id: str | None,
    frontend_dir: Path,
) -> list[CommandSpec]:
    """Commands that install (and, if needed, initialise) a CSS library.

    ``None`` means no library was chosen and yields no commands.  Libraries
    without build configuration need exactly one install command.
    """
    if library_id is None:
        return []
    rule = get_css_rule(library_id)
    commands = [install_css_library(pm, rule, frontend_dir)]
    if rule.build_config:
        commands.append(init_tailwind(pm, frontend_dir))
    return commands


def synthesize_css_files(
    library_id: str | None,
    frontend_dir: Path,
    renderer: TemplateRenderer | None = None,
) -> list[GeneratedFile]:
    """Files fully overwritten for libraries that need build configuration.

    Returns the Tailwind config and the base stylesheet for utility-first
    frameworks and an empty list for everything else.
    """
    if library_id is None or not get_css_rule(library_id).build_config:
        return []
    renderer = renderer or default_renderer()
    return [
        GeneratedFile(path=Path(frontend_dir) / output, content=renderer.render(template, {}))
        for template, output in _BUILD_CONFIG_FILES
    ]
