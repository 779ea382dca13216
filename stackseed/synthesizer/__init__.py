"""Template synthesis -- pure mapping from selections to file text.

Quick usage::

    from stackseed.synthesizer import synthesize_entry_file

    text = synthesize_entry_file(["mongoose", "cors", "dotenv", "express"])
"""

from stackseed.synthesizer.backend import (
    BackendSynthesizer,
    apply_manifest_patch,
    patch_manifest_data,
    synthesize_connector_file,
    synthesize_entry_file,
    synthesize_env_file,
)
from stackseed.synthesizer.files import GeneratedFile, write_files
from stackseed.synthesizer.frontend import css_commands, synthesize_css_files
from stackseed.synthesizer.packages import (
    PACKAGE_CATALOG,
    PackageRule,
    plan_entry_sections,
    resolve_selected_packages,
)
from stackseed.synthesizer.templates import TemplateRenderer

__all__ = [
    "BackendSynthesizer",
    "GeneratedFile",
    "PACKAGE_CATALOG",
    "PackageRule",
    "TemplateRenderer",
    "apply_manifest_patch",
    "css_commands",
    "patch_manifest_data",
    "plan_entry_sections",
    "resolve_selected_packages",
    "synthesize_connector_file",
    "synthesize_css_files",
    "synthesize_entry_file",
    "synthesize_env_file",
    "write_files",
]
