"""Backend file synthesis.

Pure functions mapping a package selection to the text of the Express entry
file, the database connector and the ``.env`` file, plus the read-parse-
mutate-write patch applied to the ``package.json`` created by ``npm init``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..config import BackendConfig
from ..errors import ManifestParseError, WriteError
from .files import GeneratedFile
from .packages import has_database_driver, has_env_loader, plan_entry_sections
from .templates import TemplateRenderer, default_renderer

CONNECTOR_FILE_NAME = "connectDB.js"
ENV_FILE_NAME = ".env"


def synthesize_entry_file(
    packages: Iterable[str],
    *,
    db_folder: str = "db",
    backend: BackendConfig | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Render the Express entry file for *packages*.

    The output depends only on the arguments; two calls with equal arguments
    return identical text.
    """
    backend = backend or BackendConfig()
    renderer = renderer or default_renderer()
    sections = plan_entry_sections(packages)
    return renderer.render(
        "backend/entry.js.j2",
        {
            "imports": sections.imports,
            "bootstrap": sections.bootstrap,
            "middleware": sections.middleware,
            "env_loader": sections.env_loader,
            "database_driver": sections.database_driver,
            "db_folder": db_folder,
            "port": backend.default_port,
        },
    )


def synthesize_connector_file(
    packages: Iterable[str],
    *,
    backend: BackendConfig | None = None,
    renderer: TemplateRenderer | None = None,
) -> str | None:
    """Render ``connectDB.js``, or ``None`` when no database driver is selected.

    The generated ``connectDB`` logs connection failures instead of throwing.
    """
    if not has_database_driver(packages):
        return None
    backend = backend or BackendConfig()
    renderer = renderer or default_renderer()
    return renderer.render(
        "backend/connectDB.js.j2",
        {
            "database_url_env": backend.database_url_env,
            "database_url_fallback": backend.database_url_fallback,
        },
    )


def synthesize_env_file(
    packages: Iterable[str],
    *,
    backend: BackendConfig | None = None,
    renderer: TemplateRenderer | None = None,
) -> str | None:
    """Render ``.env`` when an env loader is selected, else ``None``."""
    selected = list(packages)
    if not has_env_loader(selected):
        return None
    backend = backend or BackendConfig()
    renderer = renderer or default_renderer()
    return renderer.render(
        "backend/env.j2",
        {
            "port": backend.default_port,
            "database_driver": has_database_driver(selected),
            "database_url_env": backend.database_url_env,
            "database_url_fallback": backend.database_url_fallback,
        },
    )


class BackendSynthesizer:
    """Binds the pure synthesis functions to a concrete backend directory."""

    def __init__(
        self,
        backend: BackendConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.backend = backend or BackendConfig()
        self.renderer = renderer or default_renderer()

    def entry_file(
        self,
        backend_dir: Path,
        packages: Iterable[str],
        main_file_name: str,
        db_folder: str = "db",
    ) -> GeneratedFile:
        content = synthesize_entry_file(
            packages, db_folder=db_folder, backend=self.backend, renderer=self.renderer
        )
        return GeneratedFile(path=Path(backend_dir) / main_file_name, content=content)

    def connector_file(
        self,
        backend_dir: Path,
        packages: Iterable[str],
        db_folder: str = "db",
    ) -> GeneratedFile | None:
        content = synthesize_connector_file(packages, backend=self.backend, renderer=self.renderer)
        if content is None:
            return None
        return GeneratedFile(
            path=Path(backend_dir) / db_folder / CONNECTOR_FILE_NAME, content=content
        )

    def env_file(self, backend_dir: Path, packages: Iterable[str]) -> GeneratedFile | None:
        content = synthesize_env_file(packages, backend=self.backend, renderer=self.renderer)
        if content is None:
            return None
        return GeneratedFile(path=Path(backend_dir) / ENV_FILE_NAME, content=content)


# ---------------------------------------------------------------------------
# package.json patch
# ---------------------------------------------------------------------------


def patch_manifest_data(data: dict[str, Any], main_file_name: str) -> dict[str, Any]:
    """Return a copy of a parsed ``package.json`` pointing at *main_file_name*.

    Sets ``main`` and ``type: module`` and adds ``start``/``dev`` scripts.
    Existing scripts with other names are kept.
    """
    patched = dict(data)
    patched["main"] = main_file_name
    patched["type"] = "module"
    scripts = dict(patched.get("scripts") or {})
    scripts["start"] = f"node {main_file_name}"
    scripts["dev"] = f"nodemon {main_file_name}"
    patched["scripts"] = scripts
    return patched


def apply_manifest_patch(manifest_path: str | Path, main_file_name: str) -> dict[str, Any]:
    """Patch ``package.json`` in place and return the new content.

    Raises:
        ManifestParseError: If the file is missing, unreadable, not valid JSON
            or not a JSON object.
        WriteError: If the patched file cannot be written back.
    """
    path = Path(manifest_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestParseError(path, exc.strerror or str(exc)) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value is not an object")

    patched = patch_manifest_data(data, main_file_name)
    try:
        path.write_text(json.dumps(patched, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise WriteError(path, exc.strerror or str(exc)) from exc
    return patched
