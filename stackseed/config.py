"""stackseed configuration.

Centralised, typed configuration for a scaffold run. All settings use
Pydantic v2 models so they are validated at construction time and can be
overridden from environment variables or CLI flags without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

ScaffoldMode = Literal["fullstack", "backend", "frontend"]


class PackageManagerConfig(BaseModel):
    """How the external package manager and template tool are invoked."""

    executable: str = Field(default="npm", min_length=1)
    dev_flag: str = Field(default="-D", description="Flag that marks dev dependencies")
    runner: str = Field(default="npx", description="Package binary runner (tailwind init)")
    template_tool: str = Field(
        default="npm create vite@latest",
        description="Command prefix used to create the frontend project",
    )


class BackendConfig(BaseModel):
    """Values baked into the generated backend sources."""

    default_port: int = Field(default=3000, ge=1, le=65535)
    default_main_file: str = Field(default="index.js")
    database_url_env: str = Field(default="MONGO_URL")
    database_url_fallback: str = Field(default="mongodb://127.0.0.1:27017/projectName")


class ScaffoldConfig(BaseModel):
    """Global configuration for one scaffold run.

    Instances are created once by the CLI entry point and handed to the
    :class:`~stackseed.orchestrator.ScaffoldOrchestrator`.
    """

    base_dir: Path = Field(default_factory=Path.cwd)
    mode: ScaffoldMode = Field(default="fullstack")
    package_manager: PackageManagerConfig = Field(default_factory=PackageManagerConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def scaffolds_backend(self) -> bool:
        """Whether the backend branch runs in this mode."""
        return self.mode in ("fullstack", "backend")

    @property
    def scaffolds_frontend(self) -> bool:
        """Whether the frontend branch runs in this mode."""
        return self.mode in ("fullstack", "frontend")

    @property
    def root_folders(self) -> list[str]:
        """Logical root folder names for the selected mode."""
        folders: list[str] = []
        if self.scaffolds_backend:
            folders.append("backend")
        if self.scaffolds_frontend:
            folders.append("frontend")
        return folders

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            STACKSEED_BASE_DIR, STACKSEED_MODE, STACKSEED_PACKAGE_MANAGER,
            STACKSEED_TEMPLATE_TOOL, STACKSEED_PORT, STACKSEED_DATABASE_URL.
        """
        pm_kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_PACKAGE_MANAGER"):
            pm_kwargs["executable"] = os.environ["STACKSEED_PACKAGE_MANAGER"]
        if os.environ.get("STACKSEED_TEMPLATE_TOOL"):
            pm_kwargs["template_tool"] = os.environ["STACKSEED_TEMPLATE_TOOL"]

        backend_kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_PORT"):
            backend_kwargs["default_port"] = int(os.environ["STACKSEED_PORT"])
        if os.environ.get("STACKSEED_DATABASE_URL"):
            backend_kwargs["database_url_fallback"] = os.environ["STACKSEED_DATABASE_URL"]

        kwargs: dict[str, Any] = {
            "package_manager": PackageManagerConfig(**pm_kwargs),
            "backend": BackendConfig(**backend_kwargs),
        }
        if os.environ.get("STACKSEED_BASE_DIR"):
            kwargs["base_dir"] = Path(os.environ["STACKSEED_BASE_DIR"])
        if os.environ.get("STACKSEED_MODE"):
            kwargs["mode"] = os.environ["STACKSEED_MODE"]

        return cls(**kwargs)
