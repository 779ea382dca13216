"""Scaffold orchestrator.

Drives one scaffold run as a fixed sequence of steps:

Root     -- collect root folder names, create the root folders.
Backend  -- create the backend subtree, collect packages, ``npm init``,
            install packages and dev packages, write the entry file, the
            database connector and ``.env``, patch ``package.json``.
Frontend -- collect template/CSS choices, run the Vite template tool,
            install dependencies, install and configure the CSS library.

Each step starts only after the previous one resolved.  The first failure
stops its branch; a failed backend branch does not stop the frontend branch,
and nothing that already happened is rolled back.
"""

from __future__ import annotations

import asyncio
import time
import traceback
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.panel import Panel

from .collector import QuestionSpec, SelectionCollector
from .config import ScaffoldConfig
from .errors import ScaffoldError
from .planner import BACKEND_MANIFEST, FolderManifest, create_tree, validate_main_file_name
from .questions import (
    CREATE_FRONTEND_KEY,
    CREATE_FRONTEND_QUESTION,
    CSS_LIBRARY_KEY,
    CSS_LIBRARY_QUESTION,
    MAIN_FILE_KEY,
    TEMPLATE_KEY,
    TEMPLATE_QUESTION,
    main_file_question,
    package_questions,
)
from .runner import CommandRunner, CommandSpec
from .synthesizer.backend import BackendSynthesizer, apply_manifest_patch
from .synthesizer.commands import create_frontend_project, init_manifest, install_packages
from .synthesizer.css import resolve_css_choice
from .synthesizer.files import GeneratedFile, write_files
from .synthesizer.frontend import DEFAULT_TEMPLATE, css_commands, synthesize_css_files
from .synthesizer.packages import DEV_PACKAGES, resolve_selected_packages
from .utils import (
    console,
    format_duration,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Steps and run state
# ---------------------------------------------------------------------------


class Step(str, Enum):
    """Every step of a scaffold run, in execution order."""

    COLLECT_ROOT_SELECTIONS = "collect_root_selections"
    CREATE_ROOT_FOLDERS = "create_root_folders"
    CREATE_BACKEND_SUBTREE = "create_backend_subtree"
    COLLECT_PACKAGE_SELECTIONS = "collect_package_selections"
    INIT_PACKAGE_MANIFEST = "init_package_manifest"
    INSTALL_SELECTED_PACKAGES = "install_selected_packages"
    INSTALL_DEV_PACKAGES = "install_dev_packages"
    SYNTHESIZE_ENTRY_FILE = "synthesize_entry_file"
    SYNTHESIZE_CONNECTOR_FILE = "synthesize_connector_file"
    PATCH_PACKAGE_MANIFEST = "patch_package_manifest"
    WRITE_ENV_FILE = "write_env_file"
    COLLECT_FRONTEND_SELECTIONS = "collect_frontend_selections"
    INVOKE_TEMPLATE_TOOL = "invoke_template_tool"
    INSTALL_FRONTEND_DEPENDENCIES = "install_frontend_dependencies"
    INSTALL_AND_CONFIGURE_CSS = "install_and_configure_css"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").capitalize()


class StepStatus(str, Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    # The user opted out; the rest of the branch is skipped.
    DECLINED = "declined"


class ScaffoldSelections(BaseModel):
    """Everything the user chose during one run."""

    root_folders: dict[str, str] = Field(default_factory=dict)
    backend_folders: dict[str, str] = Field(default_factory=dict)
    packages: list[str] = Field(default_factory=list)
    main_file_name: str = "index.js"
    create_frontend: bool = False
    template: str = DEFAULT_TEMPLATE
    css_library: str | None = None


class ScaffoldReport(BaseModel):
    """Outcome of one run."""

    success: bool = False
    completed_steps: list[Step] = Field(default_factory=list)
    skipped_steps: list[Step] = Field(default_factory=list)
    failed_steps: dict[str, Step] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
    created_paths: list[Path] = Field(default_factory=list)
    written_files: list[Path] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)
    duration: str = ""


class Runner(Protocol):
    async def run(self, command_line: str, cwd: str | Path) -> str: ...


StepHandler = Callable[[], Awaitable[StepStatus]]


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ScaffoldOrchestrator:
    """Runs the root, backend and frontend branches of a scaffold.

    Attributes:
        config: Run configuration.
        collector: Source of answers; each step asks only its own questions.
        runner: Executes package-manager and template-tool commands.
        selections: Answers gathered so far.
        report: Accumulated outcome, returned by :meth:`run`.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        collector: SelectionCollector,
        runner: Runner | None = None,
    ) -> None:
        self.config = config
        self.collector = collector
        self.runner: Runner = runner or CommandRunner()
        self.backend_synthesizer = BackendSynthesizer(config.backend)
        self.selections = ScaffoldSelections(main_file_name=config.backend.default_main_file)
        self.report = ScaffoldReport()

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def base_dir(self) -> Path:
        return Path(self.config.base_dir).resolve()

    @property
    def backend_dir(self) -> Path:
        return self.base_dir / self.selections.root_folders["backend"]

    @property
    def frontend_dir(self) -> Path:
        return self.base_dir / self.selections.root_folders["frontend"]

    @property
    def db_folder(self) -> str:
        return self.selections.backend_folders.get("db", "db")

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> ScaffoldReport:
        """Execute every branch enabled by the configured mode.

        Returns:
            The final :class:`ScaffoldReport`; ``success`` is ``False`` if any
            branch failed.
        """
        run_start = time.monotonic()

        console.print(
            Panel(
                f"[bold bright_cyan]stackseed[/bold bright_cyan]\n"
                f"Base dir : {escape(str(self.base_dir))}\n"
                f"Mode     : {self.config.mode}\n"
                f"Tooling  : {escape(self.config.package_manager.executable)}",
                title="[bold]Scaffold Start[/bold]",
                border_style="bright_cyan",
            )
        )

        root_ok = await self._run_branch("root", self._root_steps())
        if root_ok:
            if self.config.scaffolds_backend:
                await self._run_branch("backend", self._backend_steps())
            if self.config.scaffolds_frontend:
                await self._run_branch("frontend", self._frontend_steps())

        self.report.success = not self.report.failed_steps
        self.report.duration = format_duration(time.monotonic() - run_start)
        self._print_final_summary()
        return self.report

    def _root_steps(self) -> list[tuple[Step, StepHandler]]:
        return [
            (Step.COLLECT_ROOT_SELECTIONS, self.collect_root_selections),
            (Step.CREATE_ROOT_FOLDERS, self.create_root_folders),
        ]

    def _backend_steps(self) -> list[tuple[Step, StepHandler]]:
        return [
            (Step.CREATE_BACKEND_SUBTREE, self.create_backend_subtree),
            (Step.COLLECT_PACKAGE_SELECTIONS, self.collect_package_selections),
            (Step.INIT_PACKAGE_MANIFEST, self.init_package_manifest),
            (Step.INSTALL_SELECTED_PACKAGES, self.install_selected_packages),
            (Step.INSTALL_DEV_PACKAGES, self.install_dev_packages),
            (Step.SYNTHESIZE_ENTRY_FILE, self.synthesize_entry_file),
            (Step.SYNTHESIZE_CONNECTOR_FILE, self.synthesize_connector_file),
            (Step.PATCH_PACKAGE_MANIFEST, self.patch_package_manifest),
            (Step.WRITE_ENV_FILE, self.write_env_file),
        ]

    def _frontend_steps(self) -> list[tuple[Step, StepHandler]]:
        return [
            (Step.COLLECT_FRONTEND_SELECTIONS, self.collect_frontend_selections),
            (Step.INVOKE_TEMPLATE_TOOL, self.invoke_template_tool),
            (Step.INSTALL_FRONTEND_DEPENDENCIES, self.install_frontend_dependencies),
            (Step.INSTALL_AND_CONFIGURE_CSS, self.install_and_configure_css),
        ]

    async def _run_branch(self, branch: str, steps: list[tuple[Step, StepHandler]]) -> bool:
        """Run *steps* in order; stop at the first failure.

        Returns:
            ``True`` unless a step failed.
        """
        for index, (step, handler) in enumerate(steps):
            print_step_header(branch, step.title)
            try:
                status = await handler()
            except ScaffoldError as exc:
                self._record_failure(branch, step, str(exc))
                return False
            except Exception as exc:
                self._record_failure(branch, step, f"{type(exc).__name__}: {exc}")
                console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                return False

            if status is StepStatus.SKIPPED:
                self.report.skipped_steps.append(step)
                continue

            self.report.completed_steps.append(step)
            if status is StepStatus.DECLINED:
                remaining = [later for later, _ in steps[index + 1:]]
                self.report.skipped_steps.extend(remaining)
                print_warning(f"  Skipping the rest of the {branch} branch.")
                break
        return True

    def _record_failure(self, branch: str, step: Step, message: str) -> None:
        self.report.failed_steps[branch] = step
        self.report.errors[branch] = message
        print_error(f"{branch} step '{step.title}' failed: {message}")

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _ask(self, questions: list[QuestionSpec]) -> dict[str, Any]:
        # Prompts run on the loop thread so Ctrl-C reaches asyncio.run.
        return self.collector.ask(questions)

    async def _execute(self, spec: CommandSpec) -> str:
        self.report.commands.append(spec.command_line)
        return await self.runner.run(spec.command_line, spec.cwd)

    async def _write(self, files: list[GeneratedFile]) -> None:
        self.report.written_files.extend(await write_files(files))

    async def _create(self, base: Path, names: list[str]) -> None:
        self.report.created_paths.extend(await asyncio.to_thread(create_tree, base, names))

    # ------------------------------------------------------------------
    # Root branch
    # ------------------------------------------------------------------

    async def collect_root_selections(self) -> StepStatus:
        manifest = FolderManifest(label="project", folders=self.config.root_folders)
        answers = await self._ask(manifest.question_specs())
        self.selections.root_folders = manifest.resolve(answers)
        return StepStatus.COMPLETED

    async def create_root_folders(self) -> StepStatus:
        await self._create(self.base_dir, list(self.selections.root_folders.values()))
        print_success("Main directory structure created successfully!")
        return StepStatus.COMPLETED

    # ------------------------------------------------------------------
    # Backend branch
    # ------------------------------------------------------------------

    async def create_backend_subtree(self) -> StepStatus:
        answers = await self._ask(BACKEND_MANIFEST.question_specs())
        self.selections.backend_folders = BACKEND_MANIFEST.resolve(answers)
        await self._create(self.backend_dir, list(self.selections.backend_folders.values()))
        print_success("Backend structure created successfully!")
        return StepStatus.COMPLETED

    async def collect_package_selections(self) -> StepStatus:
        answers = await self._ask(package_questions())
        self.selections.packages = resolve_selected_packages(answers)
        console.print(f"  Selected packages: [bold]{' '.join(self.selections.packages)}[/bold]")
        return StepStatus.COMPLETED

    async def init_package_manifest(self) -> StepStatus:
        await self._execute(init_manifest(self.config.package_manager, self.backend_dir))
        return StepStatus.COMPLETED

    async def install_selected_packages(self) -> StepStatus:
        spec = install_packages(
            self.config.package_manager, self.selections.packages, self.backend_dir
        )
        await self._execute(spec)
        print_success("=>Packages installed successfully!")
        return StepStatus.COMPLETED

    async def install_dev_packages(self) -> StepStatus:
        spec = install_packages(
            self.config.package_manager, DEV_PACKAGES, self.backend_dir, dev=True
        )
        await self._execute(spec)
        print_success("=>Dev packages installed successfully!")
        return StepStatus.COMPLETED

    async def synthesize_entry_file(self) -> StepStatus:
        default = self.config.backend.default_main_file
        answers = await self._ask([main_file_question(default)])
        name = str(answers.get(MAIN_FILE_KEY) or "").strip() or default
        self.selections.main_file_name = validate_main_file_name(name)

        generated = self.backend_synthesizer.entry_file(
            self.backend_dir,
            self.selections.packages,
            self.selections.main_file_name,
            db_folder=self.db_folder,
        )
        await self._write([generated])
        return StepStatus.COMPLETED

    async def synthesize_connector_file(self) -> StepStatus:
        generated = self.backend_synthesizer.connector_file(
            self.backend_dir, self.selections.packages, db_folder=self.db_folder
        )
        if generated is None:
            console.print("  No database driver selected -- no connector file.")
            return StepStatus.SKIPPED
        await self._write([generated])
        return StepStatus.COMPLETED

    async def patch_package_manifest(self) -> StepStatus:
        manifest_path = self.backend_dir / "package.json"
        await asyncio.to_thread(
            apply_manifest_patch, manifest_path, self.selections.main_file_name
        )
        console.print(
            f"  Updated package.json main field to: {escape(self.selections.main_file_name)}"
        )
        console.print("  Set package.json type to module")
        return StepStatus.COMPLETED

    async def write_env_file(self) -> StepStatus:
        generated = self.backend_synthesizer.env_file(self.backend_dir, self.selections.packages)
        if generated is None:
            return StepStatus.SKIPPED
        await self._write([generated])
        return StepStatus.COMPLETED

    # ------------------------------------------------------------------
    # Frontend branch
    # ------------------------------------------------------------------

    async def collect_frontend_selections(self) -> StepStatus:
        confirm = await self._ask([CREATE_FRONTEND_QUESTION])
        self.selections.create_frontend = bool(confirm[CREATE_FRONTEND_KEY])
        if not self.selections.create_frontend:
            return StepStatus.DECLINED

        answers = await self._ask([TEMPLATE_QUESTION, CSS_LIBRARY_QUESTION])
        self.selections.template = answers[TEMPLATE_KEY]
        self.selections.css_library = resolve_css_choice(answers[CSS_LIBRARY_KEY])
        return StepStatus.COMPLETED

    async def invoke_template_tool(self) -> StepStatus:
        console.print("  Creating Vite project...")
        spec = create_frontend_project(
            self.config.package_manager,
            self.selections.root_folders["frontend"],
            self.selections.template,
            self.base_dir,
        )
        await self._execute(spec)
        print_success("Vite project created successfully!")
        return StepStatus.COMPLETED

    async def install_frontend_dependencies(self) -> StepStatus:
        await self._execute(install_packages(self.config.package_manager, [], self.frontend_dir))
        print_success("Dependencies installed successfully!")
        return StepStatus.COMPLETED

    async def install_and_configure_css(self) -> StepStatus:
        library = self.selections.css_library
        if library is None:
            console.print("  No CSS library selected.")
            return StepStatus.SKIPPED

        console.print(f"  Installing {escape(library)}...")
        for spec in css_commands(self.config.package_manager, library, self.frontend_dir):
            await self._execute(spec)
        await self._write(synthesize_css_files(library, self.frontend_dir))
        print_success(f"{library} installed successfully!")
        return StepStatus.COMPLETED

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _print_final_summary(self) -> None:
        status = "[bold green]SUCCESS[/bold green]" if self.report.success else "[bold red]FAILED[/bold red]"
        data: dict[str, str] = {
            "Status": status,
            "Base dir": escape(str(self.base_dir)),
            "Folders created": str(len(self.report.created_paths)),
            "Files written": str(len(self.report.written_files)),
            "Commands run": str(len(self.report.commands)),
            "Duration": self.report.duration,
        }
        for branch, step in self.report.failed_steps.items():
            data[f"Failed ({branch})"] = step.title
        console.print()
        print_summary_table(data, title="Scaffold Summary")
        if self.report.failed_steps:
            print_warning("Nothing was rolled back; fix the error and remove the partial scaffold before re-running.")
