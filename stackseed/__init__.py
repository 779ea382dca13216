"""stackseed -- selection-driven scaffolding for Express + Vite projects.

Quick usage::

    import asyncio

    from stackseed import PresetCollector, ScaffoldConfig, ScaffoldOrchestrator

    config = ScaffoldConfig(base_dir="/tmp/demo")
    collector = PresetCollector({"backend": "api", "frontend": "web"})
    report = asyncio.run(ScaffoldOrchestrator(config, collector).run())
"""

from stackseed.collector import (
    DefaultsCollector,
    PresetCollector,
    QuestionSpec,
    RichPromptCollector,
    SelectionCollector,
)
from stackseed.config import ScaffoldConfig
from stackseed.orchestrator import ScaffoldOrchestrator, ScaffoldReport, Step

__version__ = "0.1.0"

__all__ = [
    "DefaultsCollector",
    "PresetCollector",
    "QuestionSpec",
    "RichPromptCollector",
    "ScaffoldConfig",
    "ScaffoldOrchestrator",
    "ScaffoldReport",
    "SelectionCollector",
    "Step",
]
