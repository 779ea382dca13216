"""Selection collection.

A :class:`SelectionCollector` turns a declared list of :class:`QuestionSpec`
objects into an answer map with exactly one entry per question key.  The
orchestrator receives a collector instance and hands each step only the
questions it needs; there is no module-wide prompt object.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator
from rich.prompt import Confirm, Prompt

from .errors import InvalidAnswer
from .utils import console, print_warning

QuestionKind = Literal["text", "single_choice", "confirm"]


class QuestionSpec(BaseModel):
    """One question: what to ask, how to ask it and what to assume."""

    kind: QuestionKind
    key: str = Field(..., min_length=1)
    prompt: str
    choices: list[str] = Field(default_factory=list)
    default: Any = None

    @model_validator(mode="after")
    def _check_choices(self) -> "QuestionSpec":
        if self.kind == "single_choice":
            if not self.choices:
                raise ValueError(f"single_choice question {self.key!r} needs choices")
            if self.default not in self.choices:
                raise ValueError(
                    f"default {self.default!r} of {self.key!r} is not one of its choices"
                )
        if self.kind == "confirm" and not isinstance(self.default, bool):
            raise ValueError(f"confirm question {self.key!r} needs a boolean default")
        return self


class SelectionCollector:
    """Base collector: answers every question with its default.

    Subclasses override :meth:`answer` to obtain a real answer.
    """

    def ask(self, questions: list[QuestionSpec]) -> dict[str, Any]:
        """Resolve *questions* into ``{key: answer}`` in declaration order."""
        answers: dict[str, Any] = {}
        for question in questions:
            answers[question.key] = self.answer(question)
        return answers

    def answer(self, question: QuestionSpec) -> Any:
        return question.default


class DefaultsCollector(SelectionCollector):
    """Non-interactive collector used by ``--yes``."""


class PresetCollector(SelectionCollector):
    """Answers from a fixed mapping, defaults for keys it does not know.

    Used for scripted runs and tests.  Answers are validated the same way an
    interactive prompt would validate them.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})

    def answer(self, question: QuestionSpec) -> Any:
        if question.key not in self.answers:
            return question.default
        value = self.answers[question.key]
        if question.kind == "single_choice" and value not in question.choices:
            raise InvalidAnswer(question.key, value, f"expected one of {question.choices}")
        if question.kind == "confirm" and not isinstance(value, bool):
            raise InvalidAnswer(question.key, value, "expected a boolean")
        if question.kind == "text":
            return str(value)
        return value


class RichPromptCollector(SelectionCollector):
    """Interactive collector backed by ``rich.prompt``.

    When standard input is exhausted the current and all remaining questions
    fall back to their defaults.
    """

    def __init__(self) -> None:
        self._exhausted = False

    def answer(self, question: QuestionSpec) -> Any:
        if self._exhausted:
            return question.default
        try:
            return self._prompt(question)
        except EOFError:
            self._exhausted = True
            print_warning("  No more input -- using defaults for the remaining questions.")
            return question.default

    def _prompt(self, question: QuestionSpec) -> Any:
        if question.kind == "confirm":
            return Confirm.ask(question.prompt, default=question.default, console=console)
        if question.kind == "single_choice":
            return Prompt.ask(
                question.prompt,
                choices=question.choices,
                default=question.default,
                console=console,
            )
        return Prompt.ask(question.prompt, default=question.default, console=console)
