"""Question tables asked during a scaffold run."""

from __future__ import annotations

from .collector import QuestionSpec
from .synthesizer.css import NO_CSS_LIBRARY, css_choices
from .synthesizer.frontend import DEFAULT_TEMPLATE, TEMPLATE_CHOICES
from .synthesizer.packages import optional_packages

MAIN_FILE_KEY = "main_file_name"
CREATE_FRONTEND_KEY = "create_frontend"
TEMPLATE_KEY = "template"
CSS_LIBRARY_KEY = "css_library"


def package_questions() -> list[QuestionSpec]:
    """One confirm question per optional backend package, all defaulting to yes."""
    return [
        QuestionSpec(
            kind="confirm",
            key=rule.package_id,
            prompt=f"Do you want to install {rule.package_id}?",
            default=True,
        )
        for rule in optional_packages()
    ]


def main_file_question(default: str = "index.js") -> QuestionSpec:
    return QuestionSpec(
        kind="text",
        key=MAIN_FILE_KEY,
        prompt="Enter a name for the main file",
        default=default,
    )


CREATE_FRONTEND_QUESTION = QuestionSpec(
    kind="confirm",
    key=CREATE_FRONTEND_KEY,
    prompt="Do you want to create a Vite app in the frontend directory?",
    default=True,
)

TEMPLATE_QUESTION = QuestionSpec(
    kind="single_choice",
    key=TEMPLATE_KEY,
    prompt="Choose a Vite template",
    choices=list(TEMPLATE_CHOICES),
    default=DEFAULT_TEMPLATE,
)

CSS_LIBRARY_QUESTION = QuestionSpec(
    kind="single_choice",
    key=CSS_LIBRARY_KEY,
    prompt="Choose a CSS library to install",
    choices=css_choices(),
    default=NO_CSS_LIBRARY,
)
