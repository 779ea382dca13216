"""CSS library catalog for the frontend branch.

Most libraries are plain dependencies.  Utility-first frameworks also need
build-time configuration, which is expressed by ``build_config`` and handled
by :mod:`stackseed.synthesizer.frontend`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

NO_CSS_LIBRARY = "none"


class CssRule(BaseModel):
    """How one CSS library choice is installed."""

    model_config = ConfigDict(frozen=True)

    library_id: str
    packages: tuple[str, ...]
    dev: bool = False
    build_config: bool = False


CSS_CATALOG: tuple[CssRule, ...] = (
    CssRule(library_id="styled-components", packages=("styled-components",)),
    CssRule(library_id="emotion", packages=("@emotion/react", "@emotion/styled")),
    CssRule(library_id="sass", packages=("sass",)),
    CssRule(
        library_id="tailwindcss",
        # v4 dropped ``tailwindcss init`` and the JS config file.
        packages=("tailwindcss@3", "postcss", "autoprefixer"),
        dev=True,
        build_config=True,
    ),
    CssRule(library_id="bootstrap", packages=("bootstrap",)),
    CssRule(
        library_id="material-ui",
        packages=("@mui/material", "@emotion/react", "@emotion/styled"),
    ),
    # Ant Design is published on npm as antd.
    CssRule(library_id="ant-design", packages=("antd",)),
    CssRule(
        library_id="chakra-ui",
        packages=("@chakra-ui/react", "@emotion/react", "@emotion/styled", "framer-motion"),
    ),
)

_RULES_BY_ID: dict[str, CssRule] = {rule.library_id: rule for rule in CSS_CATALOG}


def css_choices() -> list[str]:
    """Prompt choices: every library followed by the ``none`` sentinel."""
    return [rule.library_id for rule in CSS_CATALOG] + [NO_CSS_LIBRARY]


def resolve_css_choice(choice: str | None) -> str | None:
    """Map the ``none`` sentinel (or an empty answer) to ``None``."""
    if not choice or choice == NO_CSS_LIBRARY:
        return None
    return choice


def get_css_rule(library_id: str) -> CssRule:
    """Rule for *library_id*; unknown ids install a package of the same name."""
    rule = _RULES_BY_ID.get(library_id)
    if rule is None:
        return CssRule(library_id=library_id, packages=(library_id,))
    return rule
