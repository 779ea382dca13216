"""Backend package catalog and entry-file section planning.

Every package the backend prompt offers is described once by a
:class:`PackageRule`: how it is imported, which middleware lines it
registers and whether it switches on the database connector or the env
loader.  :func:`plan_entry_sections` folds the rules of a selection into the
import, middleware and bootstrap sections of the entry file.

Catalog order is significant: import lines follow it, whatever order the
packages were confirmed in.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class PackageRule(BaseModel):
    """How one npm package shows up in the generated entry file."""

    model_config = ConfigDict(frozen=True)

    package_id: str
    always_installed: bool = False
    import_line: str | None = Field(
        default=None, description="Explicit import statement; default import when omitted"
    )
    middleware: tuple[str, ...] = ()
    middleware_rank: int = 0
    database_driver: bool = False
    env_loader: bool = False

    def render_import(self) -> str:
        return self.import_line or default_import_line(self.package_id)


# Optional packages in prompt order, then the mandatory framework.
PACKAGE_CATALOG: tuple[PackageRule, ...] = (
    PackageRule(package_id="mongoose", database_driver=True),
    PackageRule(
        package_id="cors",
        middleware=("app.use(cors());",),
        middleware_rank=40,
    ),
    PackageRule(package_id="dotenv", env_loader=True),
    PackageRule(
        package_id="body-parser",
        import_line="import bodyParser from 'body-parser';",
        middleware=(
            "app.use(bodyParser.json());",
            "app.use(bodyParser.urlencoded({ extended: true }));",
        ),
        middleware_rank=10,
    ),
    PackageRule(
        package_id="method-override",
        import_line="import methodOverride from 'method-override';",
        middleware=("app.use(methodOverride('_method'));",),
        middleware_rank=50,
    ),
    PackageRule(package_id="axios"),
    PackageRule(
        package_id="morgan",
        middleware=("app.use(morgan('dev'));",),
        middleware_rank=30,
    ),
    PackageRule(package_id="jsonwebtoken"),
    PackageRule(package_id="zod"),
    PackageRule(package_id="bcryptjs"),
    PackageRule(
        package_id="express-validator",
        import_line="import { body, validationResult } from 'express-validator';",
    ),
    PackageRule(
        package_id="cookie-parser",
        import_line="import cookieParser from 'cookie-parser';",
        middleware=("app.use(cookieParser());",),
        middleware_rank=20,
    ),
    PackageRule(package_id="uuid", import_line="import { v4 as uuidv4 } from 'uuid';"),
    PackageRule(package_id="multer"),
    PackageRule(package_id="express", always_installed=True),
)

DEV_PACKAGES: tuple[str, ...] = ("nodemon",)

BOOTSTRAP_LINES: tuple[str, ...] = (
    "app.use(express.json());",
    "app.use(express.urlencoded({ extended: true }));",
    "app.use(express.static('public'));",
)

_RULES_BY_ID: dict[str, PackageRule] = {rule.package_id: rule for rule in PACKAGE_CATALOG}


def optional_packages() -> list[PackageRule]:
    """Rules the user is asked about, in declaration order."""
    return [rule for rule in PACKAGE_CATALOG if not rule.always_installed]


def mandatory_packages() -> list[PackageRule]:
    """Rules installed regardless of the answers."""
    return [rule for rule in PACKAGE_CATALOG if rule.always_installed]


def get_rule(package_id: str) -> PackageRule | None:
    return _RULES_BY_ID.get(package_id)


def default_import_line(package_id: str) -> str:
    """``import <ident> from '<package>';`` with a camel-cased identifier.

    Examples::

        default_import_line("cors")         -> "import cors from 'cors';"
        default_import_line("socket.io")    -> "import socketIo from 'socket.io';"
        default_import_line("@scope/thing") -> "import thing from '@scope/thing';"
    """
    bare = package_id.rsplit("/", 1)[-1]
    parts = [p for p in re.split(r"[^A-Za-z0-9]+", bare) if p]
    if not parts:
        ident = "pkg"
    else:
        ident = parts[0].lower() + "".join(p[:1].upper() + p[1:] for p in parts[1:])
    if ident[0].isdigit():
        ident = f"_{ident}"
    return f"import {ident} from '{package_id}';"


def resolve_selected_packages(confirmed: Mapping[str, bool]) -> list[str]:
    """Build the selected package set from confirm answers.

    Confirmed optional packages come first in catalog order, followed by every
    mandatory package.  Answers for ids outside the catalog are ignored.
    """
    selected = [rule.package_id for rule in optional_packages() if confirmed.get(rule.package_id)]
    for rule in mandatory_packages():
        if rule.package_id not in selected:
            selected.append(rule.package_id)
    return selected


def normalize_selection(packages: Iterable[str]) -> list[str]:
    """Order *packages* by catalog position and add missing mandatory ones.

    Packages unknown to the catalog keep their relative order after the
    catalog packages.  Duplicates are dropped.
    """
    chosen = list(dict.fromkeys(packages))
    for rule in mandatory_packages():
        if rule.package_id not in chosen:
            chosen.append(rule.package_id)
    known = [rule.package_id for rule in PACKAGE_CATALOG if rule.package_id in chosen]
    unknown = [pkg for pkg in chosen if pkg not in _RULES_BY_ID]
    return known + unknown


@dataclass
class EntrySections:
    """The independently planned parts of the backend entry file."""

    imports: list[str] = field(default_factory=list)
    middleware: list[str] = field(default_factory=list)
    bootstrap: list[str] = field(default_factory=lambda: list(BOOTSTRAP_LINES))
    env_loader: bool = False
    database_driver: bool = False


def plan_entry_sections(packages: Iterable[str]) -> EntrySections:
    """Fold the rules of *packages* into entry-file sections.

    Imports follow catalog order.  Middleware follows each rule's fixed rank,
    so the relative position of e.g. ``cors()`` and ``morgan('dev')`` never
    depends on the order of the selection.
    """
    sections = EntrySections()
    ranked: list[PackageRule] = []
    for package_id in normalize_selection(packages):
        rule = get_rule(package_id)
        if rule is None:
            sections.imports.append(default_import_line(package_id))
            continue
        sections.imports.append(rule.render_import())
        sections.env_loader = sections.env_loader or rule.env_loader
        sections.database_driver = sections.database_driver or rule.database_driver
        if rule.middleware:
            ranked.append(rule)

    for rule in sorted(ranked, key=lambda r: r.middleware_rank):
        sections.middleware.extend(rule.middleware)
    return sections


def has_database_driver(packages: Iterable[str]) -> bool:
    rules = [get_rule(pkg) for pkg in packages]
    return any(rule.database_driver for rule in rules if rule is not None)


def has_env_loader(packages: Iterable[str]) -> bool:
    rules = [get_rule(pkg) for pkg in packages]
    return any(rule.env_loader for rule in rules if rule is not None)
