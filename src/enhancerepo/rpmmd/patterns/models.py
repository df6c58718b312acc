from __future__ import annotations

"""
In-memory model of a SUSE pattern.

A pattern is a named, versioned collection of package and pattern relations
with localized presentation metadata (summary, description, category).
"""

from dataclasses import dataclass, field
from typing import Literal

RelationKind = Literal["package", "pattern"]

# Relation attributes in the order they are written to XML
RELATIONS = (
    "conflicts",
    "supplements",
    "provides",
    "requires",
    "recommends",
    "suggests",
    "extends",
    "includes",
)

# Used when a pattern carries no name
NO_NAME_FOUND = "NON_NAME_FOUND"


@dataclass(frozen=True)
class PatternRecord:
    """One pattern.

    Localized fields map a language tag to text, the empty tag being the
    untranslated default. Relation fields map a dependency name to its kind.
    Fields cannot be reassigned once the record is built.
    """

    name: str = ""
    version: str = ""
    release: str = ""
    architecture: str = "noarch"

    summary: dict[str, str] = field(default_factory=dict)
    description: dict[str, str] = field(default_factory=dict)
    category: dict[str, str] = field(default_factory=dict)

    icon: str | None = None
    order: int = 0
    visible: bool = True

    conflicts: dict[str, RelationKind] = field(default_factory=dict)
    supplements: dict[str, RelationKind] = field(default_factory=dict)
    provides: dict[str, RelationKind] = field(default_factory=dict)
    requires: dict[str, RelationKind] = field(default_factory=dict)
    recommends: dict[str, RelationKind] = field(default_factory=dict)
    suggests: dict[str, RelationKind] = field(default_factory=dict)
    extends: dict[str, RelationKind] = field(default_factory=dict)
    includes: dict[str, RelationKind] = field(default_factory=dict)

    def relation(self, relation: str) -> dict[str, RelationKind]:
        """Get a relation mapping by name (e.g. "requires")."""
        if relation not in RELATIONS:
            raise ValueError(f"Unknown relation: {relation}")
        mapping: dict[str, RelationKind] = getattr(self, relation)
        return mapping
