"""SUSE pattern metadata: tagged-text parsing, XML writing, split and merge."""

from enhancerepo.rpmmd.patterns.models import RELATIONS, PatternRecord, RelationKind
from enhancerepo.rpmmd.patterns.parser import TagRecordParser
from enhancerepo.rpmmd.patterns.repository import Patterns
from enhancerepo.rpmmd.patterns.writer import pattern_to_element, pattern_to_xml, write_pattern

__all__ = [
    "RELATIONS",
    "PatternRecord",
    "Patterns",
    "RelationKind",
    "TagRecordParser",
    "pattern_to_element",
    "pattern_to_xml",
    "write_pattern",
]
