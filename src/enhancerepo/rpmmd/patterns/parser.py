from __future__ import annotations

"""
Parser for the legacy tagged-text pattern format.

The format is line oriented:
- ``=Tag[.lang]: value`` single-line tags (``=Pat:`` starts a new pattern)
- ``+Tag[.lang]:`` / ``-Tag[.lang]:`` open and close a block; the lines in
  between are description text or relation entries

Example:
    =Pat: base 11 1 x86_64
    =Sum: Base System
    +Des:
    The minimal system.
    -Des:
    +Prq:
    bash
    -Prq:
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from enhancerepo.rpmmd.compression import open_metadata
from enhancerepo.rpmmd.patterns.models import NO_NAME_FOUND, PatternRecord, RelationKind

logger = logging.getLogger(__name__)

# Block tag -> (relation, kind applied to every entry inside the block)
RELATION_BLOCKS: dict[str, tuple[str, RelationKind]] = {
    "Req": ("requires", "pattern"),
    "Sup": ("supplements", "pattern"),
    "Con": ("conflicts", "pattern"),
    "Prv": ("provides", "pattern"),
    "Prc": ("recommends", "package"),
    "Prq": ("requires", "package"),
    "Psg": ("suggests", "package"),
    "Ext": ("extends", "pattern"),
    "Inc": ("includes", "pattern"),
}

_PATTERN_RE = re.compile(r"^=Pat:\s*(.*)$")
_LOCALIZED_RE = re.compile(r"^=(Cat|Sum)(?:\.(\w+))?:\s*(.*)$")
_VALUE_RE = re.compile(r"^=(Ico|Ord|Vis):\s*(.*)$")
_DESCRIPTION_RE = re.compile(r"^([+-])Des(?:\.(\w+))?:")
_RELATION_RE = re.compile(r"^([+-])(" + "|".join(RELATION_BLOCKS) + r"):")
_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class DescriptionMode:
    """Inside a ``+Des`` block."""

    lang: str


@dataclass(frozen=True)
class RelationMode:
    """Inside one of the relation blocks."""

    tag: str
    relation: str
    kind: RelationKind


ParserMode = DescriptionMode | RelationMode | None


def _to_int(value: str) -> int:
    """Leading integer of value, 0 if there is none."""
    match = _INT_RE.match(value)
    return int(match.group(1)) if match else 0


class TagRecordParser:
    """Decodes a tagged-text stream into PatternRecord objects.

    Parsing is a single sequential pass. Exactly one block mode can be
    active; opening a block while another is open closes the previous one
    with a warning. Unterminated blocks keep the data collected so far.
    """

    def __init__(self, log: logging.Logger | None = None):
        """Initialize parser.

        Args:
            log: Logger for diagnostics (defaults to module logger)
        """
        self.log = log or logger
        self._reset()

    def _reset(self) -> None:
        self._records: list[PatternRecord] = []
        self._current: PatternRecord | None = None
        self._mode: ParserMode = None
        self._description: list[str] = []

    def parse_file(self, file_path: Path) -> list[PatternRecord]:
        """Parse a (possibly compressed) pattern file.

        Args:
            file_path: Path to pattern file (.gz, .zst, .bz2 or plain)

        Returns:
            List of PatternRecord objects in file order

        Raises:
            FileNotFoundError: If file_path does not exist
        """
        if not file_path.exists():
            raise FileNotFoundError(f"{file_path} does not exist")

        with open_metadata(file_path) as stream:
            return self.parse(stream)

    def parse(self, stream: Iterable[str | bytes]) -> list[PatternRecord]:
        """Parse an already decompressed line stream.

        Args:
            stream: Iterable of lines (str or UTF-8 bytes), terminators included

        Returns:
            List of PatternRecord objects in stream order
        """
        self._reset()
        for raw_line in stream:
            line = raw_line.decode("utf-8") if isinstance(raw_line, bytes) else raw_line
            self._feed(line)
        self._flush()

        records = self._records
        self._reset()
        return records

    def _feed(self, line: str) -> None:
        """Interpret one line: tags first, then block content."""
        text = line.rstrip("\r\n")

        match = _PATTERN_RE.match(text)
        if match:
            self._start_pattern(match.group(1))
            return

        match = _LOCALIZED_RE.match(text)
        if match:
            tag, lang, value = match.groups()
            record = self._require_record(text)
            if record is not None:
                target = record.category if tag == "Cat" else record.summary
                target[lang or ""] = value
            return

        match = _VALUE_RE.match(text)
        if match:
            self._set_value(text, match.group(1), match.group(2))
            return

        match = _DESCRIPTION_RE.match(text)
        if match:
            sign, lang = match.groups()
            if sign == "+":
                self._open(DescriptionMode(lang or ""), text)
            else:
                self._close("Des", text)
            return

        match = _RELATION_RE.match(text)
        if match:
            sign, tag = match.groups()
            if sign == "+":
                relation, kind = RELATION_BLOCKS[tag]
                self._open(RelationMode(tag, relation, kind), text)
            else:
                self._close(tag, text)
            return

        self._collect(line, text)

    def _start_pattern(self, header: str) -> None:
        if self._mode is not None:
            self.log.warning(f"Pattern header reached with open block, closing it: {header}")
        self._flush()

        fields = header.split(maxsplit=3)
        identity = dict(zip(("name", "version", "release", "architecture"), fields))
        if not fields:
            self.log.warning(f"No name found. Setting name to {NO_NAME_FOUND}")
            identity["name"] = NO_NAME_FOUND
        self._current = PatternRecord(**identity)

    def _set_value(self, line: str, tag: str, value: str) -> None:
        record = self._require_record(line)
        if record is None:
            return
        if tag == "Ico":
            self._current = replace(record, icon=value)
        elif tag == "Ord":
            self._current = replace(record, order=_to_int(value))
        else:
            self._current = replace(record, visible="true" in value)

    def _require_record(self, line: str) -> PatternRecord | None:
        if self._current is None:
            self.log.warning(f"Ignoring tag before first pattern header: {line}")
        return self._current

    def _open(self, mode: DescriptionMode | RelationMode, line: str) -> None:
        if self._require_record(line) is None:
            return
        if self._mode is not None:
            self.log.warning(f"Block {line} opened while {self._mode_tag()} is open, closing it")
            self._end_block()
        self._mode = mode

    def _close(self, tag: str, line: str) -> None:
        if self._mode is None:
            return
        if self._mode_tag() != tag:
            self.log.warning(f"Ignoring {line}: open block is {self._mode_tag()}")
            return
        self._end_block()

    def _mode_tag(self) -> str:
        if isinstance(self._mode, RelationMode):
            return self._mode.tag
        return "Des"

    def _end_block(self) -> None:
        """Leave the current block, storing a collected description."""
        if isinstance(self._mode, DescriptionMode) and self._current is not None:
            self._current.description[self._mode.lang] = "".join(self._description)
        self._description = []
        self._mode = None

    def _collect(self, line: str, text: str) -> None:
        """Store a non-tag line according to the active block."""
        if isinstance(self._mode, DescriptionMode):
            self._description.append(line)
        elif isinstance(self._mode, RelationMode) and self._current is not None:
            if text:
                self._current.relation(self._mode.relation)[text] = self._mode.kind

    def _flush(self) -> None:
        """Move the pattern being parsed to the result list."""
        if self._mode is not None:
            self._end_block()
        if self._current is not None:
            self._records.append(self._current)
            self._current = None
