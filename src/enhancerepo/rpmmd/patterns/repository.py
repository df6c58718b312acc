from __future__ import annotations

"""
Pattern repository handling.

A repository carries all its patterns in ``repodata/patterns.xml.gz``. For
editing, that document is split into one ``pattern-<name>_<n>.xml`` file per
pattern (the "repoparts"), which are later merged back into a combined
document.
"""

import io
import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from enhancerepo.rpmmd.compression import (
    COMPRESSION_FORMATS,
    CompressionFormat,
    add_compression_extension,
    open_metadata,
    write_metadata,
)
from enhancerepo.rpmmd.patterns.models import NO_NAME_FOUND, PatternRecord
from enhancerepo.rpmmd.patterns.parser import TagRecordParser
from enhancerepo.rpmmd.patterns.writer import PATTERN_NS, RPM_NS, write_pattern

logger = logging.getLogger(__name__)

METADATA_FILENAME = "patterns.xml"
PART_GLOB = "pattern-*.xml"

# Opening tag of a standalone pattern document; the namespaces are declared
# once on <patterns> in the combined document
_NAMESPACED_ROOT_RE = re.compile(r"^(\s*)<pattern\s+xmlns[^>]*>")

ET.register_namespace("", PATTERN_NS)
ET.register_namespace("rpm", RPM_NS)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def next_part_path(outputdir: Path, name: str) -> Path:
    """Get the first unused pattern-<name>_<n>.xml path in outputdir."""
    index = 0
    while True:
        candidate = outputdir / f"pattern-{name}_{index}.xml"
        if not candidate.exists():
            return candidate
        index += 1


class Patterns:
    """Patterns of a repository.

    Collects per-pattern part files and merges them into the combined
    patterns.xml. Also generates parts from tagged-text pattern files and
    splits an existing combined document into parts.
    """

    def __init__(self, repo_dir: Path, log: logging.Logger | None = None):
        """Initialize patterns.

        Args:
            repo_dir: Repository root directory (containing repodata/)
            log: Logger for progress and diagnostics (defaults to module logger)
        """
        self.dir = repo_dir
        self.log = log or logger
        self._parts: list[Path] = []

    @property
    def empty(self) -> bool:
        return not self._parts

    @property
    def size(self) -> int:
        return len(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    @property
    def parts(self) -> list[Path]:
        """Part files to merge, in merge order."""
        return list(self._parts)

    def add_file(self, part_file: Path) -> None:
        """Add a single pattern part file to the merge set."""
        if part_file not in self._parts:
            self._parts.append(part_file)

    def read_repoparts(self, repoparts_path: Path | None = None) -> None:
        """Add all pattern parts of a repoparts directory.

        Args:
            repoparts_path: Directory with pattern-*.xml files
                (default: <repo_dir>/repoparts)
        """
        repoparts_path = repoparts_path or self.dir / "repoparts"
        self.log.info(f"Reading patterns parts from {repoparts_path}")
        for part_file in sorted(repoparts_path.glob(PART_GLOB)):
            self.log.info(f"`-> adding pattern {part_file}")
            self.add_file(part_file)

    def metadata_path(self, compression: CompressionFormat = "gzip") -> Path:
        """Path of the combined document for a compression format."""
        filename = add_compression_extension(METADATA_FILENAME, compression)
        return self.dir / "repodata" / filename

    def find_metadata_file(self) -> Path:
        """Locate the existing combined document.

        Raises:
            FileNotFoundError: If no patterns.xml exists in repodata/
        """
        for compression in COMPRESSION_FORMATS:
            candidate = self.metadata_path(compression)
            if candidate.exists():
                return candidate
        raise FileNotFoundError(f"{self.metadata_path()} does not exist")

    def generate_patterns(self, files: Iterable[Path], outputdir: Path) -> list[Path]:
        """Generate pattern parts from tagged-text pattern files.

        Args:
            files: Tagged-text pattern files (usually gzip compressed)
            outputdir: Directory to write pattern-<name>_<n>.xml files to

        Returns:
            Paths of the written part files

        Raises:
            FileNotFoundError: If one of the files does not exist
        """
        files = list(files)
        for source in files:
            if not source.exists():
                raise FileNotFoundError(f"{source} does not exist")

        parser = TagRecordParser(log=self.log)
        records: list[PatternRecord] = []
        for source in files:
            records.extend(parser.parse_file(source))

        outputdir.mkdir(parents=True, exist_ok=True)
        written = []
        for record in records:
            part_file = next_part_path(outputdir, record.name)
            self.log.info(f"write pattern {part_file}")
            with open(part_file, "wb") as f:
                write_pattern(record, f)
            written.append(part_file)
        return written

    def split_patterns(self, outputdir: Path, patterns_file: Path | None = None) -> list[Path]:
        """Split the combined document into one part file per pattern.

        Each <pattern> element is written as-is to the first unused
        pattern-<name>_<n>.xml in outputdir.

        Args:
            outputdir: Directory to write part files to
            patterns_file: Combined document (default: repodata/patterns.xml.*)

        Returns:
            Paths of the written part files

        Raises:
            FileNotFoundError: If the combined document does not exist
        """
        outputdir.mkdir(parents=True, exist_ok=True)
        if patterns_file is None:
            patterns_file = self.find_metadata_file()
        elif not patterns_file.exists():
            raise FileNotFoundError(f"{patterns_file} does not exist")

        with open_metadata(patterns_file) as stream:
            root = ET.parse(stream).getroot()

        written = []
        for pattern_elem in root:
            if _local_name(pattern_elem.tag) != "pattern":
                continue

            name = None
            for child in pattern_elem:
                if _local_name(child.tag) == "name":
                    name = child.text
            if name is None:
                self.log.warning(f"No name found. Setting name to {NO_NAME_FOUND}")
                name = NO_NAME_FOUND

            part_file = next_part_path(outputdir, name)
            self.log.info(f"Saving pattern part to '{part_file}'.")
            pattern_elem.tail = None
            content = ET.tostring(pattern_elem, encoding="unicode")
            part_file.write_text(content + "\n", encoding="utf-8")
            written.append(part_file)
        return written

    def write(self, stream: TextIO) -> None:
        """Write the combined document merged from all parts.

        Parts are spliced line by line: their XML declarations are dropped
        and the namespace declarations on their root element removed.
        """
        stream.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        stream.write(f'<patterns xmlns="{PATTERN_NS}" xmlns:rpm="{RPM_NS}">\n')
        for part_file in self._parts:
            with open(part_file, encoding="utf-8") as f:
                for line in f:
                    if line.startswith("<?xml"):
                        continue
                    line = _NAMESPACED_ROOT_RE.sub(r"\1<pattern>", line, count=1)
                    if not line.endswith("\n"):
                        line += "\n"
                    stream.write(line)
        stream.write("</patterns>\n")

    def to_xml(self) -> str:
        buffer = io.StringIO()
        self.write(buffer)
        return buffer.getvalue()

    def write_file(self, compression: CompressionFormat = "gzip") -> Path:
        """Write the combined document to repodata/patterns.xml[.ext].

        Returns:
            Path of the written file
        """
        target = self.metadata_path(compression)
        self.log.info(f"Writing {target}")
        return write_metadata(target, self.to_xml().encode("utf-8"), compression)
