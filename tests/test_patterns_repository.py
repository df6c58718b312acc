"""Tests for pattern generation, split and merge."""

import gzip
import logging
import xml.etree.ElementTree as ET

import pytest

from enhancerepo.rpmmd.patterns import Patterns
from enhancerepo.rpmmd.patterns.repository import next_part_path
from enhancerepo.rpmmd.patterns.writer import PATTERN_NS, RPM_NS

COMBINED_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<patterns xmlns="{PATTERN_NS}" xmlns:rpm="{RPM_NS}" count="2">
  <pattern>
    <name>alpha</name>
    <version epoch="0" ver="1" rel="1"/>
    <arch>noarch</arch>
    <summary>Alpha</summary>
    <summary lang="de">Alpha DE</summary>
    <uservisible/>
    <rpm:requires>
      <rpm:entry name="pattern:beta"/>
      <rpm:entry name="bash"/>
    </rpm:requires>
    <includes>
      <item pattern="gamma"/>
    </includes>
  </pattern>
  <pattern>
    <name>beta</name>
    <version epoch="0" ver="2" rel="1"/>
    <arch>x86_64</arch>
    <description>Beta &amp; more</description>
  </pattern>
</patterns>
"""

PATTERN_TEXT = """=Pat: base 11 1 x86_64
=Sum: Base
+Prq:
bash
-Prq:
=Pat: devel 11 1 x86_64
=Sum: Development
+Req:
base
-Req:
"""


def canonical(elem):
    """Comparable form of an element tree, ignoring formatting whitespace."""
    return (
        elem.tag,
        sorted(elem.attrib.items()),
        (elem.text or "").strip(),
        [canonical(child) for child in elem],
    )


@pytest.fixture
def repo_dir(tmp_path):
    """Repository with a combined repodata/patterns.xml.gz."""
    repodata = tmp_path / "repodata"
    repodata.mkdir()
    with gzip.open(repodata / "patterns.xml.gz", "wt", encoding="utf-8") as f:
        f.write(COMBINED_XML)
    return tmp_path


@pytest.fixture
def pattern_file(tmp_path):
    """Gzip compressed tagged-text file with two patterns."""
    source = tmp_path / "sources" / "patterns.pat.gz"
    source.parent.mkdir()
    with gzip.open(source, "wt", encoding="utf-8") as f:
        f.write(PATTERN_TEXT)
    return source


class TestNextPartPath:
    """Tests for part filename selection."""

    def test_fresh_directory(self, tmp_path):
        """Test that index 0 is used in an empty directory."""
        assert next_part_path(tmp_path, "base") == tmp_path / "pattern-base_0.xml"

    def test_smallest_unused_index(self, tmp_path):
        """Test that the smallest free index is chosen."""
        (tmp_path / "pattern-base_0.xml").write_text("x")
        (tmp_path / "pattern-base_2.xml").write_text("x")

        assert next_part_path(tmp_path, "base") == tmp_path / "pattern-base_1.xml"


class TestGenerate:
    """Tests for Patterns.generate_patterns."""

    def test_generate_parts(self, tmp_path, pattern_file):
        """Test one part file per parsed pattern."""
        outputdir = tmp_path / "repoparts"

        written = Patterns(tmp_path).generate_patterns([pattern_file], outputdir)

        assert written == [outputdir / "pattern-base_0.xml", outputdir / "pattern-devel_0.xml"]
        root = ET.parse(written[1]).getroot()
        assert root.tag == f"{{{PATTERN_NS}}}pattern"
        entry = root.find(f"{{{RPM_NS}}}requires/{{{RPM_NS}}}entry")
        assert entry.get("name") == "pattern:base"

    def test_generate_twice_never_overwrites(self, tmp_path, pattern_file):
        """Test that a second run picks new indices."""
        outputdir = tmp_path / "repoparts"
        patterns = Patterns(tmp_path)

        first = patterns.generate_patterns([pattern_file], outputdir)
        (outputdir / "pattern-base_0.xml").write_text("edited")
        second = patterns.generate_patterns([pattern_file], outputdir)

        assert [p.name for p in second] == ["pattern-base_1.xml", "pattern-devel_1.xml"]
        assert (outputdir / "pattern-base_0.xml").read_text() == "edited"
        assert len(list(outputdir.glob("pattern-*.xml"))) == len(first) + len(second)

    def test_generate_missing_file(self, tmp_path, pattern_file):
        """Test that a missing source aborts before writing anything."""
        outputdir = tmp_path / "repoparts"
        missing = tmp_path / "missing.pat.gz"

        with pytest.raises(FileNotFoundError, match="missing.pat.gz"):
            Patterns(tmp_path).generate_patterns([pattern_file, missing], outputdir)

        assert not outputdir.exists()


class TestSplit:
    """Tests for Patterns.split_patterns."""

    def test_split_parts(self, repo_dir):
        """Test that each pattern ends up in its own file."""
        outputdir = repo_dir / "repoparts"

        written = Patterns(repo_dir).split_patterns(outputdir)

        assert [p.name for p in written] == ["pattern-alpha_0.xml", "pattern-beta_0.xml"]
        content = written[0].read_text(encoding="utf-8")
        assert content.startswith(f'<pattern xmlns="{PATTERN_NS}" xmlns:rpm="{RPM_NS}">\n')
        assert content.endswith("</pattern>\n")

        root = ET.parse(written[0]).getroot()
        assert root.find(f"{{{PATTERN_NS}}}name").text == "alpha"
        entries = root.findall(f"{{{RPM_NS}}}requires/{{{RPM_NS}}}entry")
        assert [e.get("name") for e in entries] == ["pattern:beta", "bash"]

    def test_split_avoids_existing_files(self, repo_dir):
        """Test that existing part files are not overwritten."""
        outputdir = repo_dir / "repoparts"
        outputdir.mkdir()
        (outputdir / "pattern-alpha_0.xml").write_text("keep")

        written = Patterns(repo_dir).split_patterns(outputdir)

        assert written[0].name == "pattern-alpha_1.xml"
        assert (outputdir / "pattern-alpha_0.xml").read_text() == "keep"

    def test_split_missing_name(self, tmp_path, caplog):
        """Test that a pattern without name gets the placeholder name."""
        combined = tmp_path / "repodata" / "patterns.xml.gz"
        combined.parent.mkdir()
        with gzip.open(combined, "wt", encoding="utf-8") as f:
            f.write(
                f'<patterns xmlns="{PATTERN_NS}"><pattern><arch>noarch</arch></pattern>'
                "<pattern><name>named</name></pattern></patterns>"
            )

        with caplog.at_level(logging.WARNING):
            written = Patterns(tmp_path).split_patterns(tmp_path / "out")

        assert [p.name for p in written] == [
            "pattern-NON_NAME_FOUND_0.xml",
            "pattern-named_0.xml",
        ]
        assert "No name found" in caplog.text

    def test_split_missing_combined_document(self, tmp_path):
        """Test that splitting without patterns.xml fails naming the file."""
        with pytest.raises(FileNotFoundError, match="patterns.xml.gz"):
            Patterns(tmp_path).split_patterns(tmp_path / "out")

    def test_split_explicit_file(self, tmp_path):
        """Test splitting an uncompressed document given explicitly."""
        combined = tmp_path / "patterns.xml"
        combined.write_text(COMBINED_XML, encoding="utf-8")

        written = Patterns(tmp_path).split_patterns(tmp_path / "out", combined)

        assert len(written) == 2


class TestMerge:
    """Tests for reading repoparts and writing the combined document."""

    def test_read_repoparts(self, tmp_path, pattern_file):
        """Test that only pattern-*.xml files are picked up."""
        repoparts = tmp_path / "repoparts"
        Patterns(tmp_path).generate_patterns([pattern_file], repoparts)
        (repoparts / "other.xml").write_text("<other/>")

        patterns = Patterns(tmp_path)
        patterns.read_repoparts()

        assert patterns.size == 2
        assert not patterns.empty
        assert [p.name for p in patterns.parts] == ["pattern-base_0.xml", "pattern-devel_0.xml"]

    def test_add_file_deduplicates(self, tmp_path):
        """Test that a part is only merged once."""
        patterns = Patterns(tmp_path)
        part = tmp_path / "pattern-x_0.xml"

        patterns.add_file(part)
        patterns.add_file(part)

        assert len(patterns) == 1

    def test_merged_document(self, tmp_path, pattern_file):
        """Test the structure of the combined document."""
        repoparts = tmp_path / "repoparts"
        Patterns(tmp_path).generate_patterns([pattern_file], repoparts)
        patterns = Patterns(tmp_path)
        patterns.read_repoparts(repoparts)

        xml = patterns.to_xml()

        assert xml.count("<?xml") == 1
        assert "<pattern xmlns" not in xml
        assert xml.count("<pattern>\n") == 2
        root = ET.fromstring(xml.encode("utf-8"))
        assert root.tag == f"{{{PATTERN_NS}}}patterns"
        names = [p.find(f"{{{PATTERN_NS}}}name").text for p in root]
        assert names == ["base", "devel"]

    def test_empty_merge(self, tmp_path):
        """Test merging without parts gives an empty root element."""
        root = ET.fromstring(Patterns(tmp_path).to_xml().encode("utf-8"))

        assert root.tag == f"{{{PATTERN_NS}}}patterns"
        assert len(root) == 0

    def test_split_merge_roundtrip(self, repo_dir):
        """Test that split followed by merge gives an equivalent document."""
        outputdir = repo_dir / "repoparts"
        Patterns(repo_dir).split_patterns(outputdir)

        patterns = Patterns(repo_dir)
        patterns.read_repoparts(outputdir)
        merged = ET.fromstring(patterns.to_xml().encode("utf-8"))
        original = ET.fromstring(COMBINED_XML.encode("utf-8"))

        assert [canonical(p) for p in merged] == [canonical(p) for p in original]

    def test_write_file(self, tmp_path, pattern_file):
        """Test writing the compressed combined document to repodata."""
        Patterns(tmp_path).generate_patterns([pattern_file], tmp_path / "repoparts")
        patterns = Patterns(tmp_path)
        patterns.read_repoparts()

        target = patterns.write_file("gzip")

        assert target == tmp_path / "repodata" / "patterns.xml.gz"
        with gzip.open(target, "rt", encoding="utf-8") as f:
            assert f.read() == patterns.to_xml()
        assert patterns.find_metadata_file() == target
