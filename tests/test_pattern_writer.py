"""Tests for pattern XML serialization."""

import io
import xml.etree.ElementTree as ET

import pytest

from enhancerepo.rpmmd.patterns.models import PatternRecord
from enhancerepo.rpmmd.patterns.parser import TagRecordParser
from enhancerepo.rpmmd.patterns.writer import (
    PATTERN_NS,
    RPM_NS,
    pattern_to_xml,
    write_pattern,
)

NS = {"pat": PATTERN_NS, "rpm": RPM_NS}


def local_names(elem):
    return [child.tag.rsplit("}", 1)[-1] for child in elem]


@pytest.fixture
def sample_pattern():
    """Pattern with every field set."""
    return PatternRecord(
        name="base",
        version="11",
        release="38.1",
        architecture="x86_64",
        summary={"": "Base System", "de": "Basissystem"},
        description={"": "The base system.\n"},
        category={"": "Base Technologies"},
        icon="pattern-basis",
        order=1030,
        visible=True,
        conflicts={"old_base": "pattern"},
        supplements={"kernel-xen": "package"},
        provides={"basis": "pattern"},
        requires={"minimal_base": "pattern", "bash": "package"},
        recommends={"bash-completion": "package"},
        suggests={"vim": "package"},
        extends={"enhanced_base": "pattern", "somepkg": "package"},
        includes={"x11": "pattern"},
    )


class TestPatternXml:
    """Tests for pattern_to_xml."""

    def test_document_header(self, sample_pattern):
        """Test XML declaration and namespaced root element."""
        xml = pattern_to_xml(sample_pattern)
        lines = xml.decode("utf-8").splitlines()

        assert lines[0].startswith("<?xml")
        assert lines[1] == f'<pattern xmlns="{PATTERN_NS}" xmlns:rpm="{RPM_NS}">'
        assert xml.endswith(b"</pattern>\n")

    def test_element_order(self, sample_pattern):
        """Test that elements are written in schema order."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))

        assert local_names(root) == [
            "name",
            "version",
            "arch",
            "icon",
            "order",
            "summary",
            "summary",
            "description",
            "uservisible",
            "category",
            "conflicts",
            "supplements",
            "provides",
            "requires",
            "recommends",
            "suggests",
            "extends",
            "includes",
        ]

    def test_identity_fields(self, sample_pattern):
        """Test name, version, arch and order values."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))

        assert root.find("pat:name", NS).text == "base"
        version = root.find("pat:version", NS)
        assert version.attrib == {"epoch": "0", "ver": "11", "rel": "38.1"}
        assert root.find("pat:arch", NS).text == "x86_64"
        assert root.find("pat:icon", NS).text == "pattern-basis"
        assert root.find("pat:order", NS).text == "1030"

    def test_localized_lang_attribute(self, sample_pattern):
        """Test that only translated texts carry a lang attribute."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))
        summaries = root.findall("pat:summary", NS)

        assert summaries[0].text == "Base System"
        assert "lang" not in summaries[0].attrib
        assert summaries[1].text == "Basissystem"
        assert summaries[1].get("lang") == "de"

    def test_description_text_preserved(self, sample_pattern):
        """Test that the description text is kept as is."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))

        assert root.find("pat:description", NS).text == "The base system.\n"

    def test_entry_names_by_kind(self, sample_pattern):
        """Test that pattern entries are prefixed with their kind."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))

        entries = root.findall("rpm:requires/rpm:entry", NS)
        assert [e.get("name") for e in entries] == ["pattern:minimal_base", "bash"]
        supplements = root.findall("rpm:supplements/rpm:entry", NS)
        assert [e.get("name") for e in supplements] == ["kernel-xen"]

    def test_extends_includes_items(self, sample_pattern):
        """Test item form of extends/includes and dropping of package kinds."""
        root = ET.fromstring(pattern_to_xml(sample_pattern))

        extends = root.findall("pat:extends/pat:item", NS)
        assert [e.get("pattern") for e in extends] == ["enhanced_base"]
        includes = root.findall("pat:includes/pat:item", NS)
        assert [e.get("pattern") for e in includes] == ["x11"]

    def test_minimal_pattern(self):
        """Test that empty optional parts are omitted."""
        pattern = PatternRecord(name="tiny", visible=False)

        root = ET.fromstring(pattern_to_xml(pattern))

        assert local_names(root) == ["name", "version", "arch", "order"]
        assert root.find("pat:arch", NS).text == "noarch"
        assert root.find("pat:order", NS).text == "0"

    def test_empty_icon_written(self):
        """Test that an empty icon is still written."""
        root = ET.fromstring(pattern_to_xml(PatternRecord(name="x", icon="")))

        assert root.find("pat:icon", NS) is not None

    def test_special_characters_escaped(self):
        """Test that markup characters survive serialization."""
        pattern = PatternRecord(name="x", summary={"": "Tools & <more>"})

        root = ET.fromstring(pattern_to_xml(pattern))

        assert root.find("pat:summary", NS).text == "Tools & <more>"

    def test_write_pattern_stream(self, sample_pattern):
        """Test writing to a binary stream."""
        buffer = io.BytesIO()

        write_pattern(sample_pattern, buffer)

        assert buffer.getvalue() == pattern_to_xml(sample_pattern)


class TestParsedPatternXml:
    """Tests for serializing parsed tagged-text patterns."""

    def test_kind_tagging(self):
        """Test that Req entries are patterns and Prq entries are packages."""
        text = "=Pat: foo\n+Req:\nbar\n-Req:\n+Prq:\nbaz\n-Prq:\n"
        record = TagRecordParser().parse(text.splitlines(keepends=True))[0]

        root = ET.fromstring(pattern_to_xml(record))
        names = [e.get("name") for e in root.findall("rpm:requires/rpm:entry", NS)]

        assert names == ["pattern:bar", "baz"]

    def test_multi_language_summary(self):
        """Test one summary element per language."""
        text = "=Pat: foo\n=Sum: text1\n=Sum.de: text2\n"
        record = TagRecordParser().parse(text.splitlines(keepends=True))[0]

        root = ET.fromstring(pattern_to_xml(record))
        summaries = [(s.get("lang"), s.text) for s in root.findall("pat:summary", NS)]

        assert summaries == [(None, "text1"), ("de", "text2")]
