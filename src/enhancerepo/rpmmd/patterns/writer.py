from __future__ import annotations

"""
XML serialization of patterns.

Writes one pattern per document in the SUSE pattern schema::

    <pattern xmlns="http://novell.com/package/metadata/suse/pattern"
             xmlns:rpm="http://linux.duke.edu/metadata/rpm">
      <name>base</name>
      <version epoch="0" ver="11" rel="1"/>
      ...
      <rpm:requires>
        <rpm:entry name="bash"/>
      </rpm:requires>
    </pattern>
"""

import io
import xml.etree.ElementTree as ET
from typing import BinaryIO

from enhancerepo.rpmmd.patterns.models import PatternRecord, RelationKind

PATTERN_NS = "http://novell.com/package/metadata/suse/pattern"
RPM_NS = "http://linux.duke.edu/metadata/rpm"

# Relations written as rpm:<relation>/rpm:entry
RPM_RELATIONS = ("conflicts", "supplements", "provides", "requires", "recommends", "suggests")
# Relations written as <relation>/item[@pattern]
ITEM_RELATIONS = ("extends", "includes")


def set_namespaces(element: ET.Element) -> None:
    """Declare the pattern and rpm namespaces on element."""
    element.set("xmlns", PATTERN_NS)
    element.set("xmlns:rpm", RPM_NS)


def _entry_name(dependency: str, kind: RelationKind) -> str:
    if kind == "package":
        return dependency
    return f"{kind}:{dependency}"


def _add_localized(parent: ET.Element, tag: str, texts: dict[str, str]) -> None:
    for lang, text in texts.items():
        elem = ET.SubElement(parent, tag)
        elem.text = text
        if lang:
            elem.set("lang", lang)


def pattern_to_element(pattern: PatternRecord) -> ET.Element:
    """Build the <pattern> element for a pattern.

    Args:
        pattern: Pattern to serialize

    Returns:
        XML element with both namespaces declared
    """
    root = ET.Element("pattern")
    set_namespaces(root)

    ET.SubElement(root, "name").text = pattern.name
    version = ET.SubElement(root, "version")
    version.set("epoch", "0")
    version.set("ver", pattern.version)
    version.set("rel", pattern.release)
    ET.SubElement(root, "arch").text = pattern.architecture
    if pattern.icon is not None:
        ET.SubElement(root, "icon").text = pattern.icon
    ET.SubElement(root, "order").text = str(pattern.order)

    _add_localized(root, "summary", pattern.summary)
    _add_localized(root, "description", pattern.description)
    if pattern.visible:
        ET.SubElement(root, "uservisible")
    _add_localized(root, "category", pattern.category)

    for relation in RPM_RELATIONS:
        entries = pattern.relation(relation)
        if not entries:
            continue
        block = ET.SubElement(root, f"rpm:{relation}")
        for dependency, kind in entries.items():
            entry = ET.SubElement(block, "rpm:entry")
            entry.set("name", _entry_name(dependency, kind))

    # Only patterns can be extended or included
    for relation in ITEM_RELATIONS:
        entries = pattern.relation(relation)
        if not entries:
            continue
        block = ET.SubElement(root, relation)
        for dependency, kind in entries.items():
            if kind == "pattern":
                ET.SubElement(block, "item").set("pattern", dependency)

    return root


def pattern_to_xml(pattern: PatternRecord) -> bytes:
    """Serialize a pattern to a complete XML document.

    Args:
        pattern: Pattern to serialize

    Returns:
        UTF-8 XML bytes with declaration, newline terminated
    """
    tree = ET.ElementTree(pattern_to_element(pattern))
    ET.indent(tree, space="  ")

    output = io.BytesIO()
    tree.write(output, encoding="UTF-8", xml_declaration=True)
    output.write(b"\n")
    return output.getvalue()


def write_pattern(pattern: PatternRecord, stream: BinaryIO) -> None:
    """Write a pattern document to a binary stream."""
    stream.write(pattern_to_xml(pattern))
