from __future__ import annotations

"""
Registration of metadata files in repodata/repomd.xml.
"""

import hashlib
import logging
import time
import xml.etree.ElementTree as ET
from pathlib import Path

from enhancerepo.rpmmd.compression import decompress_file, detect_compression

logger = logging.getLogger(__name__)

REPO_NS = "http://linux.duke.edu/metadata/repo"
REPOMD_FILENAME = "repomd.xml"


def _strip_repo_namespace(root: ET.Element) -> None:
    prefix = f"{{{REPO_NS}}}"
    for elem in root.iter():
        if elem.tag.startswith(prefix):
            elem.tag = elem.tag[len(prefix):]


def _data_element(data_type: str, file_path: Path, timestamp: int) -> ET.Element:
    """Build a <data> entry describing file_path."""
    file_data = file_path.read_bytes()
    file_sha256 = hashlib.sha256(file_data).hexdigest()
    file_size = len(file_data)

    open_data = decompress_file(file_data, detect_compression(file_path.name))
    open_sha256 = hashlib.sha256(open_data).hexdigest()
    open_size = len(open_data)

    data = ET.Element("data")
    data.set("type", data_type)

    checksum = ET.SubElement(data, "checksum")
    checksum.set("type", "sha256")
    checksum.text = file_sha256

    open_checksum = ET.SubElement(data, "open-checksum")
    open_checksum.set("type", "sha256")
    open_checksum.text = open_sha256

    location = ET.SubElement(data, "location")
    location.set("href", f"repodata/{file_path.name}")

    ET.SubElement(data, "timestamp").text = str(timestamp)
    ET.SubElement(data, "size").text = str(file_size)
    ET.SubElement(data, "open-size").text = str(open_size)

    return data


def register_metadata(repodata_path: Path, data_type: str, file_path: Path) -> Path:
    """Add or replace the repomd.xml entry of a metadata file.

    Other entries are kept; the revision is updated. A new repomd.xml is
    created if there is none yet.

    Args:
        repodata_path: Path to repodata directory
        data_type: Metadata type (e.g. "patterns", "susedata")
        file_path: Metadata file inside repodata_path

    Returns:
        Path to repomd.xml
    """
    repomd_path = repodata_path / REPOMD_FILENAME
    timestamp = int(time.time())

    existing: list[ET.Element] = []
    if repomd_path.exists():
        old_root = ET.parse(repomd_path).getroot()
        _strip_repo_namespace(old_root)
        existing = list(old_root)

    repomd = ET.Element("repomd")
    repomd.set("xmlns", REPO_NS)
    ET.SubElement(repomd, "revision").text = str(timestamp)

    for child in existing:
        if child.tag == "revision":
            continue
        if child.tag == "data" and child.get("type") == data_type:
            continue
        repomd.append(child)
    repomd.append(_data_element(data_type, file_path, timestamp))

    tree = ET.ElementTree(repomd)
    ET.indent(tree, space="  ")
    tree.write(repomd_path, encoding="UTF-8", xml_declaration=True)
    logger.info(f"Registered {data_type} in {repomd_path}")

    return repomd_path
