from __future__ import annotations

"""
SUSE extensions to primary data (susedata.xml).

Attaches eulas, keywords and disk usage to the packages of a repository.
See http://en.opensuse.org/Standards/Rpm_Metadata#SUSE_primary_data_.28susedata.xml.29
"""

import glob
import io
import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from enhancerepo.rpmmd.compression import (
    CompressionFormat,
    add_compression_extension,
    write_metadata,
)
from enhancerepo.rpmmd.susedata.diskusage import DiskUsageAggregator, PackageContentsProvider
from enhancerepo.rpmmd.susedata.package_id import PackageId
from enhancerepo.rpmmd.susedata.properties import (
    DiskUsageProperty,
    KeywordsProperty,
    Property,
    ValueProperty,
)

logger = logging.getLogger(__name__)

METADATA_FILENAME = "susedata.xml"


class SuseData:
    """Properties of the packages in a repository directory.

    At most one property per (package, property name) is kept; adding a
    property with the same name replaces the previous one.
    """

    name = "susedata"

    def __init__(
        self,
        repo_dir: Path,
        log: logging.Logger | None = None,
        contents_provider: PackageContentsProvider | None = None,
    ):
        """Initialize susedata.

        Args:
            repo_dir: Directory to scan for packages and side-car files
            log: Logger for progress messages (defaults to module logger)
            contents_provider: File listing source for disk usage
        """
        self.dir = repo_dir
        self.log = log or logger
        self.aggregator = DiskUsageAggregator(contents_provider)
        self.diskusage_enabled = False
        self._properties: dict[PackageId, dict[str, Property]] = {}

    @property
    def empty(self) -> bool:
        return not self._properties

    @property
    def packages(self) -> list[PackageId]:
        return list(self._properties)

    def properties(self, pkgid: PackageId) -> dict[str, Property]:
        """Properties attached to a package (empty if none)."""
        return dict(self._properties.get(pkgid, {}))

    def _get_or_create(self, pkgid: PackageId) -> dict[str, Property]:
        props = self._properties.get(pkgid)
        if props is None:
            props = self._properties[pkgid] = {}
        return props

    def add_attribute(self, pkgid: PackageId, prop: Property) -> None:
        """Attach a property to a package, replacing one with the same name."""
        self._get_or_create(pkgid)[prop.name] = prop

    def _matching_packages(self, side_car: Path, suffix: str) -> Iterator[PackageId]:
        """Packages next to a side-car file (e.g. foo.eula) that it belongs to."""
        base = side_car.name[: -len(suffix)]
        for rpm_file in sorted(side_car.parent.glob(f"{glob.escape(base)}*.rpm")):
            try:
                pkgid = PackageId.from_file(rpm_file)
            except ValueError as e:
                self.log.warning(f"Skipping {rpm_file}: {e}")
                continue
            if pkgid.matches(base):
                yield pkgid

    def add_eulas(self) -> None:
        """Attach the content of every <name>.eula file to package <name>."""
        for eula_file in sorted(self.dir.rglob("*.eula")):
            content = eula_file.read_text(encoding="utf-8")
            for pkgid in self._matching_packages(eula_file, ".eula"):
                self.add_attribute(pkgid, ValueProperty("eula", content))
                self.log.info(f"Adding eula: {eula_file} to {pkgid}")

    def add_keywords(self) -> None:
        """Attach the lines of every <name>.keywords file to package <name>."""
        for keyword_file in sorted(self.dir.rglob("*.keywords")):
            with open(keyword_file, encoding="utf-8", newline="") as f:
                lines = [line.rstrip("\r\n") for line in f]
            keywords = [line for line in lines if line]
            if not keywords:
                self.log.warning(f"No keywords in {keyword_file}, skipping")
                continue
            for pkgid in self._matching_packages(keyword_file, ".keywords"):
                prop = self._get_or_create(pkgid).get("keyword")
                if not isinstance(prop, KeywordsProperty):
                    prop = KeywordsProperty()
                    self.add_attribute(pkgid, prop)
                for keyword in keywords:
                    prop.add(keyword)
                self.log.info(f"Adding keyword: {keyword_file} to {pkgid}")

    def add_disk_usage(self) -> None:
        """Attach a disk usage property to every package in the directory."""
        self.diskusage_enabled = True
        self.log.info("Preparing disk usage...")
        for rpm_file in sorted(self.dir.rglob("*.rpm")):
            try:
                pkgid = PackageId.from_file(rpm_file)
            except ValueError as e:
                self.log.warning(f"Skipping {rpm_file}: {e}")
                continue
            self.add_attribute(pkgid, DiskUsageProperty(pkgid, rpm_file, self.aggregator))

    def to_element(self) -> ET.Element:
        """Build the <susedata> element."""
        root = ET.Element(self.name)
        for pkgid, props in self._properties.items():
            package = ET.SubElement(root, "package")
            package.set("pkgid", pkgid.checksum)
            package.set("name", pkgid.name)

            version = ET.SubElement(package, "version")
            version.set("ver", pkgid.version.v)
            version.set("rel", pkgid.version.r)
            version.set("arch", pkgid.arch)
            version.set("epoch", "0")

            for prop in props.values():
                prop.write(package, pkgid)
        return root

    def write(self, stream: BinaryIO) -> None:
        """Write susedata.xml to a binary stream."""
        tree = ET.ElementTree(self.to_element())
        ET.indent(tree, space="  ")
        tree.write(stream, encoding="UTF-8", xml_declaration=True)
        stream.write(b"\n")

    def to_xml(self) -> bytes:
        output = io.BytesIO()
        self.write(output)
        return output.getvalue()

    def metadata_path(self, compression: CompressionFormat = "gzip") -> Path:
        filename = add_compression_extension(METADATA_FILENAME, compression)
        return self.dir / "repodata" / filename

    def write_file(self, compression: CompressionFormat = "gzip") -> Path:
        """Write repodata/susedata.xml[.ext].

        Returns:
            Path of the written file
        """
        target = self.metadata_path(compression)
        self.log.info(f"Writing {target}")
        return write_metadata(target, self.to_xml(), compression)
