"""
Properties attached to packages in susedata.xml.

Each property serializes itself into the <package> element of the package
it is attached to.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path

from enhancerepo.rpmmd.susedata.diskusage import DiskUsageAggregator, DiskUsageSummary
from enhancerepo.rpmmd.susedata.package_id import PackageId


class Property(ABC):
    """Named attribute of a package."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def write(self, parent: ET.Element, pkgid: PackageId) -> None:
        """Append this property to the <package> element of pkgid."""
        raise NotImplementedError


class ValueProperty(Property):
    """Scalar text property, written as <name>value</name>."""

    def __init__(self, name: str, value: str):
        super().__init__(name)
        self.value = value

    def write(self, parent: ET.Element, pkgid: PackageId) -> None:
        ET.SubElement(parent, self.name).text = self.value

    def __repr__(self) -> str:
        return f"ValueProperty({self.name!r}, {self.value!r})"


class KeywordsProperty(Property):
    """Keywords of a package, written as one <keyword> element each."""

    def __init__(self, keywords: list[str] | None = None):
        super().__init__("keyword")
        self.keywords: list[str] = []
        for keyword in keywords or []:
            self.add(keyword)

    def add(self, keyword: str) -> None:
        if keyword not in self.keywords:
            self.keywords.append(keyword)

    def write(self, parent: ET.Element, pkgid: PackageId) -> None:
        for keyword in self.keywords:
            ET.SubElement(parent, self.name).text = keyword


class DiskUsageProperty(Property):
    """Per-directory disk usage of a package.

    The summary is computed from the package contents every time the
    property is written.
    """

    def __init__(self, pkgid: PackageId, rpm_file: Path, aggregator: DiskUsageAggregator):
        super().__init__("diskusage")
        self.pkgid = pkgid
        self.rpm_file = rpm_file
        self.aggregator = aggregator

    def summary(self) -> DiskUsageSummary:
        return self.aggregator.summarize(self.rpm_file)

    def write(self, parent: ET.Element, pkgid: PackageId) -> None:
        diskusage = ET.SubElement(parent, "diskusage")
        dirs = ET.SubElement(diskusage, "dirs")
        for directory, usage in self.summary().items():
            dir_elem = ET.SubElement(dirs, "dir")
            dir_elem.set("name", directory)
            dir_elem.set("size", str(usage.size))
            dir_elem.set("count", str(usage.count))
