from __future__ import annotations

"""
Disk usage summaries for packages.

The summary groups the files of a package by directory, counting files and
adding up their sizes. File listings come from a PackageContentsProvider;
the default one queries the package with ``rpm``.
"""

import logging
import posixpath
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class DiskUsageError(ValueError):
    """Raised for a malformed file listing line."""


@dataclass
class DirUsage:
    """Files in one directory."""

    size: int = 0
    count: int = 0


DiskUsageSummary = dict[str, DirUsage]


class PackageContentsProvider(Protocol):
    """Source of ``"<path> <size>"`` file listing lines for a package file."""

    def file_listing(self, rpm_file: Path) -> Iterable[str]: ...


class RpmQueryContentsProvider:
    """Lists package contents by running ``rpm -q -p``."""

    QUERY_FORMAT = "[%{FILENAMES} %{FILESIZES}\n]"

    def __init__(self, rpm_binary: str = "rpm"):
        self.rpm_binary = rpm_binary

    def file_listing(self, rpm_file: Path) -> Iterable[str]:
        """Query the file names and sizes of an rpm file.

        Raises:
            subprocess.CalledProcessError: If rpm fails
        """
        logger.debug(f"Querying contents of {rpm_file}")
        result = subprocess.run(
            [self.rpm_binary, "-q", "--queryformat", self.QUERY_FORMAT, "-p", str(rpm_file)],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.splitlines()


def aggregate_disk_usage(lines: Iterable[str]) -> DiskUsageSummary:
    """Summarize a file listing per directory.

    Args:
        lines: ``"<path> <size>"`` lines

    Returns:
        Mapping of directory to its total size and file count

    Raises:
        DiskUsageError: If a line has no size or a non-integer size
    """
    summary: DiskUsageSummary = {}

    for line in lines:
        text = line.rstrip("\r\n")
        if not text.strip():
            continue

        fields = text.rsplit(maxsplit=1)
        if len(fields) != 2:
            raise DiskUsageError(f"Malformed file listing line: {text!r}")
        file_path, size_str = fields
        try:
            size = int(size_str)
        except ValueError as e:
            raise DiskUsageError(f"Invalid file size in listing line: {text!r}") from e

        directory = posixpath.dirname(file_path)
        usage = summary.get(directory)
        if usage is None:
            usage = summary[directory] = DirUsage()
        usage.size += size
        usage.count += 1

    return summary


class DiskUsageAggregator:
    """Computes disk usage summaries of package files."""

    def __init__(self, provider: PackageContentsProvider | None = None):
        """Initialize aggregator.

        Args:
            provider: File listing source (default: RpmQueryContentsProvider)
        """
        self.provider = provider or RpmQueryContentsProvider()

    def summarize(self, rpm_file: Path) -> DiskUsageSummary:
        """Compute the disk usage summary of one package file."""
        return aggregate_disk_usage(self.provider.file_listing(rpm_file))
