from __future__ import annotations

"""
Package identity used as the join key between package files and the
metadata attached to them.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path


def calculate_sha256(file_path: Path) -> str:
    """Calculate SHA256 hash of a file.

    Args:
        file_path: Path to file

    Returns:
        Hex-encoded SHA256 hash
    """
    sha256_hash = hashlib.sha256()

    with open(file_path, "rb") as f:
        # Read in 64kb chunks for memory efficiency
        for chunk in iter(lambda: f.read(65536), b""):
            sha256_hash.update(chunk)

    return sha256_hash.hexdigest()


@dataclass(frozen=True)
class PackageVersion:
    """Version and release of a package."""

    v: str
    r: str


@dataclass(frozen=True)
class PackageId:
    """Identity of a package file: checksum plus name, version and arch."""

    checksum: str
    name: str
    version: PackageVersion
    arch: str

    @classmethod
    def from_file(cls, rpm_file: Path) -> PackageId:
        """Build the identity of an RPM file.

        The checksum is the SHA256 of the file, name/version/release/arch
        come from the ``name-version-release.arch.rpm`` filename.

        Raises:
            ValueError: If the filename is not a NVRA rpm filename
        """
        filename = rpm_file.name
        if not filename.endswith(".rpm"):
            raise ValueError(f"Not an rpm file: {rpm_file}")

        nvr, _, arch = filename[: -len(".rpm")].rpartition(".")
        parts = nvr.rsplit("-", 2)
        if not arch or len(parts) != 3 or not all(parts):
            raise ValueError(f"Cannot parse name-version-release.arch from {filename}")

        name, version, release = parts
        return cls(
            checksum=calculate_sha256(rpm_file),
            name=name,
            version=PackageVersion(v=version, r=release),
            arch=arch,
        )

    def matches(self, base_name: str) -> bool:
        """Check whether a side-car file base name (e.g. of foo.eula) is this package."""
        return self.name == base_name

    def __str__(self) -> str:
        return f"{self.name}-{self.version.v}-{self.version.r}.{self.arch}"
