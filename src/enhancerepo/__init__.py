from __future__ import annotations

"""
enhancerepo - rpm-md repository metadata enhancer

Adds SUSE pattern and susedata metadata to RPM repositories: converts legacy
tagged pattern descriptions to XML, splits and merges patterns.xml, and
attaches eulas, keywords and disk usage to packages.
"""

__version__ = "0.1.0"
__license__ = "GPL-2.0-or-later"

from importlib.metadata import version as _version

try:
    __version__ = _version("enhancerepo")
except Exception:
    # Package not installed yet
    pass
