"""susedata.xml: eulas, keywords and disk usage attached to packages."""

from enhancerepo.rpmmd.susedata.diskusage import (
    DirUsage,
    DiskUsageAggregator,
    DiskUsageError,
    PackageContentsProvider,
    RpmQueryContentsProvider,
    aggregate_disk_usage,
)
from enhancerepo.rpmmd.susedata.package_id import PackageId, PackageVersion
from enhancerepo.rpmmd.susedata.properties import (
    DiskUsageProperty,
    KeywordsProperty,
    Property,
    ValueProperty,
)
from enhancerepo.rpmmd.susedata.susedata import SuseData

__all__ = [
    "DirUsage",
    "DiskUsageAggregator",
    "DiskUsageError",
    "DiskUsageProperty",
    "KeywordsProperty",
    "PackageContentsProvider",
    "PackageId",
    "PackageVersion",
    "Property",
    "RpmQueryContentsProvider",
    "SuseData",
    "ValueProperty",
    "aggregate_disk_usage",
]
