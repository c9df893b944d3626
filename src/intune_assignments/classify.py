"""
Bucket classifier: partitions rows into OS-family report sections by app type.

Each family owns its own set of app types; the first family whose set holds
the type wins. Anything not listed, including types introduced after this
table was written, lands in Other.
"""

from typing import Dict, FrozenSet, Iterable, List

from ._util import debug
from .schema import Bucket, EnrichedRow


def _types(*names: str) -> FrozenSet[str]:
    return frozenset(n.casefold() for n in names)


BUCKET_TYPES: Dict[Bucket, FrozenSet[str]] = {
    Bucket.WINDOWS: _types(
        "win32LobApp",
        "win32CatalogApp",
        "windowsMobileMSI",
        "windowsUniversalAppX",
        "windowsAppX",
        "windowsStoreApp",
        "microsoftStoreForBusinessApp",
        "officeSuiteApp",
        "windowsMicrosoftEdgeApp",
        "winGetApp",
        "windowsPhone81AppX",
        "windowsPhone81AppXBundle",
        "windowsPhone81StoreApp",
        "windowsPhoneXAP",
    ),
    Bucket.ANDROID: _types(
        "androidStoreApp",
        "androidLobApp",
        "androidManagedStoreApp",
        "androidManagedStoreWebApp",
        "androidForWorkApp",
        "managedAndroidStoreApp",
        "managedAndroidLobApp",
    ),
    Bucket.IOS: _types(
        "iosStoreApp",
        "iosLobApp",
        "iosVppApp",
        "managedIOSStoreApp",
        "managedIOSLobApp",
        "iosiPadOSWebClip",
    ),
    Bucket.MACOS: _types(
        "macOSLobApp",
        "macOSDmgApp",
        "macOSPkgApp",
        "macOsVppApp",
        "macOSOfficeSuiteApp",
        "macOSMicrosoftEdgeApp",
        "macOSMicrosoftDefenderApp",
        "macOSWebClip",
    ),
    Bucket.WEB: _types(
        "webApp",
        "windowsWebApp",
    ),
}


def bucket_for(app_type: str) -> Bucket:
    folded = app_type.casefold()
    for bucket, types in BUCKET_TYPES.items():
        if folded in types:
            return bucket
    return Bucket.OTHER


def classify(rows: Iterable[EnrichedRow]) -> Dict[Bucket, List[EnrichedRow]]:
    """Every bucket is present in the result, in report order, possibly empty."""
    buckets: Dict[Bucket, List[EnrichedRow]] = {b: [] for b in Bucket}
    unknown = set()
    for row in rows:
        bucket = bucket_for(row.type)
        if bucket == Bucket.OTHER:
            unknown.add(row.type)
        buckets[bucket].append(row)
    if unknown:
        debug("classify", f"app types reported under Other: {', '.join(sorted(unknown))}")
    return buckets
