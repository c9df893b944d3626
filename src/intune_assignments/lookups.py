"""
id -> display name lookup tables for groups and assignment filters.

Built once per report and read-only afterwards. A miss resolves to an empty
name; the referenced object may have been deleted or not synced yet.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ._util import debug
from .schema import AssignmentFilter, Group

Lookup = Mapping[str, str]


def _build_lookup(items) -> Lookup:
    return MappingProxyType({item.id: item.display_name for item in items})


def build_group_lookup(groups: Iterable[Group]) -> Lookup:
    return _build_lookup(groups)


def build_filter_lookup(filters: Iterable[AssignmentFilter]) -> Lookup:
    return _build_lookup(filters)


def resolve_name(lookup: Lookup, object_id: Optional[str], label: str = "") -> str:
    """Display name for object_id, or '' when the id is empty or unknown."""
    if not object_id:
        return ""
    name = lookup.get(object_id)
    if name is None:
        if label:
            debug(label, f"no display name for id {object_id}")
        return ""
    return name
