"""
Row expander: flattens each application's assignments into one EnrichedRow
per (application, assignment) pair, resolving group and filter names.

Pure function of its inputs; an unresolved reference degrades to an empty
display string and never drops the row.
"""

from typing import Callable, Iterable, List, Optional, Tuple

from .lookups import Lookup, resolve_name
from .schema import (
    NO_ICON,
    AppIntent,
    Application,
    Assignment,
    AssignmentTarget,
    EnrichedRow,
    LicenseModel,
    TargetKind,
)

ALL_USERS_LABEL = "All Users"
ALL_DEVICES_LABEL = "All Devices"
OFFLINE_SUFFIX = " (offline)"

# Raw filter type meaning "no filter"
_NO_FILTER_MODE = "none"

_SPECIAL_TARGET_NAMES = {
    TargetKind.ALL_USERS: ALL_USERS_LABEL,
    TargetKind.ALL_DEVICES: ALL_DEVICES_LABEL,
}

_INCLUSION_LABELS = {
    TargetKind.GROUP: "Included",
    TargetKind.EXCLUSION_GROUP: "Excluded",
}

IconLookup = Callable[[str], str]


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def format_intent(intent: AppIntent, kind: TargetKind) -> str:
    """'Required Included', 'Uninstall Excluded'; bare intent for the all-users/devices targets."""
    text = capitalize_first(intent.value)
    label = _INCLUSION_LABELS.get(kind, "")
    return f"{text} {label}" if label else text


def target_group_name(target: AssignmentTarget, group_lookup: Lookup) -> str:
    special = _SPECIAL_TARGET_NAMES.get(target.kind)
    if special is not None:
        return special
    return resolve_name(group_lookup, target.group_id, "group")


def filter_fields(assignment: Assignment, filter_lookup: Lookup) -> Tuple[str, str]:
    """(filter display name, filter inclusion mode) for an assignment."""
    ref = assignment.filter
    if ref is None:
        return "", ""
    mode = "" if ref.mode.casefold() == _NO_FILTER_MODE else ref.mode
    return resolve_name(filter_lookup, ref.id, "filter"), mode


def app_display_name(app: Application) -> str:
    if app.license_model == LicenseModel.OFFLINE:
        return app.display_name + OFFLINE_SUFFIX
    return app.display_name


def expand_application(
    app: Application,
    group_lookup: Lookup,
    filter_lookup: Lookup,
    icon: str = NO_ICON,
) -> List[EnrichedRow]:
    display_name = app_display_name(app)
    rows: List[EnrichedRow] = []
    for assignment in app.assignments:
        filter_name, filter_mode = filter_fields(assignment, filter_lookup)
        rows.append(EnrichedRow(
            app_id=app.id,
            type=app.type,
            display_name=display_name,
            publisher=app.publisher,
            version=app.version,
            filename=app.filename,
            created_at=app.created_at,
            modified_at=app.modified_at,
            license_model=app.license_model,
            assignment_id=assignment.id,
            intent=format_intent(assignment.intent, assignment.target.kind),
            target_group_name=target_group_name(assignment.target, group_lookup),
            filter_name=filter_name,
            filter_mode=filter_mode,
            icon=icon,
        ))
    return rows


def expand(
    applications: Iterable[Application],
    group_lookup: Lookup,
    filter_lookup: Lookup,
    icon_for: Optional[IconLookup] = None,
) -> List[EnrichedRow]:
    """One row per assignment, applications and assignments in source order."""
    rows: List[EnrichedRow] = []
    for app in applications:
        if not app.assignments:
            continue
        icon = icon_for(app.id) if icon_for is not None else NO_ICON
        rows.extend(expand_application(app, group_lookup, filter_lookup, icon))
    return rows
