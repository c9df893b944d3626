"""Tests for lookup tables and the row expander."""

import pytest

from intune_assignments.expand import (
    ALL_DEVICES_LABEL,
    ALL_USERS_LABEL,
    expand,
    format_intent,
)
from intune_assignments.lookups import build_filter_lookup, build_group_lookup, resolve_name
from intune_assignments.schema import (
    NO_ICON,
    AppIntent,
    Application,
    Assignment,
    AssignmentFilter,
    AssignmentTarget,
    FilterRef,
    Group,
    TargetKind,
)

GROUPS = build_group_lookup([
    Group(id="G1", display_name="Finance"),
    Group(id="G2", display_name="Kiosk Devices"),
])
FILTERS = build_filter_lookup([AssignmentFilter(id="F1", display_name="Corporate owned")])


def _assignment(aid="as1", intent="required", kind="group", group_id="G1", filter=None):
    return Assignment(
        id=aid,
        intent=intent,
        target=AssignmentTarget(kind=kind, group_id=group_id),
        filter=filter,
    )


def _app(app_id="A1", assignments=None, **kwargs):
    fields = {"type": "win32LobApp", "display_name": "7-Zip"}
    fields.update(kwargs)
    return Application(id=app_id, assignments=assignments or [], **fields)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def test_lookup_resolves_known_id():
    assert resolve_name(GROUPS, "G1") == "Finance"


def test_lookup_miss_is_empty():
    assert resolve_name(GROUPS, "deleted-group", "group") == ""
    assert resolve_name(GROUPS, None) == ""
    assert resolve_name(GROUPS, "") == ""


def test_lookup_is_read_only():
    with pytest.raises(TypeError):
        GROUPS["G3"] = "New"  # type: ignore[index]


# ---------------------------------------------------------------------------
# Intent formatting
# ---------------------------------------------------------------------------

def test_format_intent_included_and_excluded():
    assert format_intent(AppIntent.REQUIRED, TargetKind.GROUP) == "Required Included"
    assert format_intent(AppIntent.UNINSTALL, TargetKind.EXCLUSION_GROUP) == "Uninstall Excluded"
    assert (format_intent(AppIntent.AVAILABLE_WITHOUT_ENROLLMENT, TargetKind.GROUP)
            == "AvailableWithoutEnrollment Included")


def test_format_intent_all_targets_have_no_inclusion_label():
    assert format_intent(AppIntent.AVAILABLE, TargetKind.ALL_USERS) == "Available"
    assert format_intent(AppIntent.REQUIRED, TargetKind.ALL_DEVICES) == "Required"


# ---------------------------------------------------------------------------
# expand
# ---------------------------------------------------------------------------

def test_single_assignment_round_trip():
    rows = expand([_app(assignments=[_assignment()])], GROUPS, FILTERS)
    assert len(rows) == 1
    row = rows[0]
    assert row.app_id == "A1"
    assert row.assignment_id == "as1"
    assert row.intent == "Required Included"
    assert row.target_group_name == "Finance"
    assert row.filter_name == ""
    assert row.filter_mode == ""
    assert row.icon == NO_ICON
    assert row.band_color == ""


def test_row_count_matches_assignment_count():
    apps = [
        _app("A1", [_assignment("a"), _assignment("b"), _assignment("c")]),
        _app("A2", [_assignment("d")]),
        _app("A3", []),
    ]
    rows = expand(apps, GROUPS, FILTERS)
    assert len(rows) == sum(len(a.assignments) for a in apps) == 4
    assert [r.assignment_id for r in rows] == ["a", "b", "c", "d"]


def test_app_without_assignments_contributes_no_rows():
    assert expand([_app("A3", [])], GROUPS, FILTERS) == []


def test_all_users_target_ignores_group_id():
    rows = expand([_app(assignments=[_assignment(kind="allUsers", group_id="G1")])], GROUPS, FILTERS)
    assert rows[0].target_group_name == ALL_USERS_LABEL == "All Users"


def test_all_devices_target():
    rows = expand([_app(assignments=[_assignment(kind="allDevices", group_id=None)])], GROUPS, FILTERS)
    assert rows[0].target_group_name == ALL_DEVICES_LABEL == "All Devices"
    assert rows[0].intent == "Required"


def test_exclusion_group_target():
    rows = expand(
        [_app(assignments=[_assignment(intent="uninstall", kind="exclusionGroup", group_id="G2")])],
        GROUPS, FILTERS,
    )
    assert rows[0].intent == "Uninstall Excluded"
    assert rows[0].target_group_name == "Kiosk Devices"


def test_unknown_group_degrades_to_empty_name():
    rows = expand([_app(assignments=[_assignment(group_id="gone")])], GROUPS, FILTERS)
    assert len(rows) == 1
    assert rows[0].target_group_name == ""


def test_filter_resolution():
    rows = expand(
        [_app(assignments=[_assignment(filter=FilterRef(id="F1", mode="include"))])],
        GROUPS, FILTERS,
    )
    assert rows[0].filter_name == "Corporate owned"
    assert rows[0].filter_mode == "include"


def test_filter_mode_none_is_blank():
    rows = expand(
        [_app(assignments=[
            _assignment("a", filter=FilterRef(id="F1", mode="None")),
            _assignment("b", filter=FilterRef(id="F1", mode="none")),
        ])],
        GROUPS, FILTERS,
    )
    assert [r.filter_mode for r in rows] == ["", ""]
    assert rows[0].filter_name == "Corporate owned"


def test_unknown_filter_keeps_mode():
    rows = expand(
        [_app(assignments=[_assignment(filter=FilterRef(id="missing", mode="exclude"))])],
        GROUPS, FILTERS,
    )
    assert rows[0].filter_name == ""
    assert rows[0].filter_mode == "exclude"


def test_offline_license_suffix():
    apps = [
        _app("A1", [_assignment("a")], display_name="Whiteboard", license_model="offline"),
        _app("A2", [_assignment("b")], display_name="Teams", license_model="online"),
    ]
    rows = expand(apps, GROUPS, FILTERS)
    assert rows[0].display_name == "Whiteboard (offline)"
    assert rows[1].display_name == "Teams"


def test_icon_lookup_called_once_per_app():
    calls = []

    def icon_for(app_id):
        calls.append(app_id)
        return f"<img alt='{app_id}'>"

    apps = [_app("A1", [_assignment("a"), _assignment("b")]), _app("A2", [])]
    rows = expand(apps, GROUPS, FILTERS, icon_for)
    assert calls == ["A1"]
    assert all(r.icon == "<img alt='A1'>" for r in rows)


def test_expand_does_not_modify_sources():
    app = _app(assignments=[_assignment()])
    before = app.model_dump()
    expand([app], GROUPS, FILTERS)
    assert app.model_dump() == before
