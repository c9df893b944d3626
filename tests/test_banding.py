"""Tests for sorting and band-color assignment."""

from intune_assignments.banding import (
    BAND_COLOR_A as A,
    BAND_COLOR_B as B,
    band,
    band_colors,
    sort_rows,
)
from intune_assignments.schema import EnrichedRow


def _row(app_id, assignment_id="as", display_name="", target="") -> EnrichedRow:
    return EnrichedRow(
        app_id=app_id,
        type="win32LobApp",
        display_name=display_name or app_id,
        assignment_id=assignment_id,
        intent="Required Included",
        target_group_name=target,
    )


def test_palette_colors_differ():
    assert A != B


def test_first_row_gets_color_a():
    assert band_colors(["x"]) == [A]
    assert band_colors(["y", "x"])[0] == A


def test_empty_sequence():
    assert band_colors([]) == []
    assert band([], ["display_name"], "app_id") == []


def test_runs_share_a_color_and_changes_toggle():
    assert band_colors(["x", "x", "y", "y", "y", "z"]) == [A, A, B, B, B, A]


def test_separated_runs_are_separate_bands():
    # Each run of x is its own band; the colors follow run order, not value.
    assert band_colors(["x", "y", "y", "x"]) == [A, B, B, A]
    assert band_colors(["x", "y", "z", "x"]) == [A, B, A, B]


def test_none_and_empty_values_are_real_keys():
    assert band_colors(["", "", None]) == [A, A, B]


def test_banding_is_deterministic():
    values = ["a", "b", "b", "c", "a"]
    assert band_colors(values) == band_colors(values)


def test_sort_is_case_insensitive_with_exact_value_tiebreak():
    rows = [
        _row("A3", "x", display_name="zoom"),
        _row("A2", "y", display_name="Adobe"),
        _row("A1", "z", display_name="adobe"),
    ]
    ordered = sort_rows(rows, ["display_name"])
    assert [r.app_id for r in ordered] == ["A2", "A1", "A3"]


def test_sort_puts_empty_values_last():
    rows = [_row("A1", target=""), _row("A2", target="Finance")]
    ordered = sort_rows(rows, ["target_group_name"])
    assert [r.app_id for r in ordered] == ["A2", "A1"]


def test_band_by_app_id_after_display_name_sort():
    rows = [
        _row("A2", "as2", display_name="Zoom"),
        _row("A1", "as1b", display_name="7-Zip"),
        _row("A1", "as1a", display_name="7-Zip"),
        _row("A3", "as3", display_name="Notepad++"),
    ]
    banded = band(rows, ["display_name"], "app_id")
    assert [(r.app_id, r.assignment_id) for r in banded] == [
        ("A1", "as1a"), ("A1", "as1b"), ("A3", "as3"), ("A2", "as2"),
    ]
    assert [r.band_color for r in banded] == [A, A, B, A]


def test_band_returns_copies():
    rows = [_row("A1", target="Finance"), _row("A2", target="Sales")]
    banded = band(rows, ["target_group_name"], "target_group_name")
    assert [r.band_color for r in banded] == [A, B]
    assert all(r.band_color == "" for r in rows)


def test_same_row_can_band_differently_per_view():
    rows = [
        _row("A1", "as1", display_name="Alpha", target="Zeta"),
        _row("A2", "as2", display_name="Beta", target="Zeta"),
        _row("A3", "as3", display_name="Gamma", target="Eta"),
    ]
    by_app = {r.app_id: r.band_color for r in band(rows, ["display_name"], "app_id")}
    by_target = {
        r.app_id: r.band_color
        for r in band(rows, ["target_group_name", "display_name"], "target_group_name")
    }
    assert by_app == {"A1": A, "A2": B, "A3": A}
    assert by_target == {"A3": A, "A1": B, "A2": B}


def test_group_names_differing_only_in_case_stay_contiguous():
    from intune_assignments.renderers.table_view import TARGET_GROUP_VIEW

    rows = [
        _row("A1", display_name="Alpha", target="Finance"),
        _row("A2", display_name="Beta", target="finance"),
        _row("A3", display_name="Gamma", target="Finance"),
    ]
    banded = band(rows, TARGET_GROUP_VIEW.sort_keys, TARGET_GROUP_VIEW.group_key)
    assert [r.target_group_name for r in banded] == ["Finance", "Finance", "finance"]
    assert [r.app_id for r in banded] == ["A1", "A3", "A2"]
    assert [r.band_color for r in banded] == [A, A, B]


def test_same_id_rows_stay_in_one_band_with_case_variant_names():
    rows = [
        _row("A1", "as1", display_name="zoom"),
        _row("A2", "as2", display_name="Zoom"),
        _row("A1", "as3", display_name="zoom"),
    ]
    banded = band(rows, ["display_name"], "app_id")
    assert [r.app_id for r in banded] == ["A2", "A1", "A1"]
    assert [r.band_color for r in banded] == [A, B, B]
