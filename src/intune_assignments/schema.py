"""
Report snapshot schema.

Strongly typed contract between the retrieval layer (cached API responses)
and the report pipeline. Source models accept both snake_case field names and
the camelCase shape returned by the management API, so cached responses can be
loaded verbatim.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from ._util import debug

SCHEMA_VERSION = 1

GRAPH_TYPE_PREFIX = "#microsoft.graph."

# Sentinel placed in the icon column when no icon markup is available.
NO_ICON = ""


def strip_graph_prefix(value: str) -> str:
    """'#microsoft.graph.win32LobApp' -> 'win32LobApp'."""
    if value.startswith(GRAPH_TYPE_PREFIX):
        return value[len(GRAPH_TYPE_PREFIX):]
    return value.lstrip("#")


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


# --- Reference tables ---


class _NamedObject(BaseModel):
    id: str
    display_name: str = Field(
        default="", validation_alias=AliasChoices("display_name", "displayName")
    )

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("display_name", mode="before")
    @classmethod
    def _display_name_not_null(cls, value: Any) -> Any:
        return _none_to_empty(value)


class Group(_NamedObject):
    """Directory group (assignment target)."""


class AssignmentFilter(_NamedObject):
    """Assignment filter narrowing which devices/users receive an assignment."""


# --- Assignments ---


class AppIntent(str, Enum):
    REQUIRED = "required"
    AVAILABLE = "available"
    UNINSTALL = "uninstall"
    AVAILABLE_WITHOUT_ENROLLMENT = "availableWithoutEnrollment"


class TargetKind(str, Enum):
    GROUP = "group"
    EXCLUSION_GROUP = "exclusionGroup"
    ALL_USERS = "allUsers"
    ALL_DEVICES = "allDevices"


# API target @odata.type -> TargetKind value
_ODATA_TARGET_KINDS = {
    "groupAssignmentTarget": TargetKind.GROUP.value,
    "exclusionGroupAssignmentTarget": TargetKind.EXCLUSION_GROUP.value,
    "allLicensedUsersAssignmentTarget": TargetKind.ALL_USERS.value,
    "allDevicesAssignmentTarget": TargetKind.ALL_DEVICES.value,
}

_TARGET_KIND_VALUES = frozenset(k.value for k in TargetKind)


def _target_odata_kind(assignment: Any) -> Optional[str]:
    """TargetKind value named by a raw assignment's target @odata.type, if any."""
    if not isinstance(assignment, dict):
        return None
    target = assignment.get("target")
    if not isinstance(target, dict) or "kind" in target or "@odata.type" not in target:
        return None
    odata = strip_graph_prefix(target["@odata.type"] or "")
    return _ODATA_TARGET_KINDS.get(odata, odata)


class AssignmentTarget(BaseModel):
    """Audience of an assignment: a group (included or excluded), all users or all devices."""

    kind: TargetKind
    group_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("group_id", "groupId")
    )

    model_config = {"extra": "ignore", "frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _kind_from_odata_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and "kind" not in data and "@odata.type" in data:
            data = dict(data)
            odata = strip_graph_prefix(data["@odata.type"] or "")
            data["kind"] = _ODATA_TARGET_KINDS.get(odata, odata)
        return data


class FilterRef(BaseModel):
    """Filter reference carried by an assignment. mode is the raw API value."""

    id: str
    mode: str = ""

    model_config = {"frozen": True}

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_not_null(cls, value: Any) -> Any:
        return _none_to_empty(value)


class Assignment(BaseModel):
    """Single assignment entry owned by an application."""

    id: str
    intent: AppIntent
    target: AssignmentTarget
    filter: Optional[FilterRef] = None

    model_config = {"extra": "ignore", "frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _lift_target_filter(cls, data: Any) -> Any:
        # The API nests the filter reference inside the target object.
        if not isinstance(data, dict) or data.get("filter") is not None:
            return data
        target = data.get("target")
        if isinstance(target, dict):
            filter_id = target.get("deviceAndAppManagementAssignmentFilterId")
            if filter_id:
                data = dict(data)
                data["filter"] = {
                    "id": filter_id,
                    "mode": target.get("deviceAndAppManagementAssignmentFilterType") or "",
                }
        return data

    @field_validator("intent", mode="before")
    @classmethod
    def _intent_case_insensitive(cls, value: Any) -> Any:
        if isinstance(value, str):
            folded = value.casefold()
            for member in AppIntent:
                if member.value.casefold() == folded:
                    return member
        return value


# --- Applications ---


class LicenseModel(str, Enum):
    NORMAL = "normal"
    OFFLINE = "offline"


class Application(BaseModel):
    """Deployable app definition with its assignments."""

    id: str
    type: str = Field(validation_alias=AliasChoices("type", "@odata.type"))
    display_name: str = Field(
        default="", validation_alias=AliasChoices("display_name", "displayName")
    )
    publisher: str = ""
    version: str = Field(
        default="",
        validation_alias=AliasChoices("version", "productVersion", "displayVersion"),
    )
    filename: str = Field(default="", validation_alias=AliasChoices("filename", "fileName"))
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdDateTime")
    )
    modified_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("modified_at", "lastModifiedDateTime")
    )
    license_model: LicenseModel = Field(
        default=LicenseModel.NORMAL,
        validation_alias=AliasChoices("license_model", "licenseModel", "licenseType"),
    )
    assignments: List[Assignment] = Field(default_factory=list)

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def _strip_type_prefix(cls, value: Any) -> Any:
        if isinstance(value, str):
            return strip_graph_prefix(value)
        return value

    @field_validator("display_name", "publisher", "version", "filename", mode="before")
    @classmethod
    def _text_not_null(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator("license_model", mode="before")
    @classmethod
    def _offline_or_normal(cls, value: Any) -> Any:
        # Store apps report "online"/"offline"; anything but offline is a normal license.
        if isinstance(value, LicenseModel):
            return value
        if isinstance(value, str) and value.casefold() == LicenseModel.OFFLINE.value:
            return LicenseModel.OFFLINE
        return LicenseModel.NORMAL

    @field_validator("assignments", mode="before")
    @classmethod
    def _drop_unsupported_targets(cls, value: Any) -> Any:
        # One assignment with an unsupported target type (e.g. a
        # Configuration Manager collection) must not fail the whole app.
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        kept = []
        for item in value:
            odata = _target_odata_kind(item)
            if odata is not None and odata not in _TARGET_KIND_VALUES:
                debug("schema", f"skipping assignment {item.get('id')}: unsupported target {odata}")
                continue
            kept.append(item)
        return kept


# --- Derived rows ---


class Bucket(str, Enum):
    """OS-family report sections, in report order."""

    WINDOWS = "Windows"
    ANDROID = "Android"
    IOS = "iOS"
    MACOS = "macOS"
    WEB = "Web"
    OTHER = "Other"


class EnrichedRow(BaseModel):
    """One flattened (application, assignment) pair with resolved display names.

    Rows are frozen; a view assigns band_color by copying the row.
    """

    app_id: str
    type: str
    display_name: str
    publisher: str = ""
    version: str = ""
    filename: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    license_model: LicenseModel = LicenseModel.NORMAL
    assignment_id: str
    intent: str
    target_group_name: str = ""
    filter_name: str = ""
    filter_mode: str = ""
    icon: str = NO_ICON
    band_color: str = ""

    model_config = {"frozen": True}

    @property
    def row_key(self) -> tuple:
        return (self.app_id, self.assignment_id)


# --- Root snapshot ---


class ReportSnapshot(BaseModel):
    """
    Everything the report needs, fully materialized. Serialized as report-snapshot.json.
    """

    schema_version: int = SCHEMA_VERSION
    meta: dict = Field(default_factory=dict)  # tenant, exported_at, etc.
    applications: List[Application] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    filters: List[AssignmentFilter] = Field(default_factory=list)

    model_config = {"extra": "forbid"}
