"""Server status document (``/api/v2/status.json``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nsc.domains.glucose.models.wire import extras


@dataclass
class StatusThresholds:
    """Glucose alarm thresholds configured on the site, in mg/dL."""

    bg_high: int | None = None
    bg_target_top: int | None = None
    bg_target_bottom: int | None = None
    bg_low: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusThresholds:
        return cls(
            bg_high=data.get("bgHigh"),
            bg_target_top=data.get("bgTargetTop"),
            bg_target_bottom=data.get("bgTargetBottom"),
            bg_low=data.get("bgLow"),
        )


_SETTINGS_KEYS = {
    "units": "units",
    "timeFormat": "time_format",
    "nightMode": "night_mode",
    "editMode": "edit_mode",
    "customTitle": "custom_title",
    "theme": "theme",
    "language": "language",
    "showPlugins": "show_plugins",
    "enable": "enable",
    "alarmTypes": "alarm_types",
    "authDefaultRoles": "auth_default_roles",
}


@dataclass
class StatusSettings:
    """Display and alarm settings. Only commonly used keys are mapped."""

    units: str | None = None
    time_format: int | None = None
    night_mode: bool | None = None
    edit_mode: bool | None = None
    custom_title: str | None = None
    theme: str | None = None
    language: str | None = None
    show_plugins: str | None = None
    enable: list[str] | None = None
    alarm_types: list[str] | None = None
    auth_default_roles: str | None = None
    thresholds: StatusThresholds | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusSettings:
        mapped = {attr: data.get(key) for key, attr in _SETTINGS_KEYS.items()}
        thresholds = data.get("thresholds")
        return cls(
            **mapped,
            thresholds=StatusThresholds.from_dict(thresholds) if thresholds else None,
            extra=extras(data, [*_SETTINGS_KEYS, "thresholds"]),
        )


_STATUS_KEYS = (
    "status",
    "name",
    "version",
    "serverTime",
    "serverTimeEpoch",
    "apiEnabled",
    "careportalEnabled",
    "boluscalcEnabled",
    "settings",
    "extendedSettings",
    "authorized",
    "runtimeState",
)


@dataclass
class Status:
    """Server identity, version and feature switches."""

    status: str
    name: str
    version: str
    server_time: str
    server_time_epoch: int
    api_enabled: bool
    careportal_enabled: bool
    boluscalc_enabled: bool
    settings: StatusSettings | None = None
    extended_settings: dict[str, Any] = field(default_factory=dict)
    authorized: bool | None = None
    runtime_state: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Status:
        settings = data.get("settings")
        return cls(
            status=data["status"],
            name=data["name"],
            version=data["version"],
            server_time=data["serverTime"],
            server_time_epoch=int(data["serverTimeEpoch"]),
            api_enabled=bool(data["apiEnabled"]),
            careportal_enabled=bool(data["careportalEnabled"]),
            boluscalc_enabled=bool(data["boluscalcEnabled"]),
            settings=StatusSettings.from_dict(settings) if settings else None,
            extended_settings=data.get("extendedSettings") or {},
            authorized=data.get("authorized"),
            runtime_state=data.get("runtimeState"),
            extra=extras(data, _STATUS_KEYS),
        )

    @property
    def ok(self) -> bool:
        return self.status == "ok"
