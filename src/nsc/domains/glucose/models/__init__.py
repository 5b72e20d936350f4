"""Typed Nightscout payloads."""

from nsc.domains.glucose.models.devicestatus import DeviceStatus
from nsc.domains.glucose.models.entries import MbgEntry, SgvEntry
from nsc.domains.glucose.models.profile import ProfileConfig, ProfileSet, TimeSchedule
from nsc.domains.glucose.models.properties import Properties, PropertyType
from nsc.domains.glucose.models.status import Status, StatusSettings, StatusThresholds
from nsc.domains.glucose.models.treatments import Treatment
from nsc.domains.glucose.models.trends import Trend

__all__ = [
    "DeviceStatus",
    "MbgEntry",
    "ProfileConfig",
    "ProfileSet",
    "Properties",
    "PropertyType",
    "SgvEntry",
    "Status",
    "StatusSettings",
    "StatusThresholds",
    "TimeSchedule",
    "Treatment",
    "Trend",
]
