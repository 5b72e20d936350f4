"""MCP tools for reading and logging diabetes data on a Nightscout site.

Readings and events are returned as compact JSON so an assistant can reason
about recent glucose, insulin and carbs without a Nightscout UI.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from nsc.core.errors import NightscoutError, NotFoundError
from nsc.core.query.attribution import AUTO
from nsc.core.query.diagnostics import DiagnosticEvent
from nsc.domains.glucose.models import PropertyType, SgvEntry, Treatment

if TYPE_CHECKING:
    from nsc.core.client import NightscoutClient

logger = logging.getLogger(__name__)

MAX_READINGS = 288  # one day of 5-minute CGM readings


def _reading_summary(entry: SgvEntry) -> dict[str, Any]:
    return {
        "sgv": entry.sgv,
        "direction": entry.direction.value,
        "arrow": entry.direction.arrow,
        "date": entry.date_string,
        "device": entry.device,
    }


def _error(exc: NightscoutError) -> str:
    return json.dumps({"status": "error", "error": type(exc).__name__, "message": str(exc)})


def register_glucose_tools(mcp: FastMCP, client: NightscoutClient) -> None:
    """Register Nightscout tools on the MCP server."""

    @mcp.tool
    async def glucose_readings(
        ctx: Context,
        hours: float = 3.0,
        count: int = 36,
        device: str = "",
    ) -> str:
        """Recent CGM sensor glucose readings, newest first.

        Args:
            hours: How far back to look (default: 3 hours).
            count: Maximum number of readings (default: 36, max 288).
            device: Uploader name to filter on. 'auto' uses whichever device
                uploaded the newest reading; empty means all devices.
        """
        count = max(1, min(count, MAX_READINGS))
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        query = client.sgv().get().from_date(since).limit(count)

        notes: list[str] = []

        def _note(event: DiagnosticEvent) -> None:
            notes.append(event.kind)

        if device.lower() == "auto":
            query = query.device(AUTO).diagnostics(_note)
        elif device:
            query = query.device(device)

        try:
            readings = await query.send()
        except NightscoutError as exc:
            logger.warning("glucose_readings failed: %s", exc)
            return _error(exc)

        result: dict[str, Any] = {
            "status": "ok",
            "hours": hours,
            "count": len(readings),
            "readings": [_reading_summary(r) for r in readings],
        }
        if notes:
            result["device_detection"] = notes
        return json.dumps(result)

    @mcp.tool
    async def latest_glucose(ctx: Context) -> str:
        """The most recent CGM reading with its trend arrow."""
        try:
            entry = await client.sgv().latest()
        except NotFoundError:
            return json.dumps({"status": "not_found", "message": "No readings on this site."})
        except NightscoutError as exc:
            return _error(exc)
        return json.dumps({"status": "ok", **_reading_summary(entry)})

    @mcp.tool
    async def recent_treatments(
        ctx: Context,
        hours: float = 24.0,
        count: int = 50,
    ) -> str:
        """Care events (boluses, carbs, temp basals) from the last few hours.

        Args:
            hours: How far back to look (default: 24 hours).
            count: Maximum number of events (default: 50).
        """
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        try:
            treatments = await client.treatments().get().from_date(since).limit(max(1, count)).send()
        except NightscoutError as exc:
            return _error(exc)

        return json.dumps({
            "status": "ok",
            "count": len(treatments),
            "total_insulin": round(sum(t.insulin or 0.0 for t in treatments), 2),
            "total_carbs": round(sum(t.carbs or 0.0 for t in treatments), 1),
            "treatments": [t.to_dict() for t in treatments],
        })

    @mcp.tool
    async def log_treatment(
        ctx: Context,
        event_type: str,
        carbs: float | None = None,
        insulin: float | None = None,
        glucose: float | None = None,
        notes: str = "",
        entered_by: str = "nsc",
    ) -> str:
        """Record a care event on the Nightscout site.

        Args:
            event_type: Careportal event type (e.g. 'Carb Correction', 'Correction Bolus', 'Note').
            carbs: Grams of carbohydrate.
            insulin: Units of insulin.
            glucose: Blood glucose at the time of the event.
            notes: Free-text notes.
            entered_by: Author recorded on the event.
        """
        if carbs is None and insulin is None and glucose is None and not notes:
            return json.dumps({"status": "error", "message": "Nothing to record"})

        treatment = Treatment(
            event_type=event_type,
            created_at=datetime.now(timezone.utc).isoformat(),
            carbs=carbs,
            insulin=insulin,
            glucose=glucose,
            glucose_type="Finger" if glucose is not None else None,
            notes=notes or None,
            entered_by=entered_by,
        )
        try:
            created = await client.treatments().create([treatment])
        except NightscoutError as exc:
            return _error(exc)

        logger.info("Logged %s treatment", event_type)
        return json.dumps({
            "status": "saved",
            "treatment": created[0].to_dict() if created else treatment.to_dict(),
        })

    @mcp.tool
    async def delete_treatments(
        ctx: Context,
        treatment_id: str = "",
        hours: float = 0.0,
        confirm: str = "",
    ) -> str:
        """Delete one treatment by id, or every treatment from the last few hours.

        Args:
            treatment_id: Id of a single treatment to delete.
            hours: Delete all treatments newer than this many hours (when no id is given).
            confirm: Must be exactly 'DELETE' to proceed. Safety gate.
        """
        if confirm != "DELETE":
            return json.dumps({
                "status": "cancelled",
                "message": "Call again with confirm='DELETE' to delete treatments.",
            })

        query = client.treatments().delete()
        if treatment_id:
            query = query.id(treatment_id)
        elif hours > 0:
            since = datetime.now(timezone.utc) - timedelta(hours=hours)
            query = query.from_date(since).limit(1000)
        else:
            return json.dumps({
                "status": "error",
                "message": "Provide treatment_id or a positive hours window.",
            })

        failed: list[str] = []
        query.diagnostics(lambda event: failed.append(str(event.detail.get("url"))))
        try:
            deleted = await query.send()
        except NightscoutError as exc:
            return _error(exc)

        logger.warning("Deleted %d treatment(s)", len(deleted))
        return json.dumps({
            "status": "deleted",
            "matched": len(deleted),
            "failed": len(failed),
            "treatments": [t.to_dict() for t in deleted],
        })

    @mcp.tool
    async def insulin_on_board(ctx: Context) -> str:
        """Current insulin on board (units) and carbs on board (grams)."""
        try:
            props = await client.properties().get().only(PropertyType.IOB, PropertyType.COB).send()
        except NightscoutError as exc:
            return _error(exc)
        return json.dumps({
            "status": "ok",
            "iob": props.iob.iob if props.iob else None,
            "iob_display": props.iob.display_line if props.iob else None,
            "cob": props.cob.cob if props.cob else None,
            "cob_display": props.cob.display_line if props.cob else None,
        })

    @mcp.tool
    async def nightscout_status(ctx: Context) -> str:
        """Server name, version and enabled features of the Nightscout site."""
        try:
            status = await client.status().get()
        except NightscoutError as exc:
            return _error(exc)
        return json.dumps({
            "status": status.status,
            "name": status.name,
            "version": status.version,
            "server_time": status.server_time,
            "api_enabled": status.api_enabled,
            "careportal_enabled": status.careportal_enabled,
            "units": status.settings.units if status.settings else None,
        })
