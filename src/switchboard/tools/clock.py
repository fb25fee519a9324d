"""Current date/time tool."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..models.tool import Tool, ToolResult, object_schema


def time_info(timezone: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    tz = ZoneInfo(timezone) if timezone else datetime.now().astimezone().tzinfo
    current = (now or datetime.now(tz)).astimezone(tz)
    return {
        "formatted": current.strftime("%A, %B %d, %Y at %I:%M:%S %p %Z"),
        "iso": current.isoformat(),
        "timestamp": str(int(current.timestamp() * 1000)),
        "timezone": timezone or str(current.tzname()),
        "dayOfWeek": current.strftime("%A"),
        "date": current.strftime("%Y-%m-%d"),
        "time": current.strftime("%H:%M:%S"),
    }


async def _execute(args: dict) -> ToolResult:
    timezone = args.get("timezone") or None
    try:
        return ToolResult.ok(time_info(timezone))
    except (ZoneInfoNotFoundError, ValueError):
        return ToolResult.fail(f"Unknown timezone: {timezone}")


time_tool = Tool(
    name="get_current_time",
    description=(
        "Get the current date and time. Use this tool whenever the user asks about "
        "the current time, today's date, the day of the week, or the time in "
        "another timezone."
    ),
    parameters=object_schema(
        {
            "timezone": {
                "type": "string",
                "description": (
                    'Optional IANA timezone (e.g., "America/New_York", "Europe/London"). '
                    "Defaults to the server timezone."
                ),
            },
        },
    ),
    execute=_execute,
)
