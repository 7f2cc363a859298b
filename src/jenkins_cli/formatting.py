"""Helpers that turn Jenkins API data into human-readable text."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

# Order matters: the first matching prefix wins.
COLOR_STATUSES = (
    ("blue", "SUCCESS"),
    ("red", "FAILURE"),
    ("yellow", "UNSTABLE"),
    ("grey", "PENDING"),
    ("aborted", "ABORTED"),
    ("notbuilt", "NOT_BUILT"),
    ("disabled", "DISABLED"),
)

JOB_SEPARATOR = "/job/"

CLI_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %Z"
MCP_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

FIELD_WIDTH = 20


def status_from_color(color: Optional[str]) -> str:
    """Convert a Jenkins ball color into a build status.

    Animated colors (``blue_anime``) map like their static counterparts.
    Unknown colors are upper-cased, and an empty color (folders and other
    non-buildable items) gives an empty status.

    Args:
        color: Jenkins color string, e.g. ``"red_anime"``

    Returns:
        Status string such as ``"FAILURE"``
    """
    if not color:
        return ""
    for prefix, status in COLOR_STATUSES:
        if color.startswith(prefix):
            return status
    return color.upper()


def is_disabled(color: Optional[str]) -> bool:
    return (color or "").startswith("disabled")


def _plural(count: int, unit: str) -> str:
    if count == 1:
        return f"1 {unit}"
    return f"{count} {unit}s"


def format_duration(milliseconds: float) -> str:
    """Format a millisecond duration using the largest whole unit.

    ``90000`` renders as ``"1 minute"`` and ``0`` as ``"0 seconds"``.
    """
    seconds = int(milliseconds // 1000)
    if seconds < 60:
        return _plural(seconds, "second")

    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")

    return _plural(hours // 24, "day")


def format_timestamp(milliseconds: int, fmt: str = CLI_TIME_FORMAT) -> str:
    """Render an epoch timestamp in milliseconds in local time."""
    started = datetime.fromtimestamp(milliseconds / 1000).astimezone()
    return started.strftime(fmt)


def parse_job_path(job_path: str) -> Tuple[str, List[str]]:
    """Split a nested job locator into its leaf name and parent folders.

    Jenkins nests folders as ``folder/job/sub-folder/job/name``.

    Args:
        job_path: Job name, optionally with ``/job/``-separated folders

    Returns:
        Tuple of (leaf job name, ordered list of parent folder names)
    """
    parts = job_path.split(JOB_SEPARATOR)
    return parts[-1], parts[:-1]


def job_url_path(job_path: str) -> str:
    """Build the ``/job/.../job/<name>`` URL path for a (nested) job."""
    leaf, parents = parse_job_path(job_path)
    return "".join(f"/job/{quote(part, safe='')}" for part in parents + [leaf])


def build_status(build: Dict[str, Any]) -> str:
    if build.get("building"):
        return "BUILDING"
    return build.get("result") or ""


def build_fields(build: Dict[str, Any], time_format: str = CLI_TIME_FORMAT) -> List[Tuple[str, Any]]:
    """Select the fields shown for a single build, in display order."""
    fields = [
        ("Build Number", build.get("number")),
        ("URL", build.get("url", "")),
        ("Status", build_status(build)),
    ]
    if build.get("description"):
        fields.append(("Description", build["description"]))
    if (build.get("timestamp") or 0) > 0:
        fields.append(("Started", format_timestamp(build["timestamp"], time_format)))
    if (build.get("duration") or 0) > 0:
        fields.append(("Duration", format_duration(build["duration"])))
    return fields


def job_fields(job: Dict[str, Any], last_build_result: Optional[str] = None) -> List[Tuple[str, Any]]:
    """Select the fields shown for a job, in display order.

    ``last_build_result`` overrides the result embedded in ``lastBuild``,
    for callers that look it up separately.
    """
    fields = [
        ("Job Name", job.get("name", "")),
        ("URL", job.get("url", "")),
    ]
    status = status_from_color(job.get("color"))
    if status:
        fields.append(("Status", status))
    if job.get("description"):
        fields.append(("Description", job["description"]))

    last_build = job.get("lastBuild")
    if last_build:
        result = last_build_result if last_build_result is not None else last_build.get("result")
        fields.append(("Last Build", f"#{last_build.get('number')} - {result or ''}"))
    if job.get("lastSuccessfulBuild"):
        fields.append(("Last Success", f"#{job['lastSuccessfulBuild'].get('number')}"))
    if job.get("lastFailedBuild"):
        fields.append(("Last Failed", f"#{job['lastFailedBuild'].get('number')}"))
    return fields


def format_field(key: str, value: Any) -> str:
    """Lay out a ``key: value`` pair with the key padded to a fixed column.

    Multi-line values start on the next line, indented under the value
    column.
    """
    text = str(value)
    label = f"{key + ':':<{FIELD_WIDTH}}"
    if "\n" not in text:
        return f"{label} {text}"
    lines = [label]
    lines.extend(f"{'':<{FIELD_WIDTH}} {line}" for line in text.split("\n"))
    return "\n".join(lines)


def format_job_line(name: str, status: str, url: str) -> str:
    return f"{name:<40} {status:<15} {url}"
