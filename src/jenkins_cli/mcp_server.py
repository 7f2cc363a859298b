"""
Jenkins MCP Server

This module exposes a small set of read-only Jenkins operations as Model Context
Protocol (MCP) tools served over stdio. It is started with ``jenkins mcp-server``
and uses the same resolved connection (URL, username, token) as the CLI.

The server uses python-jenkins to talk to Jenkins.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

# Import MCP server components
from mcp.server.fastmcp import FastMCP, Context

# Import Jenkins API library
import jenkins
from jenkins import NotFoundException

from .formatting import (
    MCP_TIME_FORMAT,
    build_fields,
    format_job_line,
    is_disabled,
    job_fields,
    parse_job_path,
    status_from_color,
)
from .log import debug_log
from .session import Session

SERVER_NAME = "jenkins-cli-mcp-server"
REQUEST_TIMEOUT = 30


@dataclass
class JenkinsContext:
    """Context class for holding the Jenkins client and connection details."""
    client: jenkins.Jenkins
    session: Session


# Helper functions
def _client(ctx: Context) -> jenkins.Jenkins:
    return ctx.request_context.lifespan_context.client


def require_string(name: str, value: Optional[str]) -> str:
    """Validate a required string tool argument.

    Raises:
        ValueError: If the argument is missing or empty
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing or invalid '{name}' argument")
    return value.strip()


def parse_build_number(value: str) -> int:
    """Parse a build number given as a string.

    Raises:
        ValueError: If the value is not a positive integer
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid build number: {value}")
    if number <= 0:
        raise ValueError(f"Invalid build number: {value}")
    return number


def jenkins_job_name(job_name: str) -> str:
    """Convert ``a/job/b`` into the ``a/b`` form python-jenkins expects."""
    leaf, parents = parse_job_path(job_name)
    return "/".join(parents + [leaf])


def _render(fields) -> str:
    return "\n".join(f"{key}: {value}" for key, value in fields)


def _job_listing(jobs) -> list:
    return [job for job in jobs if not is_disabled(job.get("color"))]


def list_jobs_report(client: jenkins.Jenkins) -> str:
    """Render all enabled top-level jobs with their status and URL.

    Raises:
        ValueError: If the jobs cannot be listed
    """
    try:
        jobs = client.get_jobs()
    except Exception as e:
        debug_log(f"Error listing jobs: {str(e)}")
        raise ValueError(f"Failed to list jobs: {str(e)}")

    enabled_jobs = _job_listing(jobs)
    if not enabled_jobs:
        return "No jobs found"

    lines = [f"Found {len(enabled_jobs)} job(s):", ""]
    for job in enabled_jobs:
        lines.append(format_job_line(job.get("name", ""), status_from_color(job.get("color")), job.get("url", "")))
    return "\n".join(lines) + "\n"


def _last_build_result(client: jenkins.Jenkins, name: str, job_info: Dict[str, Any]) -> Optional[str]:
    last_build = job_info.get("lastBuild")
    if not last_build:
        return None
    try:
        build_info = client.get_build_info(name, last_build["number"])
    except Exception as e:
        # Optional detail; the field is left without a result.
        debug_log(f"Could not look up last build of {name}: {str(e)}")
        return None
    return build_info.get("result") or ""


def job_report(client: jenkins.Jenkins, job_name: str) -> str:
    """Render job details, its recent builds and any enabled inner jobs.

    Raises:
        ValueError: If the job does not exist or cannot be fetched
    """
    name = jenkins_job_name(job_name)
    try:
        job_info = client.get_job_info(name)
    except NotFoundException:
        raise ValueError(f"Failed to get job: Job {job_name} not found")
    except Exception as e:
        debug_log(f"Error getting job info: {str(e)}")
        raise ValueError(f"Failed to get job: {str(e)}")

    result = _render(job_fields(job_info, _last_build_result(client, name, job_info)))

    # Folders and multibranch pipelines list their children under "jobs"
    inner_jobs = _job_listing(job_info.get("jobs") or [])
    if inner_jobs:
        result += f"\n\nInner Jobs ({len(inner_jobs)}):"
        for inner_job in inner_jobs:
            status = status_from_color(inner_job.get("color"))
            result += f"\n  {inner_job.get('name', ''):<38} {status:<15} {inner_job.get('url', '')}"
    return result


def _get_build_info(client: jenkins.Jenkins, job_name: str, build_number: int) -> Dict[str, Any]:
    name = jenkins_job_name(job_name)
    try:
        client.get_job_info(name)
    except NotFoundException:
        raise ValueError(f"Failed to get job: Job {job_name} not found")
    except Exception as e:
        debug_log(f"Error getting job info: {str(e)}")
        raise ValueError(f"Failed to get job: {str(e)}")

    try:
        return client.get_build_info(name, build_number)
    except NotFoundException:
        raise ValueError(f"Failed to get build: Build #{build_number} not found for job {job_name}")
    except Exception as e:
        debug_log(f"Error getting build info: {str(e)}")
        raise ValueError(f"Failed to get build: {str(e)}")


def build_report(client: jenkins.Jenkins, job_name: str, build_number: str) -> str:
    """Render status, duration and start time of a single build."""
    number = parse_build_number(build_number)
    build_info = _get_build_info(client, job_name, number)
    return _render(build_fields(build_info, MCP_TIME_FORMAT))


def build_log(client: jenkins.Jenkins, job_name: str, build_number: str) -> str:
    """Return the console output of a single build."""
    number = parse_build_number(build_number)
    _get_build_info(client, job_name, number)
    try:
        return client.get_build_console_output(jenkins_job_name(job_name), number)
    except Exception as e:
        debug_log(f"Error getting build console output: {str(e)}")
        raise ValueError(f"Failed to get build log: {str(e)}")


# MCP tools

def list_jobs(ctx: Context) -> str:
    """List all Jenkins jobs with their status and URL"""
    debug_log("Listing Jenkins jobs")
    return list_jobs_report(_client(ctx))


def get_job(ctx: Context, job_name: str) -> str:
    """Get details of a specific Jenkins job including status, description, and build history

    Args:
        job_name: Jenkins job name, nested jobs as "folder/job/name"
    """
    job_name = require_string("job_name", job_name)
    debug_log(f"Getting job {job_name}")
    return job_report(_client(ctx), job_name)


def get_build(ctx: Context, job_name: str, build_number: str) -> str:
    """Get details of a specific build including status, duration, and timestamp

    Args:
        job_name: Jenkins job name
        build_number: Build number (e.g., '42')
    """
    job_name = require_string("job_name", job_name)
    build_number = require_string("build_number", build_number)
    debug_log(f"Getting build #{build_number} of job {job_name}")
    return build_report(_client(ctx), job_name, build_number)


def get_build_log(ctx: Context, job_name: str, build_number: str) -> str:
    """Get the console output of a specific build

    Args:
        job_name: Jenkins job name
        build_number: Build number (e.g., '42')
    """
    job_name = require_string("job_name", job_name)
    build_number = require_string("build_number", build_number)
    debug_log(f"Getting console output for build #{build_number} of job {job_name}")
    return build_log(_client(ctx), job_name, build_number)


TOOLS = (list_jobs, get_job, get_build, get_build_log)


def create_server(session: Session) -> FastMCP:
    """Create the MCP server for a resolved session.

    The Jenkins client is created in the server lifespan, so nothing
    connects to Jenkins until the server actually runs.
    """

    @asynccontextmanager
    async def jenkins_lifespan(server: FastMCP) -> AsyncIterator[JenkinsContext]:
        """Manage Jenkins client lifecycle"""
        debug_log("Starting Jenkins lifespan")
        try:
            debug_log(f"Connecting to Jenkins at {session.url}")
            client = jenkins.Jenkins(
                session.url,
                username=session.username,
                password=session.token,
                timeout=REQUEST_TIMEOUT,
            )
            yield JenkinsContext(client=client, session=session)
        finally:
            debug_log("Exiting Jenkins lifespan")

    mcp = FastMCP(SERVER_NAME, lifespan=jenkins_lifespan)
    for tool in TOOLS:
        mcp.add_tool(tool)
    debug_log("FastMCP initialized")
    return mcp


def run_server(session: Session) -> None:
    """Serve the Jenkins tools over stdio until the client disconnects."""
    create_server(session).run()
