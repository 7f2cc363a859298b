"""Command-line interface for jenkins-cli."""

from pathlib import Path

import click
from dotenv import load_dotenv

from . import __version__
from .client import JenkinsClient
from .config import save_config, save_token
from .errors import JenkinsCliError
from .formatting import CLI_TIME_FORMAT, build_fields, format_field, format_job_line, job_fields, status_from_color
from .log import configure_logging, debug_log
from .mcp_server import run_server
from .normalize import normalize_url
from .session import DEFAULT_USERNAME, Session, resolve_session


class SubcommandGroup(click.Group):
    """A Click Group that reports unknown commands and wraps jenkins-cli errors."""

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else ""
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            ctx.fail(f"unknown sub-command: {cmd_name}")
        return super().resolve_command(ctx, args)

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except JenkinsCliError as e:
            raise click.ClickException(str(e)) from e


def _resolve(ctx: click.Context) -> Session:
    options = ctx.find_root().obj or {}
    return resolve_session(url=options.get("url"), username=options.get("username"))


def _echo_fields(fields) -> None:
    for key, value in fields:
        click.echo(format_field(key, value))


@click.group(cls=SubcommandGroup)
@click.option("--url", help="Jenkins URL (overrides JENKINS_URL and the config file)")
@click.option("--username", help="Jenkins username (overrides JENKINS_USER and the config file)")
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file")
@click.option("--debug", is_flag=True, envvar="JENKINS_CLI_DEBUG", help="Log debug messages to stderr")
@click.version_option(__version__, prog_name="jenkins")
@click.pass_context
def cli(ctx, url, username, env_file, debug):
    """Jenkins CLI - query and trigger Jenkins jobs.

    Environment variables JENKINS_URL, JENKINS_USER and JENKINS_TOKEN
    override the stored configuration.
    """
    configure_logging(debug)
    if env_file:
        load_dotenv(env_file)
    else:
        dotenv_path = Path.cwd() / ".env"
        if dotenv_path.is_file():
            load_dotenv(dotenv_path)
    ctx.ensure_object(dict)
    ctx.obj.update(url=url, username=username)


@cli.command()
@click.argument("url")
@click.argument("username", required=False, default="")
def configure(url, username):
    """Configure the Jenkins URL and API token (token is read from the terminal)."""
    url = normalize_url(url.strip())
    if not url:
        raise click.BadParameter("Jenkins URL is required", param_hint="'URL'")
    username = username or DEFAULT_USERNAME

    click.echo("To create an API token in Jenkins:", err=True)
    click.echo(f"1. Go to: {url}/user/{username}/configure", err=True)
    click.echo("2. Click 'Add new Token' under API Token section", err=True)
    click.echo("3. Copy the generated token", err=True)
    click.echo("\nThe token will be stored securely in your system's keyring.\n", err=True)

    token = click.prompt(
        "Enter Jenkins API token", default="", show_default=False, hide_input=True, err=True
    )
    if not token:
        raise click.ClickException("token cannot be empty")

    config = save_config(url, username)
    save_token(config.url, token)

    click.echo(f"Configuration saved successfully for URL: {config.url}", err=True)
    click.echo(f"Username will default to '{username}' (override with JENKINS_USER env var)", err=True)


@cli.command("list-jobs")
@click.pass_context
def list_jobs(ctx):
    """List all Jenkins jobs."""
    with JenkinsClient(_resolve(ctx)) as client:
        jobs = client.list_jobs()

    if not jobs:
        click.echo("No jobs found")
        return

    click.echo(f"Found {len(jobs)} job(s):\n")
    for job in jobs:
        click.echo(format_job_line(job.get("name", ""), status_from_color(job.get("color")), job.get("url", "")))


@cli.command("get-job")
@click.argument("job_name")
@click.pass_context
def get_job(ctx, job_name):
    """Get details of a specific job."""
    with JenkinsClient(_resolve(ctx)) as client:
        job = client.get_job(job_name)
    _echo_fields(job_fields(job))


@cli.command("build-job")
@click.argument("job_name")
@click.pass_context
def build_job(ctx, job_name):
    """Trigger a build for a job."""
    with JenkinsClient(_resolve(ctx)) as client:
        client.build_job(job_name)
    click.echo(f"Successfully triggered build for job: {job_name}")


@cli.command("get-build")
@click.argument("job_name")
@click.argument("build_number")
@click.pass_context
def get_build(ctx, job_name, build_number):
    """Get details of a specific build."""
    with JenkinsClient(_resolve(ctx)) as client:
        build = client.get_build(job_name, build_number)
    _echo_fields(build_fields(build, CLI_TIME_FORMAT))


@cli.command("get-build-log")
@click.argument("job_name")
@click.argument("build_number")
@click.pass_context
def get_build_log(ctx, job_name, build_number):
    """Get the console output of a build."""
    with JenkinsClient(_resolve(ctx)) as client:
        log = client.get_build_log(job_name, build_number)
    click.echo(log, nl=False)


@cli.command("get-last-build")
@click.argument("job_name")
@click.pass_context
def get_last_build(ctx, job_name):
    """Get details of the last build."""
    with JenkinsClient(_resolve(ctx)) as client:
        build = client.get_last_build(job_name)
    _echo_fields(build_fields(build, CLI_TIME_FORMAT))


@cli.command("mcp-server")
@click.pass_context
def mcp_server(ctx):
    """Run an MCP server over stdio exposing the Jenkins tools."""
    session = _resolve(ctx)
    debug_log(f"Starting MCP server for {session.url}")
    run_server(session)
