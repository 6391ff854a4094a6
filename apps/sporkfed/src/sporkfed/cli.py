"""CLI for sporkfed."""

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from .config import Settings
from .engine import handle_push
from .log import configure_logging, get_logger
from .models import PushEvent

logger = get_logger(__name__)


@click.group()
@click.option("--token", help="GitHub token (defaults to GH_TOKEN / GITHUB_TOKEN)")
@click.option("--use-gh-cli", is_flag=True, help="Use gh cli credentials")
@click.option("--api-url", help="GitHub API base URL")
@click.option("--config-path", help="Rule file path inside the repository")
@click.option("--retries", "-r", type=int, help="Retry attempts")
@click.option("--json-logs", is_flag=True, help="Log one JSON object per line")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(
    ctx: click.Context,
    token: str | None,
    use_gh_cli: bool,
    api_url: str | None,
    config_path: str | None,
    retries: int | None,
    json_logs: bool,
    verbose: int,
) -> None:
    """Mirror upstream files into this repository through pull requests."""
    configure_logging(verbose, json_logs=json_logs)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env(
        github_token=token,
        use_gh_cli=use_gh_cli or None,
        api_url=api_url,
        config_path=config_path,
        max_retries=retries,
    )


@cli.command()
@click.option("--host", help="Bind address")
@click.option("--port", type=int, help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Serve the webhook endpoint."""
    import uvicorn

    from .webhook import create_app

    settings: Settings = ctx.obj["settings"]
    app = create_app(settings)
    uvicorn.run(app, host=host or settings.host, port=port or settings.port, log_config=None)


@cli.command()
@click.argument("event_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def run(ctx: click.Context, event_file: Path) -> None:
    """Process a saved push payload once."""
    settings: Settings = ctx.obj["settings"]
    try:
        with event_file.open("r", encoding="utf-8") as f:
            event = PushEvent.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.ClickException(f"{event_file} is not a push payload: {e}") from e

    logger.info("process_push", after=event.after, repo=f"{event.owner}/{event.repo}")
    client = ctx.obj.get("client") or settings.create_client()
    results = asyncio.run(handle_push(client, event, settings.config_path))

    if not results:
        click.echo("No rules evaluated.")
        return
    for result in results:
        line = f"{result.outcome.value:<18} {result.rule.describe()}"
        if result.pull_request is not None:
            line += f"  #{result.pull_request.number}"
        click.echo(line)


if __name__ == "__main__":
    cli()
