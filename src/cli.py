"""CLI interface for storyfeed."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from storyfeed.config import StoryfeedConfig, load_config, merge_cli_overrides
from storyfeed.document import Sanitizer, render_document
from storyfeed.errors import StoryfeedError
from storyfeed.integrations import ContentFetcher, CoreNodeClient, HandleResolver
from storyfeed.pipeline import FeedPipeline, StoryPipeline

app = typer.Typer(
    name="storyfeed",
    help="Resolve a handle to its public stories and render them as RSS or HTML.",
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .storyfeed.toml file."),
]
AppUrlOption = Annotated[
    Optional[str],
    typer.Option("--app-url", help="Origin the app is served at (bucket registry key)."),
]
TimeoutOption = Annotated[
    Optional[int],
    typer.Option("--timeout", help="Timeout in seconds for outbound requests."),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from storyfeed import __version__

        console.print(f"storyfeed {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log pipeline progress to stderr."),
    ] = False,
) -> None:
    """storyfeed - public feeds for decentralized-storage blogs."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


def _load(config_path: Path | None, app_url: str | None, timeout: int | None) -> StoryfeedConfig:
    config = load_config(config_path)
    return merge_cli_overrides(config, app_url=app_url, timeout=timeout)


def _resolver(config: StoryfeedConfig) -> HandleResolver:
    return HandleResolver(
        CoreNodeClient(config.identity.api_url, timeout=config.identity.timeout)
    )


def _fail(exc: StoryfeedError) -> NoReturn:
    err_console.print(f"[red]Error ({exc.status_code}):[/red] {exc.message}")
    raise typer.Exit(1)


@app.command(name="feed")
def feed_cmd(
    handle: Annotated[str, typer.Argument(help="Public handle, e.g. alice.id.blockstack")],
    config_path: ConfigOption = None,
    app_url: AppUrlOption = None,
    timeout: TimeoutOption = None,
) -> None:
    """Print the RSS 2.0 feed for HANDLE."""
    config = _load(config_path, app_url, timeout)
    pipeline = FeedPipeline(_resolver(config), ContentFetcher(timeout=config.storage.timeout))
    try:
        feed = asyncio.run(pipeline.build(handle, config.app.url.rstrip("/")))
    except StoryfeedError as exc:
        _fail(exc)
    console.print(feed.to_rss2(), markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command(name="story")
def story_cmd(
    handle: Annotated[str, typer.Argument(help="Public handle of the author.")],
    story_id: Annotated[str, typer.Argument(help="Story id.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the whole page model as JSON."),
    ] = False,
    config_path: ConfigOption = None,
    app_url: AppUrlOption = None,
    timeout: TimeoutOption = None,
) -> None:
    """Print one story of HANDLE as sanitized HTML."""
    config = _load(config_path, app_url, timeout)
    pipeline = StoryPipeline(
        _resolver(config),
        ContentFetcher(timeout=config.storage.timeout),
        Sanitizer(),
        site_name=config.app.site_name,
    )
    try:
        page = asyncio.run(pipeline.render(handle, story_id, config.app.url.rstrip("/")))
    except StoryfeedError as exc:
        _fail(exc)
    output = page.model_dump_json(indent=2) if as_json else page.html
    console.print(output, markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.command(name="render")
def render_cmd(
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="Stored document JSON file."),
    ],
) -> None:
    """Render a stored document file to sanitized HTML."""
    content = path.read_text(encoding="utf-8")
    try:
        json.loads(content)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Error:[/red] {path} is not JSON: {exc}")
        raise typer.Exit(1) from exc
    html = render_document(content, Sanitizer())
    console.print(html, markup=False, emoji=False, highlight=False, soft_wrap=True)
