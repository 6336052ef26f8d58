"""Command-line interface for postmatter.

Commands:
- check: Validate content files and report malformed ones.
- show: Print the parsed metadata of one file as JSON.
- build: Render all content files into the output directory.
- post: Create a new post interactively.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import click
import questionary

from . import __version__
from .document import Document, Metadata
from .frontmatter import MalformedDocument, format_timestamp, serialize_document
from .loader import FileContentLoader, load_document
from .utils import slugify


@click.group()
@click.version_option(version=__version__, prog_name="postmatter")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Front-matter document loader for static sites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _report_failure(exc: MalformedDocument) -> None:
    click.echo(click.style(str(exc), fg="red"), err=True)


def _expand_paths(paths: tuple[Path, ...]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(FileContentLoader(path).iter_files(include_drafts=True))
        else:
            files.append(path)
    return files


@cli.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)
def check(paths: tuple[Path, ...]):
    """Validate content files or directories."""
    failures = 0
    files = _expand_paths(paths)
    for path in files:
        try:
            load_document(path)
        except MalformedDocument as exc:
            failures += 1
            _report_failure(exc)
    if failures:
        click.echo(
            click.style(f"{failures} of {len(files)} files malformed", bold=True),
            err=True,
        )
        raise SystemExit(1)
    click.echo(f"{len(files)} files OK")


def _to_json(value):
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, tuple):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--body", "with_body", is_flag=True, help="Include the body text")
def show(path: Path, with_body: bool):
    """Print a document's metadata as JSON."""
    try:
        document = load_document(path)
    except MalformedDocument as exc:
        _report_failure(exc)
        raise SystemExit(1) from None
    payload = {"metadata": document.metadata.as_dict()}
    if with_body:
        payload["body"] = document.body
    click.echo(json.dumps(payload, indent=2, default=_to_json, ensure_ascii=False))


@cli.command()
@click.option(
    "--drafts/--no-drafts",
    default=None,
    help="Include draft content (overrides postmatter.yaml)",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Output directory (overrides postmatter.yaml)",
)
def build(drafts: bool | None, output: Path | None):
    """Render all content files into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(
            project_root, include_drafts=drafts, output_dir_override=output
        )
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {exc.source_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    for failure in result.failures:
        _report_failure(failure)
    click.echo(f"Built {len(result.documents)} documents into {result.output_dir}")
    if not result.ok:
        raise SystemExit(1)


@cli.command()
@click.option(
    "--dir",
    "target_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("content"),
    show_default=True,
    help="Directory to create the post in",
)
def post(target_dir: Path):
    """Create a new post interactively."""
    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    description = questionary.text("Description:", style=_questionary_style()).ask()
    if description is None:
        raise click.Abort()

    tags = questionary.text(
        "Tags (comma separated):", style=_questionary_style()
    ).ask()
    if tags is None:
        raise click.Abort()

    featured = questionary.confirm(
        "Featured post?", default=False, style=_questionary_style()
    ).ask()
    if featured is None:
        raise click.Abort()

    now = datetime.now(timezone.utc)
    filename = f"{now.strftime('%Y-%m-%d')}-{slugify(title.strip())}.md"
    target_path = target_dir / filename
    if target_path.exists():
        raise click.ClickException(f"File already exists: {target_path}")

    document = Document(
        metadata=Metadata(
            template_key="blog-post",
            title=title.strip(),
            date=now.replace(microsecond=(now.microsecond // 1000) * 1000),
            description=description.strip(),
            featured_post=featured,
            tags=tuple(t.strip() for t in tags.split(",") if t.strip()),
        ),
        body="",
    )
    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(serialize_document(document), encoding="utf-8")
    click.echo(f"Created {target_path}")


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
