"""Site building for postmatter.

Loads every content file, renders the bodies and writes one HTML page per
document. Malformed content files are collected and reported; they do not
stop the remaining files from being built.

Key functions:
- build_site: Build all documents of a project.
- load_config: Load project configuration from postmatter.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError, TemplateSyntaxError

from .document import Document
from .frontmatter import MalformedDocument
from .loader import ContentProcessor
from .protocols import BodyRenderer
from .renderers import MarkdownRenderer
from .templates import TemplateEngine
from .utils import ensure_clean_dir, slugify

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "postmatter.yaml"

DEFAULT_CONFIG = {
    "content_dir": "content",
    "templates_dir": "templates",
    "output_dir": "output",
    "include_drafts": False,
    "data": {},
}


class BuildError(Exception):
    """Error while rendering one document.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a build.

    Attributes:
        documents: Documents that were rendered.
        output_dir: Directory the pages were written to.
        failures: Content files that could not be parsed.
    """

    documents: list[Document]
    output_dir: Path
    failures: list[MalformedDocument] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from postmatter.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            config.update(loaded)
        else:
            logger.warning("Ignoring %s: expected a mapping", config_path)
    return config


def page_path(
    output_dir: Path, document: Document, content_dir: Path | None = None
) -> Path:
    """Return the output file for a document.

    Folders below the content directory are kept, so files with the same
    name in different folders get different pages. A file whose slug is
    ``index`` becomes the index page of its folder.

    Args:
        output_dir: Base output directory.
        document: Document with a source path.
        content_dir: Content directory the document was loaded from.

    Returns:
        ``<output_dir>/<folders>/<slug>/index.html``.
    """
    if document.path is None:
        return output_dir / "index.html"
    if content_dir is not None:
        rel = document.path.relative_to(content_dir)
    else:
        rel = Path(document.path.name)
    segments = [slugify(part) for part in rel.parent.parts]
    slug = slugify(rel.stem)
    if slug != "index":
        segments.append(slug)
    return output_dir.joinpath(*segments, "index.html")


def build_site(
    project_root: Path,
    include_drafts: bool | None = None,
    output_dir_override: Path | None = None,
    clean_output: bool = True,
    renderer: BodyRenderer | None = None,
) -> BuildResult:
    """Build every content file of a project into HTML pages.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to include drafts; defaults to the config.
        output_dir_override: Write output here instead of config output_dir.
        clean_output: Whether to wipe the output directory first.
        renderer: Optional custom body renderer.

    Returns:
        BuildResult with rendered documents and malformed files.

    Raises:
        FileNotFoundError: If the content directory does not exist.
        BuildError: If a template fails to render or two documents map to
            the same output page.
    """
    config = load_config(project_root)
    if include_drafts is None:
        include_drafts = bool(config.get("include_drafts"))
    content_dir = project_root / config["content_dir"]
    if not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")
    output_dir = output_dir_override or (project_root / config["output_dir"])
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    loaded = ContentProcessor(content_dir).load(include_drafts=include_drafts)
    renderer = renderer or MarkdownRenderer()
    engine = TemplateEngine(project_root / config["templates_dir"], config.get("data"))
    written: dict[Path, Path | None] = {}
    for document in loaded.documents:
        target = page_path(output_dir, document, content_dir)
        if target in written:
            raise BuildError(
                document.path,
                f"Output {target} is already written by {written[target]}",
            )
        written[target] = document.path
        try:
            rendered = engine.render_document(document, renderer.render(document.body))
        except TemplateSyntaxError as exc:
            raise BuildError(
                document.path,
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc
        except TemplateError as exc:
            raise BuildError(
                document.path, f"{type(exc).__name__}: {exc}", exc
            ) from exc
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered)
        logger.debug("Wrote %s", target)

    return BuildResult(
        documents=loaded.documents,
        output_dir=output_dir,
        failures=loaded.failures,
    )
