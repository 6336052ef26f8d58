"""Loading content files for postmatter.

Key classes:
- FileContentLoader: Discovers markdown files in a content directory.
- ContentProcessor: Loads every discovered file, isolating failures.
- LoadResult: Documents that loaded and the files that did not.

Each file is read and parsed independently; a malformed file is reported
with its path and never stops the others from loading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .document import Document
from .frontmatter import MalformedDocument, parse_document
from .protocols import ContentLoader
from .utils import is_internal_path, is_markdown

logger = logging.getLogger(__name__)


def load_document(path: Path) -> Document:
    """Read and parse one content file.

    Args:
        path: Path to the markdown file.

    Returns:
        The parsed Document.

    Raises:
        MalformedDocument: If the file is not UTF-8 or cannot be parsed. The
            error carries the file path.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    with open(path, encoding="utf-8", newline="") as f:
        try:
            text = f.read()
        except UnicodeDecodeError as exc:
            raise MalformedDocument(
                f"not valid UTF-8: {exc.reason} at byte {exc.start}",
                source_path=path,
            ) from exc
    return parse_document(text, path=path)


class FileContentLoader:
    """Discovers content files in a directory.

    Directories whose name starts with ``_`` are skipped. Files whose name
    starts with ``_`` are drafts and only included on request.

    Attributes:
        content_dir: Directory containing content files.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        files: list[Path] = []
        for path in sorted(self.content_dir.rglob("*")):
            if path.is_dir() or not is_markdown(path):
                continue
            rel = path.relative_to(self.content_dir)
            if is_internal_path(rel):
                continue
            if rel.name.startswith("_") and not include_drafts:
                continue
            files.append(path)
        return files


@dataclass
class LoadResult:
    """Result of loading a content directory.

    Attributes:
        documents: Documents that parsed, in file order.
        failures: One MalformedDocument per file that did not parse.
    """

    documents: list[Document] = field(default_factory=list)
    failures: list[MalformedDocument] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class ContentProcessor:
    """Loads all content files of a directory into Documents.

    Attributes:
        content_dir: Directory containing content files.
    """

    def __init__(
        self,
        content_dir: Path,
        content_loader: ContentLoader | None = None,
    ):
        """Initialize the content processor.

        Args:
            content_dir: Path to the content directory.
            content_loader: Optional custom file discovery.
        """
        self.content_dir = content_dir
        self._content_loader = content_loader or FileContentLoader(content_dir)

    def load(self, include_drafts: bool = False) -> LoadResult:
        """Load every content file.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            LoadResult with the parsed documents and per-file failures.
        """
        result = LoadResult()
        for path in self._content_loader.iter_files(include_drafts):
            try:
                document = load_document(path)
            except MalformedDocument as exc:
                logger.warning("Skipping malformed document %s", exc)
                result.failures.append(exc)
                continue
            logger.debug("Loaded %s", path)
            result.documents.append(document)
        return result
