"""Protocol definitions for postmatter.

These protocols describe the seams between file discovery, parsing and
rendering, so each part can be swapped or faked in tests.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self, include_drafts: bool = False) -> list[Path]:
        """List content files to load.

        Args:
            include_drafts: Whether to include draft files.

        Returns:
            List of paths to content files.
        """
        ...


@runtime_checkable
class BodyRenderer(Protocol):
    """Protocol for turning a document body into HTML."""

    @abstractmethod
    def render(self, body: str) -> str:
        """Render body text to HTML.

        Args:
            body: Raw markdown body.

        Returns:
            Rendered HTML.
        """
        ...
