"""Utility functions for postmatter.

Key functions:
    slugify: Convert filenames to URL slugs.
    is_markdown: Check if a path is a Markdown file.
    is_internal_path: Check if a path sits under an ``_`` directory.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("2023-12-04-Angular-Signals")
        'angular-signals'
    """
    cleaned = name.lstrip("_")
    if "-" in cleaned:
        parts = cleaned.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            cleaned = "-".join(parts[3:])
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in (".md", ".markdown")


def is_internal_path(path: Path) -> bool:
    """Check if any directory component of a path starts with ``_``.

    Args:
        path: Path relative to the content directory.

    Returns:
        True if the file lives under an internal directory.
    """
    return any(part.startswith("_") for part in path.parts[:-1])


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
