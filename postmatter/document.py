"""Data model for parsed content files.

Key classes:
- Metadata: Typed fields for the known front-matter keys plus a
  passthrough map for everything else.
- Document: Metadata and raw markdown body of one content file.

Both are frozen dataclasses. A Document is built once per file per build
and never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

MetaValue = Union[str, bool, tuple[str, ...]]

# Source key -> Metadata attribute, in canonical output order.
KNOWN_KEYS: dict[str, str] = {
    "templateKey": "template_key",
    "title": "title",
    "date": "date",
    "description": "description",
    "featuredpost": "featured_post",
    "featuredimage": "featured_image",
    "tags": "tags",
}


def _freeze(mapping: Mapping[str, MetaValue]) -> Mapping[str, MetaValue]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Metadata:
    """Front-matter metadata of a document.

    Attributes:
        template_key: Name of the rendering template (``templateKey``).
        title: Post title.
        date: Publication timestamp, timezone preserved.
        description: Short summary.
        featured_post: Whether the post is featured (``featuredpost``).
        featured_image: Path of the featured image (``featuredimage``).
        tags: Tags in source order, duplicates kept.
        extra: Unrecognized keys, passed through to templates unchanged.
    """

    template_key: str | None = None
    title: str | None = None
    date: datetime | None = None
    description: str | None = None
    featured_post: bool | None = None
    featured_image: str | None = None
    tags: tuple[str, ...] = ()
    extra: Mapping[str, MetaValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "extra", _freeze(self.extra))

    def __hash__(self) -> int:
        return hash(tuple(self.as_dict().items()))

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by its source key (``templateKey``, ``title``...).

        Args:
            key: Front-matter key as written in the file.
            default: Returned when the key is unset.

        Returns:
            The typed value, or default.
        """
        return self.as_dict().get(key, default)

    def as_dict(self) -> dict[str, Any]:
        """Return metadata keyed by source key.

        Known keys come first in canonical order and are omitted when
        unset; extra keys follow in source order. ``tags`` is always
        present.

        Returns:
            Dictionary suitable for template variables or serialization.
        """
        result: dict[str, Any] = {}
        for key, attr in KNOWN_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            result[key] = value
        result.update(self.extra)
        return result


@dataclass(frozen=True)
class Document:
    """A parsed content file.

    Attributes:
        metadata: Parsed front matter.
        body: Markdown text after the closing delimiter, verbatim.
        path: Source file, when loaded from disk. Not part of equality.
    """

    metadata: Metadata
    body: str
    path: Path | None = field(default=None, compare=False)

    @property
    def template_key(self) -> str | None:
        return self.metadata.template_key

    @property
    def title(self) -> str | None:
        return self.metadata.title

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags
