"""Front-matter parsing for postmatter.

A content file starts with a ``---`` line, a block of YAML ``key: value``
pairs, a closing ``---`` line, and then the markdown body. This module
splits that text, validates the known keys and builds a Document.

Key functions:
- parse_document: Parse file text into a Document.
- split_frontmatter: Split file text into the raw header and the body.
- parse_timestamp: Coerce a YAML value into a datetime.
- serialize_document: Write a Document back into the delimited form.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

import yaml

from .document import KNOWN_KEYS, Document, Metadata, MetaValue

DELIMITER = "---"

# The header region starts on the second line of the file.
_HEADER_LINE_OFFSET = 2


class MalformedDocument(ValueError):
    """A content file that cannot be parsed.

    Attributes:
        message: Human-readable error message.
        source_path: Path to the offending file, when known.
        line: 1-based line number in the file, when known.
    """

    def __init__(
        self,
        message: str,
        source_path: Path | None = None,
        line: int | None = None,
    ):
        self.message = message
        self.source_path = source_path
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        location = []
        if self.source_path is not None:
            location.append(str(self.source_path))
        if self.line is not None:
            location.append(str(self.line))
        if not location:
            return self.message
        return f"{':'.join(location)}: {self.message}"


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split content into the front-matter region and the body.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (header text between the delimiters, body text).

    Raises:
        MalformedDocument: If the opening or closing delimiter is missing.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        raise MalformedDocument(
            f"missing opening '{DELIMITER}' delimiter", line=1
        )
    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            return "".join(lines[1:index]), "".join(lines[index + 1 :])
    raise MalformedDocument(
        f"unterminated front matter: no closing '{DELIMITER}' delimiter", line=1
    )


def parse_timestamp(value: Any) -> datetime:
    """Coerce a front-matter value into a datetime.

    YAML already turns unquoted ISO-8601 timestamps into datetime objects;
    quoted ones arrive as strings. A trailing ``Z`` means UTC. A bare date
    becomes midnight of that day.

    Args:
        value: Value from the parsed header.

    Returns:
        The timestamp, with its timezone preserved.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = f"{text[:-1]}+00:00"
        return datetime.fromisoformat(text)
    raise ValueError(f"not a timestamp: {value!r}")


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601, using ``Z`` for UTC."""
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    if value.microsecond == 0:
        timespec = "seconds"
    text = value.isoformat(timespec=timespec)
    if value.utcoffset() == timedelta(0):
        text = text.replace("+00:00", "Z")
    return text


def _load_header(header: str) -> dict[str, Any]:
    """Parse the header region as a YAML mapping.

    Args:
        header: Text between the delimiters.

    Returns:
        Mapping of key to raw YAML value.

    Raises:
        MalformedDocument: If the text is not a YAML mapping with string keys.
    """
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = mark.line + _HEADER_LINE_OFFSET if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        raise MalformedDocument(f"invalid front matter: {problem}", line=line) from exc
    except ValueError as exc:
        # Timestamps that match the YAML pattern but not the calendar.
        raise MalformedDocument(f"invalid front matter: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedDocument(
            "front matter must be a block of 'key: value' lines",
            line=_HEADER_LINE_OFFSET,
        )
    for key in data:
        if not isinstance(key, str):
            raise MalformedDocument(f"invalid front matter key {key!r}")
    return data


def _scalar_text(key: str, value: Any) -> str:
    if isinstance(value, bool):
        raise MalformedDocument(
            f"'{key}' must be text, got {value!r} (quote values like yes, no, on, off)"
        )
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise MalformedDocument(
        f"'{key}' must be a single value, got {type(value).__name__}"
    )


def _optional_text(key: str, value: Any) -> str | None:
    if value is None:
        return None
    return _scalar_text(key, value)


def _optional_flag(key: str, value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise MalformedDocument(f"'{key}' must be true or false, got {value!r}")


def _optional_date(key: str, value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise MalformedDocument(
            f"'{key}' is not a valid ISO-8601 timestamp: {value!r}"
        ) from exc


def _text_sequence(key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, list):
        return tuple(_scalar_text(key, item) for item in value)
    return (_scalar_text(key, value),)


def _meta_value(key: str, value: Any) -> MetaValue:
    """Convert an unrecognized value into a MetaValue."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, list):
        return _text_sequence(key, value)
    if isinstance(value, Mapping):
        raise MalformedDocument(f"'{key}' must not be a nested mapping")
    return _scalar_text(key, value)


def build_metadata(data: Mapping[str, Any]) -> Metadata:
    """Build typed Metadata from a parsed header mapping.

    Args:
        data: Mapping of source key to raw YAML value.

    Returns:
        Metadata with known keys typed and the rest passed through.

    Raises:
        MalformedDocument: If a value has the wrong shape for its key.
    """
    extra = {
        key: _meta_value(key, value)
        for key, value in data.items()
        if key not in KNOWN_KEYS
    }
    return Metadata(
        template_key=_optional_text("templateKey", data.get("templateKey")),
        title=_optional_text("title", data.get("title")),
        date=_optional_date("date", data.get("date")),
        description=_optional_text("description", data.get("description")),
        featured_post=_optional_flag("featuredpost", data.get("featuredpost")),
        featured_image=_optional_text("featuredimage", data.get("featuredimage")),
        tags=_text_sequence("tags", data.get("tags")),
        extra=extra,
    )


def parse_document(text: str, path: Path | None = None) -> Document:
    """Parse a content file into a Document.

    Args:
        text: Raw file content.
        path: Source path, recorded on the Document and on errors.

    Returns:
        The parsed Document.

    Raises:
        MalformedDocument: If the delimiters are missing, the header is not
            a valid mapping, or a known key has an invalid value.
    """
    try:
        header, body = split_frontmatter(text)
        metadata = build_metadata(_load_header(header))
    except MalformedDocument as exc:
        if exc.source_path is None:
            exc.source_path = path
        raise
    return Document(metadata=metadata, body=body, path=path)


def _serializable(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def serialize_document(document: Document) -> str:
    """Write a Document back into delimited front-matter form.

    Parsing the result yields a Document equal to the input.

    Args:
        document: Document to serialize.

    Returns:
        File content with front matter and body.
    """
    data = {
        key: _serializable(value)
        for key, value in document.metadata.as_dict().items()
    }
    header = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
    return f"{DELIMITER}\n{header}{DELIMITER}\n{document.body}"
