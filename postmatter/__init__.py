"""Postmatter front-matter document loader.

This package parses markdown content files that start with a YAML
front-matter block into immutable Document values, and provides the
pieces a static site build needs around that: file discovery with
per-file error isolation, a markdown renderer, template selection by
``templateKey``, and a small CLI.

The main entry point for library use is ``parse_document`` (text) or
``load_document`` (file). The CLI lives in the cli module.
"""

from .document import Document, Metadata, MetaValue
from .frontmatter import MalformedDocument, parse_document, serialize_document
from .loader import load_document

__all__ = [
    "Document",
    "MalformedDocument",
    "MetaValue",
    "Metadata",
    "__version__",
    "load_document",
    "parse_document",
    "serialize_document",
]
__version__ = "0.1.0"
