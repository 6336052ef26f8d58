"""Template rendering for postmatter.

The document's ``templateKey`` names the template to render it with; all
other metadata fields become template variables and the rendered body is
available as ``content``.

Key class:
- TemplateEngine: Jinja2 environment over the templates directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    select_autoescape,
)
from markupsafe import Markup

from .document import Document

DEFAULT_TEMPLATE = "default"
TEMPLATE_SUFFIXES = (".html.jinja", ".jinja", ".html")
RESERVED_VARIABLES = frozenset({"metadata", "document", "content", "data"})

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        templates_dir: Directory containing templates.
        data: Global site data, exposed as ``data``.
        env: Jinja2 environment.
    """

    def __init__(self, templates_dir: Path, data: dict[str, Any] | None = None):
        """Initialize the template engine.

        Args:
            templates_dir: Directory with templates.
            data: Global site data.
        """
        self.templates_dir = templates_dir
        self.data = data or {}
        self.env = Environment(
            loader=FileSystemLoader([templates_dir]),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )
        self.env.globals["data"] = self.data

    def select_template(self, document: Document) -> Template:
        """Pick the template for a document.

        Tries ``<templateKey>`` with each known suffix, then ``default``,
        then falls back to a template that emits the body only.

        Args:
            document: Document to render.

        Returns:
            Jinja2 Template object.
        """
        names = []
        if document.template_key:
            names.append(document.template_key)
        if document.template_key != DEFAULT_TEMPLATE:
            names.append(DEFAULT_TEMPLATE)
        for name in names:
            for suffix in TEMPLATE_SUFFIXES:
                try:
                    return self.env.get_template(f"{name}{suffix}")
                except TemplateNotFound:
                    continue
        return self.env.from_string("{{ content }}")

    def context(self, document: Document, content_html: str) -> dict[str, Any]:
        """Build template variables for a document.

        The reserved names ``metadata``, ``document``, ``content`` and
        ``data`` take precedence over metadata keys of the same name; such
        keys stay reachable through ``metadata``.

        Args:
            document: Document being rendered.
            content_html: Rendered body HTML.

        Returns:
            Variables: every metadata key, plus the reserved names.
        """
        metadata = document.metadata.as_dict()
        context: dict[str, Any] = dict(metadata)
        for name in sorted(RESERVED_VARIABLES.intersection(metadata)):
            logger.warning(
                "%s: front matter key '%s' is shadowed by the template "
                "variable of the same name; use metadata.%s",
                document.path,
                name,
                name,
            )
        context.update(
            {
                "metadata": metadata,
                "document": document,
                "content": Markup(content_html),
                "data": self.data,
            }
        )
        return context

    def render_document(self, document: Document, content_html: str) -> str:
        """Render a document with its template.

        Args:
            document: Document to render.
            content_html: Rendered body HTML.

        Returns:
            Rendered HTML string.
        """
        template = self.select_template(document)
        return template.render(**self.context(document, content_html))
