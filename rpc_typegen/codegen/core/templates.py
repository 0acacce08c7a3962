"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, FileSystemLoader, TemplateNotFound


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def format_jsdoc(text: Optional[str], indent: str = "") -> str:
    """
    Render documentation text as a JSDoc block.

    A single line becomes ``/** text */``; several lines become a starred
    block. ``*/`` inside the text is escaped so the comment stays closed.

    Args:
        text: Documentation text, lines separated by newlines
        indent: Prefix applied to every emitted line

    Returns:
        The comment block, or an empty string when there is no text
    """
    if not text:
        return ""

    lines = [line.rstrip().replace("*/", "*\\/") for line in text.split("\n")]
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        return ""

    if len(lines) == 1:
        return f"{indent}/** {lines[0].strip()} */"

    body = "\n".join(
        f"{indent} * {line}" if line.strip() else f"{indent} *" for line in lines
    )
    return f"{indent}/**\n{body}\n{indent} */"


def ts_string(value: str) -> str:
    """Quote a value as a TypeScript string literal."""
    return json.dumps(value, ensure_ascii=False)


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            loader = DictLoader({})

        # Output is TypeScript, never HTML.
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}")

    def template_exists(self, template_name: str) -> bool:
        """Check whether the loader can find a template."""
        try:
            self._env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally bound to a template directory."""
    return TemplateEngine(template_dir)
