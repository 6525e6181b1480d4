"""Jinja2 placeholder utilities for prompt previews.

Prompt content may reference ``{{ variable }}`` placeholders. Everything
between the braces, trimmed, is one opaque name, so ``{{ user name }}`` and
``{{ user-name }}`` are single variables and are never evaluated as Jinja
expressions. Rendering fills the values it knows and echoes unknown
placeholders back as ``{{name}}`` so a partially filled preview still shows
what is missing.

Updates: v0.3.0 - 2026-10-16 - Treat placeholder text as opaque names and report render failures.
Updates: v0.2.0 - 2026-10-14 - Echo unknown placeholders instead of failing the render.
Updates: v0.1.0 - 2026-10-13 - Add placeholder extraction, rendering, and previews.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError

_WHITESPACE_PATTERN = re.compile(r"\s+")
_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")
# Block and comment openers outside placeholders are plain prompt text.
_LITERAL_DELIMITER_PATTERN = re.compile(r"\{[%#]")


@dataclass(slots=True)
class TemplateRenderResult:
    """Outcome of rendering a prompt preview."""

    rendered_text: str
    errors: list[str] = field(default_factory=list)
    missing_variables: set[str] = field(default_factory=set)


def format_template_syntax_error(template_text: str, exc: TemplateSyntaxError) -> str:
    """Return a descriptive syntax error message with line context."""
    base = f"Template syntax error on line {exc.lineno}: {exc.message}"
    lines = template_text.splitlines()
    if 0 < exc.lineno <= len(lines):
        snippet = lines[exc.lineno - 1].strip()
        if snippet:
            base = f"{base} | Line {exc.lineno}: {snippet}"
    if "{{" in template_text and template_text.count("{{") > template_text.count("}}"):
        base = f"{base} Hint: missing closing '}}}}'."
    return base


def summarize_content(content: str, limit: int = 90) -> str:
    """Return a single-line preview of *content* cut to *limit* characters."""
    cleaned = _WHITESPACE_PATTERN.sub(" ", content).strip()
    if len(cleaned) <= limit:
        return cleaned
    return f"{cleaned[:limit]}..."


def _echo(name: str) -> str:
    return "{{" + name + "}}"


class TemplateRenderer:
    """Render prompt placeholders through a Jinja2 environment."""

    def __init__(self) -> None:
        """Configure the Jinja2 environment for plain-text prompts."""
        self._env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def extract_variables(self, template_text: str) -> list[str]:
        """Return sorted placeholder names referenced within ``template_text``."""
        names = {
            match.group(1).strip() for match in _PLACEHOLDER_PATTERN.finditer(template_text)
        }
        names.discard("")
        return sorted(names)

    def _compile_source(self, template_text: str) -> tuple[str, list[str]]:
        """Return Jinja source with each placeholder swapped for a slot lookup.

        Newlines inside a placeholder are kept within the slot tag so reported
        line numbers match ``template_text``.
        """
        slots: list[str] = []
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER_PATTERN.finditer(template_text):
            parts.append(self._escape_literal(template_text[position : match.start()]))
            newlines = "\n" * match.group(0).count("\n")
            parts.append(f"{{{{ slot_{len(slots)}{newlines} }}}}")
            slots.append(match.group(1).strip())
            position = match.end()
        parts.append(self._escape_literal(template_text[position:]))
        return "".join(parts), slots

    @staticmethod
    def _escape_literal(text: str) -> str:
        return _LITERAL_DELIMITER_PATTERN.sub(
            lambda found: "{{ '" + found.group(0) + "' }}", text
        )

    def render(self, template_text: str, variables: Mapping[str, Any]) -> TemplateRenderResult:
        """Render ``template_text`` with ``variables``, capturing template errors.

        A ``{{`` that never forms a placeholder is reported as a syntax error.
        """
        if not template_text.strip():
            return TemplateRenderResult(rendered_text=template_text)
        source, slots = self._compile_source(template_text)
        context: dict[str, Any] = {}
        missing: set[str] = set()
        for index, name in enumerate(slots):
            if name and name in variables:
                context[f"slot_{index}"] = variables[name]
                continue
            context[f"slot_{index}"] = _echo(name)
            if name:
                missing.add(name)
        try:
            rendered = self._env.from_string(source).render(context)
        except TemplateSyntaxError as exc:
            message = format_template_syntax_error(template_text, exc)
            return TemplateRenderResult(rendered_text="", errors=[message])
        except TemplateError as exc:
            return TemplateRenderResult(rendered_text="", errors=[f"Template error: {exc}"])
        return TemplateRenderResult(rendered_text=rendered, missing_variables=missing)


__all__ = [
    "TemplateRenderResult",
    "TemplateRenderer",
    "format_template_syntax_error",
    "summarize_content",
]
