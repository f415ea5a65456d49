"""Metric widget template rendering.

Templates are CloudWatch metric widget definitions (the JSON shown under
"Source" in the console) with placeholders for the values that change per
account and per run:

    {{NAMESPACE}}     account namespace from the inventory
    {{REGION}}        account region as written in the inventory
    {{PERIOD_START}}  widget start, e.g. 4320H
    {{PERIOD_END}}    widget end, e.g. 0H
    {{PERIOD}}        metric period in seconds

Substitution is plain text replacement. Values are not escaped or validated
and unknown placeholders are left as they are.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PLACEHOLDERS: tuple[str, ...] = (
    "{{NAMESPACE}}",
    "{{REGION}}",
    "{{PERIOD_START}}",
    "{{PERIOD_END}}",
    "{{PERIOD}}",
)

_PLACEHOLDER_RE = re.compile("|".join(re.escape(p) for p in PLACEHOLDERS))


class TemplateError(Exception):
    """Base exception for widget template problems."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


class TemplateReadError(TemplateError):
    """Raised when the template file cannot be read."""


class TemplateParseError(TemplateError):
    """Raised when a rendered template is not a widget definition."""


@dataclass(frozen=True)
class MetricWidgetTemplate:
    text: str
    path: str = "<string>"

    def render(
        self,
        *,
        namespace: str,
        region: str,
        start: str,
        end: str,
        period: str,
    ) -> str:
        values = {
            "{{NAMESPACE}}": namespace,
            "{{REGION}}": region,
            "{{PERIOD_START}}": start,
            "{{PERIOD_END}}": end,
            "{{PERIOD}}": period,
        }
        # Single pass so substituted values are never rescanned.
        return _PLACEHOLDER_RE.sub(lambda match: values[match.group(0)], self.text)


def load_template(path: str | Path) -> MetricWidgetTemplate:
    template_path = Path(path)
    try:
        text = template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateReadError(
            str(template_path), f"unable to read metric template '{template_path}': {exc}"
        ) from exc
    return MetricWidgetTemplate(text=text, path=str(template_path))


def render_template(
    template_path: str | Path,
    region: str,
    namespace: str,
    start: str,
    end: str,
    period: str,
) -> str | None:
    """Render a template file, or return None if it cannot be read."""
    try:
        template = load_template(template_path)
    except TemplateReadError as exc:
        logger.warning("%s", exc)
        return None

    rendered = template.render(
        namespace=namespace,
        region=region,
        start=start,
        end=end,
        period=period,
    )
    logger.debug("Rendered metric template %s for %s/%s", template_path, namespace, region)
    return rendered


def parse_widget_definition(text: str, path: str = "<string>") -> dict[str, Any]:
    """Check that rendered text is a JSON object before it is sent to CloudWatch."""
    try:
        widget = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TemplateParseError(path, f"unable to parse metrics json from '{path}': {exc}") from exc
    if not isinstance(widget, dict):
        raise TemplateParseError(
            path, f"metrics json from '{path}' must be an object, got {type(widget).__name__}"
        )
    return widget
