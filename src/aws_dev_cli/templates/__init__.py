"""Metric widget templates."""

from aws_dev_cli.templates.renderer import (
    PLACEHOLDERS,
    MetricWidgetTemplate,
    TemplateError,
    TemplateParseError,
    TemplateReadError,
    load_template,
    parse_widget_definition,
    render_template,
)

__all__ = [
    "PLACEHOLDERS",
    "MetricWidgetTemplate",
    "TemplateError",
    "TemplateParseError",
    "TemplateReadError",
    "load_template",
    "parse_widget_definition",
    "render_template",
]
