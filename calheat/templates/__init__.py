"""Granularity templates: layout of subdomains inside a domain."""

from __future__ import annotations

from .base import Layout, LayoutBuilder, Template, TemplateDefinition
from .builtin import BUILTIN_TEMPLATES
from .registry import TemplateRegistry

__all__ = [
    "BUILTIN_TEMPLATES",
    "Layout",
    "LayoutBuilder",
    "Template",
    "TemplateDefinition",
    "TemplateRegistry",
]
