"""calheat.api

Stable *library* entrypoint for calheat.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from calheat.calendar import CalHeatmap
from calheat.config import CalendarConfig, build_config, load_config_file
from calheat.data import apply_records, expand_source_uri
from calheat.domain import DomainCollection
from calheat.errors import CalheatError, ConfigurationError, UnknownTemplate
from calheat.events import (
    DOMAINS_LOADED,
    MAX_DATE_NOT_REACHED,
    MAX_DATE_REACHED,
    MIN_DATE_NOT_REACHED,
    MIN_DATE_REACHED,
    EventEmitter,
)
from calheat.interval import generate_intervals, intervals_between
from calheat.model import Position, ScrollDirection, SubDomain
from calheat.navigator import Navigator
from calheat.payload import build_payload
from calheat.templates import BUILTIN_TEMPLATES, Layout, Template, TemplateDefinition, TemplateRegistry
from calheat.util.dates import DateHelper

__all__ = [
    # facade
    "CalHeatmap",
    "build_payload",
    # configuration
    "CalendarConfig",
    "build_config",
    "load_config_file",
    # engine
    "DateHelper",
    "generate_intervals",
    "intervals_between",
    "DomainCollection",
    "Navigator",
    "ScrollDirection",
    "Position",
    "SubDomain",
    # templates
    "BUILTIN_TEMPLATES",
    "Layout",
    "Template",
    "TemplateDefinition",
    "TemplateRegistry",
    # data
    "apply_records",
    "expand_source_uri",
    # events
    "EventEmitter",
    "DOMAINS_LOADED",
    "MIN_DATE_REACHED",
    "MIN_DATE_NOT_REACHED",
    "MAX_DATE_REACHED",
    "MAX_DATE_NOT_REACHED",
    # errors
    "CalheatError",
    "ConfigurationError",
    "UnknownTemplate",
]
