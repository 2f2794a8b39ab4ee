# calheat/templates/registry.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import ConfigurationError, UnknownTemplate
from ..granularity import is_coarser, is_unit
from ..util.dates import DateHelper
from .base import Template, TemplateDefinition

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Granularity name -> TemplateDefinition, bound to one DateHelper.

    Bound templates are built lazily and cached per (name, parent) pair.
    """

    def __init__(self, dates: DateHelper, definitions: Iterable[TemplateDefinition] = ()) -> None:
        self.dates = dates
        self._definitions: Dict[str, TemplateDefinition] = {}
        self._bound: Dict[Tuple[str, Optional[str]], Template] = {}
        self.register(*definitions)

    def register(self, *definitions: TemplateDefinition) -> None:
        for d in definitions:
            if not isinstance(d, TemplateDefinition):
                raise ConfigurationError(f"Not a template definition: {d!r}")
            if not d.name:
                raise ConfigurationError("Template name must be a non-empty string")
            if not is_unit(d.unit):
                raise ConfigurationError(f"Template {d.name!r}: unknown unit {d.unit!r}")
            for parent in d.allowed_domains:
                if not is_unit(parent):
                    raise ConfigurationError(f"Template {d.name!r}: unknown domain unit {parent!r}")
            if d.name in self._definitions:
                logger.debug("replacing template %s", d.name)
            self._definitions[d.name] = d
            self._bound = {k: v for k, v in self._bound.items() if d.name not in (k[0], k[1])}

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def definition(self, name: str) -> TemplateDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownTemplate(name) from None

    def at(self, name: str, parent: Optional[str] = None) -> Template:
        """Return the template `name`, nested under the domain template `parent` if given."""
        key = (name, parent)
        tpl = self._bound.get(key)
        if tpl is None:
            definition = self.definition(name)
            parent_unit = self.definition(parent).unit if parent is not None else None
            tpl = Template.bind(definition, self.dates, parent=parent, parent_unit=parent_unit)
            self._bound[key] = tpl
        return tpl

    def validate_pair(self, domain: str, subdomain: str) -> Tuple[Template, Template]:
        """Check a (domain, subdomain) configuration and return both bound templates.

        Raises ConfigurationError for unknown names, a subdomain that is not
        strictly finer than the domain, or a subdomain not allowed under it.
        """
        for label, name in (("domain", domain), ("subdomain", subdomain)):
            if name not in self._definitions:
                raise ConfigurationError(
                    f"Unknown {label} type: {name!r} (known: {', '.join(self.names())})"
                )
        d_def = self._definitions[domain]
        s_def = self._definitions[subdomain]
        if not is_coarser(d_def.unit, s_def.unit):
            raise ConfigurationError(
                f"subdomain {subdomain!r} ({s_def.unit}) must be finer than domain {domain!r} ({d_def.unit})"
            )
        if d_def.unit not in s_def.allowed_domains:
            raise ConfigurationError(
                f"subdomain {subdomain!r} is not allowed inside a {d_def.unit} domain "
                f"(allowed: {', '.join(s_def.allowed_domains) or 'none'})"
            )
        return self.at(domain), self.at(subdomain, parent=domain)
