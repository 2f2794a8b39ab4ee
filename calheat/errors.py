"""Exception types raised by calheat (library-facing)."""

from __future__ import annotations


class CalheatError(Exception):
    """Base class for calheat errors."""


class ConfigurationError(CalheatError, ValueError):
    """Raised at setup for an invalid calendar configuration.

    Unknown granularity names, a subdomain that is not strictly finer than the
    domain, a subdomain template not allowed under the domain, and malformed
    option values all end up here. Fatal to calendar construction.
    """


class UnknownTemplate(CalheatError, LookupError):
    """Raised when looking up a granularity name that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown template: {name!r}")
        self.name = name
