"""Dependency policy auditor: licenses, advisories and bans."""

__version__ = "0.1.0"
