"""Rooster: a local, single-user encrypted password store.

- rooster.lib: the store engine (crypto, file format, upgrades, entries)
- rooster.cli: click front end and command handlers
"""

__version__ = "0.1.0"
