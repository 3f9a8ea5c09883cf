"""Configuration settings and constants for rooster.

The package re-exports `config.settings` so application code can write
`from config import SALT_LENGTH`. Keep the values in `settings.py`.
"""

from .settings import *  # noqa: F401,F403
from .settings import __all__  # noqa: F401
