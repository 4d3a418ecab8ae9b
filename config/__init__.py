"""Configuration settings and constants for passtool.

The constants are defined once in `config.settings` and re-exported here so
application code can write `from config import KEY_LENGTH`.
"""

from .settings import *  # noqa: F401,F403
from .settings import __all__  # noqa: F401
