# error_scout/__init__.py
"""
ErrorScout package initializer.
Defines package version and configures the project logger.
"""
__version__ = "0.1.0"

from error_scout.logger import logger  # noqa: E402,F401
