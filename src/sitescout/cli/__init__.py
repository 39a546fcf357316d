"""Command-line interface for sitescout.

Commands are organized into modules by functionality:

- extract: URL discovery for one website
- categorize: Standard page detection for a list of URLs
"""

# Import all command modules to register them with the app
from sitescout.cli import (
    categorize,  # noqa: F401
    extract,  # noqa: F401
)
from sitescout.cli._common import app

__all__ = ["app"]
