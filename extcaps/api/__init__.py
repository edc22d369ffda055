"""extcaps API package.

This module provides an optional FastAPI service layer around manifest
capability detection.
"""

from .server import create_app  # noqa: F401
