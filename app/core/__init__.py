"""Core module - Settings, logging, and HTTP error handling.

Import submodules directly where needed:

    from app.core.exceptions import ApiError, NotFoundError
    from app.core.logging import configure_logging
"""

from app.core.config import settings

__all__ = [
    "settings",
]
