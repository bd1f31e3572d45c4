"""Per-user directory paths for sysweb.

Directories follow the platform conventions resolved by ``platformdirs`` and
are created lazily on first use rather than at import time.
"""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "sysweb"


class GlobalPath:
    """Global path management for sysweb directories."""

    @classmethod
    def config(cls) -> str:
        """Configuration directory; ``SYSWEB_CONFIG_DIR`` overrides it."""
        return os.environ.get("SYSWEB_CONFIG_DIR") or user_config_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return os.environ.get("SYSWEB_LOG_DIR") or user_log_dir(APP_NAME)

    @classmethod
    def ensure(cls, path: str) -> Path:
        """Create ``path`` if missing and return it."""
        target = Path(path)
        target.mkdir(parents=True, exist_ok=True)
        return target
