"""
Configuration provider for the summary report job.

Configuration is read from environment variables once, at process start,
and handed explicitly to the components that need it. Keys use the
slash-separated form (``mailer/default``) and map to upper-case environment
variable names (``MAILER_DEFAULT``).

Usage:
    config = Config.from_environ()
    recipient = config.get('mailer/default')
"""

import logging
import os
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# Optional keys and their defaults
DEFAULTS = {
    'storage/prefix': 'summaries/',
    'report/top_sources': '10',
    'log_level': 'WARNING',
}

TRUE_VALUES = ('1', 'true', 'yes', 'on')


class ConfigurationError(Exception):
    """Raised when a required configuration value is missing or invalid."""
    pass


def env_name(key: str) -> str:
    """
    Convert a configuration key to its environment variable name.

    Example:
        >>> env_name('mailer/default')
        'MAILER_DEFAULT'
    """
    return key.replace('/', '_').upper()


class Config:
    """
    Read-only configuration snapshot.

    Built once by the entry point and passed to the dispatcher and the
    domain directory at construction time. Nothing writes to it afterwards.
    """

    def __init__(self, environ: Mapping[str, str]):
        self._environ = MappingProxyType(dict(environ))

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """
        Build configuration from environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Config: Configuration snapshot
        """
        return cls(os.environ if environ is None else environ)

    def get(self, key: str, default: Optional[str] = None) -> str:
        """
        Return the value for a configuration key.

        Args:
            key: Slash-separated key (e.g. 'mailer/from')
            default: Value to return when the key is not set

        Returns:
            str: The configured value

        Raises:
            ConfigurationError: If the key is not set and has no default
        """
        value = self._environ.get(env_name(key))
        if value:
            return value
        if default is not None:
            return default
        if key in DEFAULTS:
            return DEFAULTS[key]

        logger.error(f"Configuration value '{key}' is not set ({env_name(key)})")
        raise ConfigurationError(
            f"Configuration value '{key}' is not set. "
            f"Set the {env_name(key)} environment variable."
        )

    def get_int(self, key: str) -> int:
        """Return an integer configuration value."""
        raw = self.get(key)
        try:
            return int(raw)
        except ValueError:
            raise ConfigurationError(
                f"Configuration value '{key}' must be an integer, got: '{raw}'"
            )

    @property
    def debug(self) -> bool:
        """Whether unexpected errors are rendered with tracebacks."""
        return self.get('debug', '').lower() in TRUE_VALUES

    @property
    def log_level(self) -> str:
        return self.get('log_level').upper()
