"""
Command-line argument parsing.

Arguments are positional key=value tokens:
    domain=example.com period=lastweek emailto=postmaster@example.com
"""

import logging
from typing import Sequence

from .models import ArgumentSet

logger = logging.getLogger(__name__)

RECOGNIZED_KEYS = ('domain', 'period', 'emailto')


def parse_arguments(argv: Sequence[str]) -> ArgumentSet:
    """
    Parse key=value tokens into an ArgumentSet.

    Tokens that do not split into exactly one key and one value are skipped,
    as are unrecognized keys. A later occurrence of a key overwrites an
    earlier one. Never raises; required values are checked downstream.

    Args:
        argv: Command-line tokens without the program name

    Returns:
        ArgumentSet: Parsed parameters

    Example:
        >>> parse_arguments(['domain=example.com', 'period=lastweek'])
        ArgumentSet(domain='example.com', period='lastweek', emailto=None)
    """
    args = ArgumentSet()
    for token in argv:
        parts = token.split('=')
        if len(parts) != 2:
            logger.debug(f"Ignoring malformed argument: {token!r}")
            continue
        key, value = parts
        if key in RECOGNIZED_KEYS:
            setattr(args, key, value)
        else:
            logger.debug(f"Ignoring unknown parameter: {key!r}")
    return args
