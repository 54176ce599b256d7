"""
Email message building utilities.

This module provides the pieces needed to turn report lines into a
plain-text message: subject encoding, body joining and the raw RFC 5322
representation handed to the mail transport.
"""

import logging
import re
from email.header import Header
from typing import Dict, Iterable

logger = logging.getLogger(__name__)

LINE_SEPARATOR = '\r\n'

# A line break not followed by folding whitespace
BARE_LINE_BREAK = re.compile(r"\r?\n(?![ \t])")

BASE_HEADERS = {
    'MIME-Version': '1.0',
    'Content-Type': 'text/plain; charset=utf-8',
}


def encode_subject(subject: str) -> str:
    """
    Encode a subject for transport in a message header.

    ASCII subjects are returned unchanged. Anything else is encoded as
    RFC 2047 UTF-8 encoded words, folded with CRLF when long.

    Example:
        >>> encode_subject("DMARC weekly digest for example.com")
        'DMARC weekly digest for example.com'
    """
    try:
        subject.encode('ascii')
        return subject
    except UnicodeEncodeError:
        return Header(subject, 'utf-8').encode(linesep=LINE_SEPARATOR)


def join_body(lines: Iterable[str]) -> str:
    """Join body lines with CRLF line endings."""
    return LINE_SEPARATOR.join(lines)


def build_headers(from_address: str) -> Dict[str, str]:
    """
    Build the fixed header set of a summary message.

    Args:
        from_address: Sender address

    Returns:
        Dict with From, MIME-Version and Content-Type
    """
    if not from_address:
        raise ValueError("Sender address cannot be empty")
    headers = {'From': from_address}
    headers.update(BASE_HEADERS)
    return headers


def build_raw_message(to: str, subject: str, body: str, headers: Dict[str, str]) -> bytes:
    """
    Assemble a raw RFC 5322 message.

    Args:
        to: Recipient address
        subject: Already encoded subject
        body: Message body with CRLF line endings
        headers: Additional headers (From, MIME-Version, Content-Type)

    Returns:
        bytes: UTF-8 encoded message ready for raw sending

    Raises:
        ValueError: If the recipient is empty or a header value contains a line break
    """
    if not to:
        raise ValueError("Recipient address cannot be empty")

    all_headers = {'To': to, 'Subject': subject}
    all_headers.update(headers)
    all_headers.setdefault('Content-Transfer-Encoding', '8bit')

    lines = []
    for name, value in all_headers.items():
        if BARE_LINE_BREAK.search(value):
            raise ValueError(f"Header {name} contains a line break")
        lines.append(f"{name}: {value}")

    logger.debug(f"Built message headers: {list(all_headers.keys())}")
    return (LINE_SEPARATOR.join(lines) + LINE_SEPARATOR * 2 + body).encode('utf-8')
