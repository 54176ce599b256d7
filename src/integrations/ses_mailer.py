"""
Amazon SES Mail Transport

This module sends plain-text messages through Amazon SES using the raw
message API, so the caller's headers are delivered as given.

Usage:
    from integrations import ses_mailer

    message_id = ses_mailer.send(
        to="postmaster@example.com",
        subject="DMARC weekly digest for example.com",
        body="line 1\r\nline 2",
        headers={'From': 'dmarc@example.com', 'MIME-Version': '1.0',
                 'Content-Type': 'text/plain; charset=utf-8'}
    )
"""

import logging
import os
from typing import Dict

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from services import email as email_service

# Configure logging
logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class MailDeliveryError(Exception):
    """Raised when SES does not accept a message."""
    pass


# ============================================================================
# Module-Level Initialization
# ============================================================================

def _initialize_ses_client():
    """
    Initialize boto3 SES client with timeout configuration.

    Returns:
        boto3.client: Configured SES client
    """
    # Messages are delivered at most once: no retries, strict timeouts
    client_config = Config(
        retries={
            'max_attempts': 0,  # 0 attempts = 1 total call, NO retries
            'mode': 'standard'
        },
        connect_timeout=10,  # 10 seconds to establish connection
        read_timeout=30      # 30 seconds max for reading response
    )

    # Get region from environment or use default
    region = os.environ.get('AWS_REGION', os.environ.get('AWS_DEFAULT_REGION', 'us-east-1'))

    client = boto3.client(
        'ses',
        region_name=region,
        config=client_config
    )

    logger.debug(
        f"SES client initialized: region={region}, "
        f"connect_timeout=10s, read_timeout=30s, max_attempts=0 (no retries)"
    )
    return client


# Initialize at module import time (reused for the whole run)
ses_client = _initialize_ses_client()


# ============================================================================
# Sending
# ============================================================================

def send(to: str, subject: str, body: str, headers: Dict[str, str]) -> str:
    """
    Send a message through SES.

    Args:
        to: Recipient address
        subject: Encoded subject line
        body: Message body with CRLF line endings
        headers: Message headers (From, MIME-Version, Content-Type)

    Returns:
        str: The SES message ID

    Raises:
        MailDeliveryError: If SES rejects the message or returns no message ID
        ValueError: If the message cannot be assembled
    """
    raw_message = email_service.build_raw_message(to, subject, body, headers)

    logger.info(f"Sending message: to={to}, size={len(raw_message)} bytes")

    try:
        response = ses_client.send_raw_email(
            Source=headers.get('From'),
            Destinations=[to],
            RawMessage={'Data': raw_message}
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))
        logger.error(
            f"SES send failed: to={to}, "
            f"error_code={error_code}, error_message={error_message}"
        )
        raise MailDeliveryError(
            f"Failed to send message to {to}: {error_code}: {error_message}"
        ) from e

    message_id = response.get('MessageId')
    if not message_id:
        logger.error(f"SES returned no message ID for message to {to}")
        raise MailDeliveryError(f"Message to {to} was not accepted by SES")

    logger.info(f"Message sent: to={to}, message_id={message_id}")
    return message_id
