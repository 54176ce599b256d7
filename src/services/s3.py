"""
S3 operations for reading previously aggregated DMARC data.

Aggregated data is laid out as one JSON object per domain per day:
    s3://<bucket>/<prefix><fqdn>/<YYYY-MM-DD>.json
"""

import json
import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure S3 client with timeouts to prevent infinite hangs
s3_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=60      # 60 seconds max for reading response
)

# Initialize S3 client at module level (reused for the whole run)
s3_client = boto3.client('s3', config=s3_config)
logger.debug("S3 client initialized with timeouts: connect=10s, read=60s, max_attempts=1")


def list_prefixes(bucket: str, prefix: str) -> List[str]:
    """
    List the immediate "directory" names below a prefix.

    Args:
        bucket: S3 bucket name
        prefix: Key prefix ending with '/'

    Returns:
        List[str]: Child names without the prefix or trailing slash,
        in the order S3 returns them

    Example:
        >>> list_prefixes("dmarc-data", "summaries/")
        ['example.com', 'example.org']
    """
    names = []
    try:
        paginator = s3_client.get_paginator('list_objects_v2')
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix, Delimiter='/'):
            for common_prefix in page.get('CommonPrefixes', []):
                name = common_prefix['Prefix'][len(prefix):].rstrip('/')
                if name:
                    names.append(name)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        logger.error(f"Failed to list s3://{bucket}/{prefix}: error_code={error_code}")
        raise

    logger.info(f"Listed {len(names)} prefix(es) under s3://{bucket}/{prefix}")
    return names


def has_objects(bucket: str, prefix: str) -> bool:
    """
    Check whether at least one object exists below a prefix.

    Args:
        bucket: S3 bucket name
        prefix: Key prefix

    Returns:
        bool: True if the prefix holds at least one object
    """
    try:
        response = s3_client.list_objects_v2(Bucket=bucket, Prefix=prefix, MaxKeys=1)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        logger.error(f"Failed to check s3://{bucket}/{prefix}: error_code={error_code}")
        raise
    return response.get('KeyCount', 0) > 0


def fetch_json(bucket: str, key: str) -> Optional[Dict[str, Any]]:
    """
    Fetch and decode a JSON object from S3.

    Args:
        bucket: S3 bucket name
        key: S3 object key

    Returns:
        Decoded JSON object, or None if the object does not exist

    Raises:
        ValueError: If the bucket does not exist or the object is not valid JSON
        ClientError: For other S3 errors
    """
    try:
        response = s3_client.get_object(Bucket=bucket, Key=key)
        raw = response['Body'].read()
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code == 'NoSuchKey':
            logger.debug(f"S3 object not found: s3://{bucket}/{key}")
            return None
        elif error_code == 'NoSuchBucket':
            logger.error(f"S3 bucket not found: {bucket}")
            raise ValueError(f"S3 bucket not found: {bucket}")
        else:
            logger.error(f"Failed to fetch from S3 s3://{bucket}/{key}: {e}")
            raise

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in s3://{bucket}/{key}: {e}")
        raise ValueError(f"Invalid aggregated data in s3://{bucket}/{key}: {e}") from e
