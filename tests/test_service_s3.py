"""
Tests for S3 service operations.
"""

import json
import pytest
from unittest.mock import patch, MagicMock
from botocore.exceptions import ClientError
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from services import s3


def client_error(code, operation='GetObject'):
    return ClientError({'Error': {'Code': code, 'Message': code}}, operation)


class TestListPrefixes:
    """Test listing domain prefixes."""

    @patch('services.s3.s3_client')
    def test_list_prefixes_across_pages(self, mock_s3_client):
        """Test that prefixes from all pages are returned in order."""
        mock_s3_client.get_paginator.return_value.paginate.return_value = [
            {'CommonPrefixes': [{'Prefix': 'summaries/a.com/'}, {'Prefix': 'summaries/b.com/'}]},
            {'CommonPrefixes': [{'Prefix': 'summaries/c.com/'}]},
            {},
        ]

        result = s3.list_prefixes('dmarc-data', 'summaries/')

        assert result == ['a.com', 'b.com', 'c.com']
        mock_s3_client.get_paginator.assert_called_once_with('list_objects_v2')
        mock_s3_client.get_paginator.return_value.paginate.assert_called_once_with(
            Bucket='dmarc-data',
            Prefix='summaries/',
            Delimiter='/'
        )

    @patch('services.s3.s3_client')
    def test_list_prefixes_empty(self, mock_s3_client):
        """Test listing an empty prefix."""
        mock_s3_client.get_paginator.return_value.paginate.return_value = [{'KeyCount': 0}]

        assert s3.list_prefixes('dmarc-data', 'summaries/') == []

    @patch('services.s3.s3_client')
    def test_list_prefixes_error(self, mock_s3_client):
        """Test that S3 errors propagate."""
        mock_s3_client.get_paginator.return_value.paginate.side_effect = client_error(
            'AccessDenied', 'ListObjectsV2'
        )

        with pytest.raises(ClientError):
            s3.list_prefixes('dmarc-data', 'summaries/')


class TestHasObjects:
    """Test prefix existence checks."""

    @patch('services.s3.s3_client')
    def test_has_objects_true(self, mock_s3_client):
        mock_s3_client.list_objects_v2.return_value = {'KeyCount': 1}

        assert s3.has_objects('dmarc-data', 'summaries/a.com/') is True
        mock_s3_client.list_objects_v2.assert_called_once_with(
            Bucket='dmarc-data',
            Prefix='summaries/a.com/',
            MaxKeys=1
        )

    @patch('services.s3.s3_client')
    def test_has_objects_false(self, mock_s3_client):
        mock_s3_client.list_objects_v2.return_value = {'KeyCount': 0}

        assert s3.has_objects('dmarc-data', 'summaries/b.com/') is False

    @patch('services.s3.s3_client')
    def test_has_objects_error(self, mock_s3_client):
        mock_s3_client.list_objects_v2.side_effect = client_error('NoSuchBucket', 'ListObjectsV2')

        with pytest.raises(ClientError):
            s3.has_objects('missing-bucket', 'summaries/a.com/')


class TestFetchJson:
    """Test fetching aggregated data objects."""

    @patch('services.s3.s3_client')
    def test_fetch_json_success(self, mock_s3_client):
        """Test successful fetch and decode."""
        data = {'reports': 2, 'messages': 100}
        mock_s3_client.get_object.return_value = {
            'Body': MagicMock(read=lambda: json.dumps(data).encode('utf-8'))
        }

        result = s3.fetch_json('dmarc-data', 'summaries/a.com/2026-10-18.json')

        assert result == data
        mock_s3_client.get_object.assert_called_once_with(
            Bucket='dmarc-data',
            Key='summaries/a.com/2026-10-18.json'
        )

    @patch('services.s3.s3_client')
    def test_fetch_json_no_such_key(self, mock_s3_client):
        """Test that a missing object returns None."""
        mock_s3_client.get_object.side_effect = client_error('NoSuchKey')

        assert s3.fetch_json('dmarc-data', 'summaries/a.com/2026-10-18.json') is None

    @patch('services.s3.s3_client')
    def test_fetch_json_no_such_bucket(self, mock_s3_client):
        """Test fetch when S3 bucket doesn't exist."""
        mock_s3_client.get_object.side_effect = client_error('NoSuchBucket')

        with pytest.raises(ValueError, match="S3 bucket not found"):
            s3.fetch_json('missing-bucket', 'summaries/a.com/2026-10-18.json')

    @patch('services.s3.s3_client')
    def test_fetch_json_generic_error(self, mock_s3_client):
        """Test that other S3 errors propagate."""
        mock_s3_client.get_object.side_effect = client_error('AccessDenied')

        with pytest.raises(ClientError):
            s3.fetch_json('dmarc-data', 'summaries/a.com/2026-10-18.json')

    @patch('services.s3.s3_client')
    def test_fetch_json_invalid(self, mock_s3_client):
        """Test that a corrupt object is reported."""
        mock_s3_client.get_object.return_value = {
            'Body': MagicMock(read=lambda: b'{not json')
        }

        with pytest.raises(ValueError, match="Invalid aggregated data"):
            s3.fetch_json('dmarc-data', 'summaries/a.com/2026-10-18.json')
