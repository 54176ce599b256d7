"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('LOG_LEVEL', 'INFO')


@pytest.fixture
def test_environ():
    """Environment for a fully configured run."""
    return {
        'MAILER_DEFAULT': 'postmaster@example.com',
        'MAILER_FROM': 'dmarc-reports@example.com',
        'STORAGE_BUCKET': 'dmarc-data',
    }
