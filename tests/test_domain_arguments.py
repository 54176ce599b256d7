"""
Tests for command-line argument parsing.
"""

import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.arguments import parse_arguments
from domain.models import ArgumentSet


class TestParseArguments:
    """Test parsing key=value tokens."""

    def test_parse_all_parameters(self):
        """Test parsing domain, period and emailto."""
        args = parse_arguments([
            'domain=example.com',
            'period=lastweek',
            'emailto=ops@example.com'
        ])

        assert args == ArgumentSet(
            domain='example.com',
            period='lastweek',
            emailto='ops@example.com'
        )

    def test_argument_order_is_irrelevant(self):
        """Test that tokens can appear in any order."""
        args = parse_arguments(['period=lastndays:10', 'domain=a.com,b.com'])

        assert args.domain == 'a.com,b.com'
        assert args.period == 'lastndays:10'
        assert args.emailto is None

    def test_last_occurrence_wins(self):
        """Test that a repeated key overwrites the earlier value."""
        args = parse_arguments(['domain=a.com', 'period=lastweek', 'domain=b.com'])

        assert args.domain == 'b.com'

    def test_unknown_keys_are_ignored(self):
        """Test that unrecognized keys do not affect the result."""
        args = parse_arguments(['verbose=1', 'domain=example.com'])

        assert args == ArgumentSet(domain='example.com')

    def test_tokens_without_equals_are_ignored(self):
        """Test that tokens that are not key=value are skipped."""
        args = parse_arguments(['--help', 'example.com', 'period=lastmonth'])

        assert args == ArgumentSet(period='lastmonth')

    def test_tokens_with_several_equals_are_ignored(self):
        """Test that a token splitting into more than two parts is skipped."""
        args = parse_arguments(['emailto=a=b@example.com', 'domain=example.com'])

        assert args.emailto is None
        assert args.domain == 'example.com'

    def test_empty_value_is_kept(self):
        """Test that an empty value is parsed (and rejected later)."""
        args = parse_arguments(['domain=', 'period=lastweek'])

        assert args.domain == ''
        assert args.period == 'lastweek'

    def test_empty_input(self):
        """Test that no tokens produce an empty argument set."""
        assert parse_arguments([]) == ArgumentSet()
