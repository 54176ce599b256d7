"""
Summary report text for a domain over a reporting period.

Turns the previously aggregated daily DMARC data of one domain into
human-readable lines. The period descriptor is one of:
    lastweek      - previous week, Monday to Sunday
    lastmonth     - previous calendar month
    lastndays:N   - the N days before today
"""

import datetime
import logging
import re
from collections import Counter
from typing import Iterator, Optional, Tuple

from services import s3 as s3_service
from services.domains import Domain, DomainDirectory
from services.errors import UserInputError

logger = logging.getLogger(__name__)

DAYS_RE = re.compile(r"[0-9]+")
DAYS_ERROR = "The number of days in the period parameter is incorrect"

ALIGNMENT_FIELDS = (
    ('dkim_spf_aligned', 'Fully aligned'),
    ('spf_aligned', 'SPF only'),
    ('dkim_aligned', 'DKIM only'),
    ('not_aligned', 'Not aligned'),
)


def parse_period(period: str, today: datetime.date) -> Tuple[datetime.date, datetime.date, str]:
    """
    Resolve a period descriptor into an inclusive date range and a subject.

    Args:
        period: Period descriptor
        today: Reference date (the range never includes it)

    Returns:
        Tuple of (first day, last day, subject)

    Raises:
        UserInputError: If the descriptor is not recognized

    Example:
        >>> parse_period('lastndays:3', datetime.date(2026, 10, 19))
        (datetime.date(2026, 10, 16), datetime.date(2026, 10, 18), 'DMARC 3-day digest')
    """
    if period == 'lastweek':
        this_monday = today - datetime.timedelta(days=today.weekday())
        start = this_monday - datetime.timedelta(days=7)
        end = this_monday - datetime.timedelta(days=1)
        return start, end, 'DMARC weekly digest'

    if period == 'lastmonth':
        end = today.replace(day=1) - datetime.timedelta(days=1)
        return end.replace(day=1), end, 'DMARC monthly digest'

    name, sep, value = period.partition(':')
    if name == 'lastndays' and sep:
        ndays = int(value) if DAYS_RE.fullmatch(value) else 0
        if ndays <= 0:
            raise UserInputError(DAYS_ERROR)
        try:
            start = today - datetime.timedelta(days=ndays)
        except OverflowError:
            raise UserInputError(DAYS_ERROR)
        end = today - datetime.timedelta(days=1)
        return start, end, f'DMARC {ndays}-day digest'

    raise UserInputError('The period parameter is wrong')


def _percent(value: int, total: int) -> str:
    if not total:
        return str(value)
    return f"{value} ({round(value * 100 / total)}%)"


class SummaryReport:
    """
    Summary report generator for one period.

    Bind a domain with bind(), then iterate text(). The same instance is
    reused for every domain of a run.
    """

    def __init__(
        self,
        period: str,
        directory: DomainDirectory,
        today: Optional[datetime.date] = None,
        top_sources: int = 10
    ):
        self.period = period
        self.directory = directory
        self.top_sources = top_sources
        self.start, self.end, self._subject = parse_period(
            period, today or datetime.date.today()
        )
        self.domain: Optional[Domain] = None
        logger.info(f"Summary report period: {period} ({self.start} - {self.end})")

    def bind(self, domain: Domain) -> 'SummaryReport':
        """Set the domain the next text() call reports on."""
        self.domain = domain
        return self

    def subject(self) -> str:
        return self._subject

    def _days(self) -> Iterator[datetime.date]:
        day = self.start
        while day <= self.end:
            yield day
            day += datetime.timedelta(days=1)

    def _load_totals(self) -> Tuple[Counter, Counter, Counter, int]:
        totals: Counter = Counter()
        sources: Counter = Counter()
        organizations: Counter = Counter()
        days_with_data = 0

        prefix = self.directory.domain_prefix(self.domain.fqdn())
        for day in self._days():
            data = s3_service.fetch_json(self.directory.bucket, f"{prefix}{day.isoformat()}.json")
            if not data:
                continue
            days_with_data += 1
            for field in ('reports', 'messages') + tuple(f for f, _ in ALIGNMENT_FIELDS):
                totals[field] += int(data.get(field, 0))
            sources.update({ip: int(n) for ip, n in data.get('sources', {}).items()})
            organizations.update({org: int(n) for org, n in data.get('organizations', {}).items()})

        return totals, sources, organizations, days_with_data

    def text(self) -> Iterator[str]:
        """
        Generate the report lines for the bound domain.

        Yields:
            str: One line of report text (no line terminators)

        Raises:
            ValueError: If no domain is bound
        """
        if self.domain is None:
            raise ValueError("No domain bound to the summary report")

        totals, sources, organizations, days_with_data = self._load_totals()

        yield f"# Domain: {self.domain.fqdn()}"
        yield f" Range: {self.start.isoformat()} - {self.end.isoformat()}"
        yield ''

        if not days_with_data:
            yield 'No data'
            yield ''
            return

        messages = totals['messages']
        yield '## Summary'
        yield f" Total messages: {messages}"
        yield f" Reports: {totals['reports']}"
        yield f" Reporting organizations: {len(organizations)}"
        for field, label in ALIGNMENT_FIELDS:
            yield f" {label}: {_percent(totals[field], messages)}"
        yield ''

        if sources:
            yield f"## Top sources (up to {self.top_sources})"
            for ip, count in sources.most_common(self.top_sources):
                yield f" {ip}: {_percent(count, messages)}"
            yield ''

        if organizations:
            yield '## Reporting organizations'
            for org, count in organizations.most_common():
                yield f" {org}: {count} report(s)"
            yield ''
