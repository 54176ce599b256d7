"""
Summary report dispatch pipeline - core business logic.

This module handles one run of the summary report job:
1. Validate the parsed arguments
2. Resolve the recipient and the set of domains
3. Collect the report text of every domain into one message body
4. Compose the subject line
5. Hand the message to the mail transport
6. Return result (success or classified failure)

All errors are caught and returned as DispatchResult with success=False.
No exceptions propagate out of run().
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .models import ArgumentSet, DispatchResult, EmailMessage, ExpectedError, SystemFailure
from services import email as email_service
from services.config import Config
from services.domains import Domain, DomainDirectory
from services.errors import UserInputError
from services.summary_report import SummaryReport
from integrations import ses_mailer

logger = logging.getLogger(__name__)

SEPARATOR = '-----------------------------------'


class SummaryDispatcher:
    """
    Builds and sends the summary report message for one run.

    Collaborators are passed in at construction time; by default the
    domain directory and the report read from S3 and the message goes
    out through SES.
    """

    def __init__(
        self,
        config: Config,
        directory: Optional[DomainDirectory] = None,
        mailer=None,
        report_factory: Optional[Callable[[str], SummaryReport]] = None
    ):
        self.config = config
        self.directory = directory or DomainDirectory(config)
        self.mailer = mailer or ses_mailer
        self.report_factory = report_factory or self._create_report

    def _create_report(self, period: str) -> SummaryReport:
        return SummaryReport(
            period,
            self.directory,
            top_sources=self.config.get_int('report/top_sources')
        )

    def run(self, args: ArgumentSet) -> DispatchResult:
        """
        Run the whole pipeline for the given arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            DispatchResult with success=True, or with an ExpectedError or
            SystemFailure describing why nothing was sent
        """
        result = DispatchResult(success=False)
        try:
            if not args.domain:
                raise UserInputError('Parameter "domain" is not specified')
            if not args.period:
                raise UserInputError('Parameter "period" is not specified')

            result.recipient = args.emailto or self.config.get('mailer/default')

            domains = self.resolve_domains(args.domain)
            result.domain_count = len(domains)
            logger.info(f"Resolved {len(domains)} domain(s)")

            report = self.report_factory(args.period)
            body, current = self.aggregate(domains, report)

            result.subject = self.compose_subject(report.subject(), domains, current)
            self.dispatch(result.recipient, result.subject, body)

            result.success = True
            return result

        except UserInputError as e:
            logger.info(f"Summary report not sent: {e}")
            result.error = ExpectedError(str(e))
            return result

        except Exception as e:
            logger.error(f"Summary report failed: {e}")
            logger.debug("Summary report failure details", exc_info=True)
            result.error = SystemFailure(e)
            return result

    def resolve_domains(self, domain_arg: str) -> List[Domain]:
        """
        Turn the domain parameter into an ordered list of domain handles.

        Args:
            domain_arg: 'all' or a comma-separated list of domain names

        Returns:
            List[Domain]: Handles in order; duplicates are kept
        """
        if domain_arg == 'all':
            return self.directory.list_domains()
        return [self.directory.domain(fqdn) for fqdn in domain_arg.split(',')]

    def aggregate(
        self,
        domains: Sequence[Domain],
        report: SummaryReport
    ) -> Tuple[List[str], Optional[Domain]]:
        """
        Collect report text of every domain into one body.

        Args:
            domains: Domain handles in report order
            report: Summary report for the requested period

        Returns:
            Tuple of (body lines, last iterated domain or None)

        Raises:
            UserInputError: If the only requested domain does not exist
        """
        body: List[str] = []
        domain = None
        domain_count = len(domains)
        for i, domain in enumerate(domains):
            if i > 0:
                body.append(SEPARATOR)
                body.append('')

            if domain.exists():
                body.extend(report.bind(domain).text())
            else:
                message = f'Domain "{domain.fqdn()}" does not exist'
                if domain_count == 1:
                    raise UserInputError(message)
                logger.info(message)
                body.append(f"# {message}")
                body.append('')

        return body, domain

    def compose_subject(
        self,
        report_subject: str,
        domains: Sequence[Domain],
        current: Optional[Domain]
    ) -> str:
        """Build the subject line for one domain or for many."""
        if len(domains) == 1:
            return f"{report_subject} for {current.fqdn()}"
        return f"{report_subject} for {len(domains)} domains"

    def dispatch(self, recipient: str, subject: str, body: Sequence[str]) -> EmailMessage:
        """
        Assemble the message and hand it to the mail transport once.

        Args:
            recipient: Recipient address
            subject: Unencoded subject line
            body: Body lines

        Returns:
            EmailMessage: The message that was sent
        """
        message = EmailMessage(
            to=recipient,
            subject=email_service.encode_subject(subject),
            body=email_service.join_body(body),
            headers=email_service.build_headers(self.config.get('mailer/from'))
        )

        logger.info(f"Sending summary report to {message.to}: {subject}")
        self.mailer.send(message.to, message.subject, message.body, message.headers)
        return message
