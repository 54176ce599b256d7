"""
Data models for the summary report dispatch pipeline.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass
class ArgumentSet:
    """
    Parameters recognized on the command line.

    All values are optional at parse time; required values are checked by
    the dispatcher.

    Attributes:
        domain: 'all' or a comma-separated list of domain names
        period: Period descriptor (lastweek, lastmonth, lastndays:N)
        emailto: Recipient address overriding the configured default
    """
    domain: Optional[str] = None
    period: Optional[str] = None
    emailto: Optional[str] = None


@dataclass(frozen=True)
class EmailMessage:
    """
    A summary message ready for the mail transport.

    Attributes:
        to: Recipient address
        subject: Subject line, already encoded for transport
        body: Body text with CRLF line endings
        headers: From, MIME-Version and Content-Type headers
    """
    to: str
    subject: str
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ExpectedError:
    """A user-facing failure, such as a missing parameter or an unknown domain."""
    message: str

    def render(self) -> str:
        return f"Error: {self.message}"


@dataclass(frozen=True)
class SystemFailure:
    """An unexpected failure raised by a collaborator (config, storage, transport)."""
    cause: Exception


DispatchError = Union[ExpectedError, SystemFailure]


@dataclass
class DispatchResult:
    """
    Result of one summary report run.

    This explicit result type keeps the two error kinds apart and lets the
    entry point map them to output and exit codes in one place.

    Attributes:
        success: Whether the message was handed to the transport
        recipient: Recipient address (if resolved)
        subject: Unencoded subject line (if composed)
        domain_count: Number of resolved domains
        error: ExpectedError or SystemFailure (if the run failed)
    """
    success: bool
    recipient: Optional[str] = None
    subject: Optional[str] = None
    domain_count: int = 0
    error: Optional[DispatchError] = None

    @property
    def exit_code(self) -> int:
        """0 on success, 1 for either kind of error."""
        return 0 if self.success else 1

    @property
    def is_expected_error(self) -> bool:
        return isinstance(self.error, ExpectedError)

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.success:
            return f"DispatchResult(success=True, recipient={self.recipient}, domains={self.domain_count})"
        else:
            return f"DispatchResult(success=False, error={self.error})"
