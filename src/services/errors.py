"""
Error types and error rendering.

UserInputError marks failures caused by how the job was invoked (missing
parameters, wrong period, unknown domain). Everything else is treated as an
unexpected failure and rendered with exception_text().
"""

import traceback

from botocore.exceptions import ClientError


class UserInputError(Exception):
    """Raised for expected, user-facing failures."""
    pass


def _describe(exc: BaseException) -> str:
    text = f"{exc} ({type(exc).__name__})"
    if isinstance(exc, ClientError):
        error_code = exc.response.get('Error', {}).get('Code', 'Unknown')
        text += f" [code: {error_code}]"
    return text


def exception_text(exc: BaseException, debug: bool = False) -> str:
    """
    Render an unexpected exception for display.

    Args:
        exc: The exception to render
        debug: Include the full traceback

    Returns:
        str: Multi-line text ending with a newline

    Example:
        >>> print(exception_text(ValueError("S3 bucket not found: x")), end='')
        Error: S3 bucket not found: x (ValueError)
    """
    lines = [f"Error: {_describe(exc)}"]

    cause = exc.__cause__ or exc.__context__
    seen = {id(exc)}
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines.append(f" Caused by: {_describe(cause)}")
        cause = cause.__cause__ or cause.__context__

    if debug:
        lines.append("")
        lines.extend(
            line.rstrip('\n')
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    return "\n".join(lines) + "\n"
