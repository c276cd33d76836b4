"""Error types raised by the yq provider.

File-level failures (an unreadable file, a failing engine run, a malformed
output segment) are logged and skipped by the aggregator. The exceptions
below are for failures that end the whole evaluation call.
"""

from __future__ import annotations

from typing import Optional


class ProviderError(Exception):
    """Base exception for provider failures.

    Attributes:
        message: Error description.
        cause: Optional underlying exception being wrapped.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigError(ProviderError):
    """Provider configuration is missing or has the wrong shape."""


class ConditionError(ProviderError):
    """The condition payload could not be interpreted."""


class CommandError(ProviderError):
    """A yq invocation failed to start, timed out or exited non-zero."""

    def __init__(
        self,
        message: str,
        stderr: str = "",
        return_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.stderr = stderr
        self.return_code = return_code


class IncidentError(ProviderError):
    """A matched record could not be turned into a reportable incident."""


class EvaluationTimeoutError(ProviderError):
    """The evaluation did not finish before its deadline."""


class ProviderStoppedError(ProviderError):
    """The provider was stopped and no longer accepts work."""
