"""
Custom exceptions for the web UI backend-for-frontend.

Provides:
- Typed exception hierarchy for parameter store failure modes
- Error context preservation for diagnostics
- Mapping of AWS SDK failures onto that hierarchy

Transport failures from the upstream API are not wrapped: they surface as
the httpx exception types so callers see exactly what the transport raised.
"""

from typing import Any


class WebUiBffError(Exception):
    """Base exception for all backend-for-frontend errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


# =============================================================================
# Parameter Store Errors
# =============================================================================


class ParameterStoreError(WebUiBffError):
    """Base class for parameter store failures.

    Callers treat every subclass the same way: the value is unavailable.
    """

    pass


class ParameterStoreUnavailableError(ParameterStoreError):
    """The store could not be reached or did not answer in time."""

    pass


class ParameterNotFoundError(ParameterStoreError):
    """The key is absent from the store or holds no value."""

    pass


class ParameterStoreDisabledError(ParameterStoreError):
    """No store endpoint is configured; nothing was attempted."""

    pass


# =============================================================================
# Setting Errors
# =============================================================================


class InvalidSettingValueError(WebUiBffError):
    """A stored value could not be parsed into the setting's type."""

    pass


# =============================================================================
# Error Handling Utilities
# =============================================================================


_NOT_FOUND_CODES = {'ParameterNotFound', 'ParameterVersionNotFound'}


def wrap_ssm_error(exc: Exception, context: dict[str, Any] | None = None) -> ParameterStoreError:
    """
    Wrap an SSM / Powertools exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for diagnostics

    Returns:
        Typed ParameterStoreError subclass
    """
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    # Powertools re-raises SDK errors as GetParameterError; the SDK error is the cause
    root = exc.__cause__ or exc.__context__ or exc
    code = (getattr(root, 'response', None) or {}).get('Error', {}).get('Code')
    if code is None:
        code = type(root).__name__
    if code in _NOT_FOUND_CODES or 'parameternotfound' in str(exc).lower():
        return ParameterNotFoundError(
            f"Parameter not found: {exc}",
            context=ctx,
        )
    return ParameterStoreUnavailableError(
        f"Parameter store unavailable: {exc}",
        context=ctx,
    )
