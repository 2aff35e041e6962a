"""
Error Classifier - Typed, Severity-Ranked Error Records.

Provides:
    - classify: failure text -> ErrorKind (ordered substring rules)
    - severity_of: ErrorKind + context -> Severity
    - enrich / enrich_exception: build an immutable EnrichedError
    - user_facing_message: production-safe sentence per kind

Design Notes:
    - Pure functions, no I/O
    - Never raises: an unusable environment probe only drops origin fields
    - Rule order is significant; the first matching rule wins
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from resilience_kit.domain.errors import (
    RETRYABLE_KINDS,
    EnrichedError,
    ErrorKind,
    ErrorOrigin,
    Severity,
)
from resilience_kit.interfaces.environment_probe import EnvironmentProbe

logger = logging.getLogger(__name__)

ErrorLike = Union[BaseException, str]

# Evaluated top to bottom; keep network first so transport failures
# never fall through to a later rule.
CLASSIFICATION_RULES: Tuple[Tuple[Tuple[str, ...], ErrorKind], ...] = (
    (("network", "fetch"), ErrorKind.NETWORK),
    (("validation", "invalid"), ErrorKind.VALIDATION),
    (("unauthorized", "401"), ErrorKind.AUTHENTICATION),
    (("forbidden", "403"), ErrorKind.AUTHORIZATION),
    (("not found", "404"), ErrorKind.NOT_FOUND),
    (("server", "500"), ErrorKind.SERVER),
)

_SEVERITY_BY_KIND: Dict[ErrorKind, Severity] = {
    ErrorKind.NETWORK: Severity.MEDIUM,
    ErrorKind.VALIDATION: Severity.LOW,
    ErrorKind.AUTHENTICATION: Severity.HIGH,
    ErrorKind.AUTHORIZATION: Severity.HIGH,
    ErrorKind.NOT_FOUND: Severity.MEDIUM,
    ErrorKind.SERVER: Severity.CRITICAL,
    ErrorKind.UNKNOWN: Severity.MEDIUM,
}

USER_FACING_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.NETWORK: (
        "Unable to connect to the server. "
        "Please check your internet connection and try again."
    ),
    ErrorKind.AUTHENTICATION: "Please sign in to continue.",
    ErrorKind.AUTHORIZATION: "You do not have permission to perform this action.",
    ErrorKind.VALIDATION: "Please check your input and try again.",
    ErrorKind.NOT_FOUND: "The requested item could not be found.",
    ErrorKind.SERVER: "Our servers are experiencing issues. Please try again later.",
    ErrorKind.UNKNOWN: "Something went wrong. Please try again.",
}


def error_message(error: ErrorLike) -> str:
    """Extract the message text of a failure."""
    if isinstance(error, str):
        return error
    return str(error) or type(error).__name__


def classify(error: ErrorLike) -> ErrorKind:
    """
    Categorize a failure by its message text.

    Args:
        error: Exception or message string

    Returns:
        First ErrorKind whose tokens occur in the lower-cased message
    """
    text = error_message(error).lower()
    for tokens, kind in CLASSIFICATION_RULES:
        if any(token in text for token in tokens):
            return kind
    return ErrorKind.UNKNOWN


def severity_for_kind(kind: ErrorKind, is_retry: bool = False) -> Severity:
    """Map a kind to its severity; repeated network failures escalate."""
    if kind == ErrorKind.NETWORK and is_retry:
        return Severity.HIGH
    return _SEVERITY_BY_KIND[kind]


def severity_of(
    error: ErrorLike,
    context: Optional[Mapping[str, Any]] = None,
) -> Severity:
    """
    Determine severity from a failure and its context.

    Args:
        error: Exception or message string
        context: Caller context; ``is_retry`` escalates network failures

    Returns:
        Severity of the failure
    """
    is_retry = bool(context.get("is_retry")) if context else False
    return severity_for_kind(classify(error), is_retry=is_retry)


def capture_origin(environment: Optional[EnvironmentProbe]) -> ErrorOrigin:
    """Read user agent and URL from the environment, best effort."""
    if environment is None:
        return ErrorOrigin()
    try:
        return ErrorOrigin(
            user_agent=environment.user_agent(),
            url=environment.current_url(),
        )
    except Exception as e:
        logger.debug(f"Environment capture failed, omitting origin: {e}")
        return ErrorOrigin()


def normalize_code(code: Any) -> Optional[Union[int, str]]:
    """
    Coerce a status or application code into an int or str.

    Integer subclasses (IntEnum, HTTPStatus) become plain ints; any other
    type is dropped so a malformed code can never fail enrichment.
    """
    if code is None or isinstance(code, str):
        return code
    if isinstance(code, int) and not isinstance(code, bool):
        return int(code)
    logger.debug(f"Ignoring error code of type {type(code).__name__}")
    return None


def enrich(
    message: str,
    *,
    kind: Optional[ErrorKind] = None,
    code: Any = None,
    details: Optional[Mapping[str, Any]] = None,
    context: Optional[Mapping[str, Any]] = None,
    recoverable: Optional[bool] = None,
    retryable: Optional[bool] = None,
    environment: Optional[EnvironmentProbe] = None,
) -> EnrichedError:
    """
    Build an immutable EnrichedError.

    Severity is always derived from the kind and ``context["is_retry"]``.
    Retryability is derived from the kind; a caller may narrow it with
    ``retryable=False`` but cannot make a validation failure retryable.

    Args:
        message: Failure text
        kind: Explicit kind (classified from ``message`` if omitted)
        code: Optional status or application code (see normalize_code)
        details: Diagnostic context stored on the record
        context: Classification context (``is_retry``), also merged into details
        recoverable: Override for recoverability (default: kind != server)
        retryable: Narrowing override for retryability
        environment: Probe used to capture the error origin

    Returns:
        EnrichedError
    """
    resolved_kind = kind if kind is not None else classify(message)
    is_retry = bool(context.get("is_retry")) if context else False

    kind_retryable = resolved_kind in RETRYABLE_KINDS
    resolved_retryable = kind_retryable if retryable is None else (retryable and kind_retryable)
    resolved_recoverable = (
        resolved_kind != ErrorKind.SERVER if recoverable is None else recoverable
    )

    merged: Dict[str, Any] = {}
    if context:
        merged.update(context)
    if details:
        merged.update(details)

    return EnrichedError(
        message=message,
        kind=resolved_kind,
        severity=severity_for_kind(resolved_kind, is_retry=is_retry),
        code=normalize_code(code),
        details=merged,
        origin=capture_origin(environment),
        recoverable=resolved_recoverable,
        retryable=resolved_retryable,
    )


def enrich_exception(
    exc: BaseException,
    *,
    context: Optional[Mapping[str, Any]] = None,
    details: Optional[Mapping[str, Any]] = None,
    environment: Optional[EnvironmentProbe] = None,
    **overrides: Any,
) -> EnrichedError:
    """
    Build an EnrichedError from a caught exception.

    The exception type and its formatted traceback are recorded in the
    details next to any caller-supplied context.
    """
    exc_details: Dict[str, Any] = {
        "exception_type": type(exc).__name__,
        "traceback": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    }
    if details:
        exc_details.update(details)
    code = overrides.pop("code", getattr(exc, "status_code", None))
    return enrich(
        error_message(exc),
        code=code,
        details=exc_details,
        context=context,
        environment=environment,
        **overrides,
    )


def user_facing_message(error: EnrichedError) -> str:
    """Return a locale-agnostic, production-safe sentence for an error."""
    return USER_FACING_MESSAGES.get(error.kind, USER_FACING_MESSAGES[ErrorKind.UNKNOWN])


def is_recoverable(error: EnrichedError) -> bool:
    """Check whether the caller may reasonably continue after the error."""
    return error.recoverable and error.kind != ErrorKind.SERVER


def should_retry(error: EnrichedError) -> bool:
    """Check whether re-issuing the failed operation is sane."""
    return error.retryable and error.kind in RETRYABLE_KINDS
