"""Error types and sanitization utilities for reconciliation."""

from __future__ import annotations

import re

from kubernetes.client.exceptions import ApiException


class ReplicationError(Exception):
    """Base class for errors surfaced to the reconciliation boundary."""


class TransientApiError(ReplicationError):
    """A Kubernetes API call failed in a way that a retry may fix.

    Wraps either an ``ApiException`` (HTTP status available) or a transport
    error from urllib3, for which ``status`` is None.
    """

    def __init__(self, operation: str, error: ApiException | Exception):
        self.operation = operation
        self.status = getattr(error, "status", None)
        self.reason = getattr(error, "reason", None)
        if self.status is None:
            super().__init__(f"{operation} failed: {error}")
        else:
            super().__init__(f"{operation} failed with status {self.status}: {self.reason}")


class ReplicaConflictError(TransientApiError):
    """A replica was created concurrently by another reconciliation."""


class UserInputError(ReplicationError):
    """The source secret lacks data required to replicate it."""


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(token[:\s]+)[A-Za-z0-9\-_\.]+",
    r"(bearer\s+)[A-Za-z0-9\-_\.=]+",
    r"(authorization[:\s]+)[^\s,;]+",
]


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1[REDACTED]", sanitized, flags=re.IGNORECASE)

    # API error bodies echo the submitted secret payload
    sanitized = re.sub(
        r'"(data|stringData)"\s*:\s*\{[^}]*\}',
        r'"\1": "[REDACTED]"',
        sanitized,
        flags=re.IGNORECASE,
    )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))
