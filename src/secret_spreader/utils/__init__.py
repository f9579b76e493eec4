"""Utility functions for the Secret Spreader operator."""

from .context import (
    get_context_dict,
    get_correlation_id,
    set_correlation_id,
    with_correlation_id,
)
from .errors import (
    ReplicaConflictError,
    ReplicationError,
    TransientApiError,
    UserInputError,
    sanitize_exception,
)
from .finalizers import (
    add_finalizer,
    has_finalizer,
    remove_finalizer,
    with_finalizer,
    without_finalizer,
)
from .namespaces import TargetDirective, parse_target_directive, resolve_target_namespaces
from .ownership import Ownership, classify_replica
from .rate_limit import is_rate_limit_error, rate_limit_k8s

__all__ = [
    "set_correlation_id",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
    "ReplicationError",
    "TransientApiError",
    "ReplicaConflictError",
    "UserInputError",
    "sanitize_exception",
    "has_finalizer",
    "with_finalizer",
    "without_finalizer",
    "add_finalizer",
    "remove_finalizer",
    "TargetDirective",
    "parse_target_directive",
    "resolve_target_namespaces",
    "Ownership",
    "classify_replica",
    "rate_limit_k8s",
    "is_rate_limit_error",
]
