"""Base handler class with common functionality for reconciliation steps."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..config import ReplicationConfig
from ..constants import CONTROLLER_NAME, KIND_SECRET
from ..logging import log_resource_event
from ..models import SourceSecret
from ..utils.errors import sanitize_exception
from ..utils.events import emit_reconcile_failed

_T = TypeVar("_T")


class BaseHandler:
    """Base class for handlers working on a source secret."""

    def __init__(self, store: Any, config: ReplicationConfig, kind: str = KIND_SECRET):
        """Initialize base handler.

        Args:
            store: Object store adapter (``KubernetesSecretStore`` or compatible)
            config: Replication keys and intervals
            kind: Kubernetes resource kind reported in logs and metrics
        """
        self.store = store
        self.config = config
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _log(self, level: int, source: SourceSecret, message: str, event: str, reason: str, **kwargs: Any) -> None:
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=source.name or "unknown",
            namespace=source.namespace or "unknown",
            uid=source.uid or "unknown",
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        source: SourceSecret,
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message."""
        self._log(logging.INFO, source, message, event, reason, **kwargs)

    def log_warning(
        self,
        source: SourceSecret,
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, source, message, event, reason, **kwargs)

    def log_error(
        self,
        source: SourceSecret,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            source: Source secret the message is about
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        self._log(logging.ERROR, source, message, event, reason, **log_data)

    def reconcile_with_metrics(self, source: SourceSecret, reconcile_fn: Callable[[], _T]) -> _T:
        """Execute a reconciliation step with metrics, events and error logging.

        Args:
            source: Source secret being reconciled
            reconcile_fn: Function performing the reconciliation

        Returns:
            Whatever ``reconcile_fn`` returns
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            result = reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            return result
        except Exception as e:
            sanitized_error = sanitize_exception(e)
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_error(source, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            emit_reconcile_failed(source.reference(), f"Reconciliation failed: {sanitized_error}")
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)
