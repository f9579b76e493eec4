"""Main entry point for the Secret Spreader operator.

Run with ``kopf run -m secret_spreader.main --all-namespaces``.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from .config import ReplicationConfig
from .constants import API_GROUP
from .handlers.reconciler import Reconciler
from .models import ReconcileAction, SourceSecret
from .services.store import KubernetesSecretStore, get_core_api
from .utils.context import with_correlation_id
from .utils.errors import ReplicationError, sanitize_exception
from .utils.finalizers import has_finalizer
from .utils.persistence import DigestDiffBaseStorage

CONFIG = ReplicationConfig.from_env()

_reconciler: Reconciler | None = None


def get_reconciler() -> Reconciler:
    """Return the process-wide reconciler, creating its API client on first use."""
    global _reconciler
    if _reconciler is None:
        _reconciler = Reconciler(KubernetesSecretStore(get_core_api()), CONFIG)
    return _reconciler


def owns_finalizer(meta: dict[str, Any], **_: Any) -> bool:
    """Filter: the secret carries our finalizer and needs cleanup on deletion."""
    return has_finalizer(meta.get("finalizers"), CONFIG.finalizer)


def requests_replication(meta: dict[str, Any], **_: Any) -> bool:
    """Filter: the secret carries the target-namespace annotation."""
    return CONFIG.annotation_key in (meta.get("annotations") or {})


def awaits_cleanup(meta: dict[str, Any], **_: Any) -> bool:
    """Filter: the annotation is gone but replicas may still exist."""
    return owns_finalizer(meta) and not requests_replication(meta)


def participates(meta: dict[str, Any], **_: Any) -> bool:
    """Filter: the secret requests replication or still has replicas to clean up."""
    return requests_replication(meta) or owns_finalizer(meta)


def run_reconcile(body: dict[str, Any], logger: logging.Logger, report_foreign: bool = True) -> ReconcileAction:
    """Reconcile a secret and translate failures into kopf retries.

    Every reconciliation error is retried after a constant backoff, including
    user input errors, which only a change to the secret can fix.
    """
    source = SourceSecret.from_body(body)
    with with_correlation_id(uuid.uuid4().hex):
        try:
            action = get_reconciler().reconcile(source, report_foreign=report_foreign)
        except ReplicationError as e:
            raise kopf.TemporaryError(sanitize_exception(e), delay=CONFIG.error_backoff_seconds) from e
    logger.debug(f"Reconciled {source.namespace}/{source.name}, requeue after {action.requeue_after}")
    return action


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    structured_logging.setup_structured_logging()

    # Keep kopf's bookkeeping under our own prefix, without secret payloads
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(prefix=API_GROUP)
    settings.persistence.diffbase_storage = DigestDiffBaseStorage(prefix=API_GROUP)

    settings.posting.level = logging.WARNING
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = int(os.getenv("MAX_WORKERS", "4"))

    # Metrics and health check endpoints on port 8080
    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    health.start_metrics_server(metrics_port)
    health.mark_ready()


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Report not ready while the operator stops."""
    health.mark_not_ready()


@kopf.on.create("v1", "secrets", when=participates)
@kopf.on.update("v1", "secrets", when=participates)
@kopf.on.resume("v1", "secrets", when=participates)
def handle_secret(body: dict[str, Any], logger: logging.Logger, **_: Any) -> None:
    """Handle creation, change or operator restart for a participating secret."""
    run_reconcile(body, logger)


# The requeue intervals of ReconcileAction map onto these timers: replicating
# secrets are polled at the sync interval, secrets holding only our finalizer
# at the idle interval.
@kopf.timer(
    "v1",
    "secrets",
    when=requests_replication,
    interval=CONFIG.sync_requeue_seconds,
    idle=CONFIG.sync_requeue_seconds,
)
def resync_secret(body: dict[str, Any], logger: logging.Logger, **_: Any) -> None:
    """Periodically restore replicas that drifted from their source."""
    run_reconcile(body, logger, report_foreign=False)


@kopf.timer(
    "v1",
    "secrets",
    when=awaits_cleanup,
    interval=CONFIG.idle_requeue_seconds,
    idle=CONFIG.idle_requeue_seconds,
)
def recheck_idle_secret(body: dict[str, Any], logger: logging.Logger, **_: Any) -> None:
    """Periodically look at a secret whose annotation was removed."""
    run_reconcile(body, logger, report_foreign=False)


# optional=True: kopf adds no finalizer of its own; ours keeps the secret
# alive until the handler has cleaned up.
@kopf.on.delete("v1", "secrets", when=owns_finalizer, optional=True)
def handle_secret_delete(body: dict[str, Any], logger: logging.Logger, **_: Any) -> None:
    """Delete every replica of a secret that is being deleted."""
    run_reconcile(body, logger)
