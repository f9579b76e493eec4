"""Reconciliation entry point for source secrets."""

from __future__ import annotations

from typing import Any

from ..config import ReplicationConfig
from ..models import ReconcileAction, SourceSecret
from ..utils.errors import UserInputError
from ..utils.finalizers import add_finalizer
from ..utils.namespaces import parse_target_directive, resolve_target_namespaces
from .base import BaseHandler
from .garbage_collector import GarbageCollector
from .synchronizer import SecretSynchronizer


class Reconciler(BaseHandler):
    """Decides between the sync path and the cleanup path for a source secret.

    Holds no state between calls; everything is re-read from the API. The
    caller must not run two reconciliations of the same secret concurrently
    (kopf serializes handlers per object).
    """

    def __init__(self, store: Any, config: ReplicationConfig | None = None):
        config = config or ReplicationConfig()
        super().__init__(store, config)
        self.synchronizer = SecretSynchronizer(store, config)
        self.garbage_collector = GarbageCollector(store, config)

    def reconcile(self, source: SourceSecret, report_foreign: bool = True) -> ReconcileAction:
        """Reconcile one source secret.

        Args:
            source: Observed state of the source secret
            report_foreign: Emit events for foreign secrets in target namespaces
                (off for periodic passes)

        Returns:
            When to reconcile the secret again

        Raises:
            UserInputError: If the secret has no namespace or uid
            TransientApiError: If any API call fails
        """
        return self.reconcile_with_metrics(source, lambda: self._reconcile(source, report_foreign))

    def _reconcile(self, source: SourceSecret, report_foreign: bool) -> ReconcileAction:
        if source.is_deleting:
            self._require_identity(source)
            return self.cleanup(source)

        directive = parse_target_directive(source.annotations, self.config.annotation_key, self.config.wildcard)
        if directive is None:
            # Not participating; look again later in case the annotation is added
            return ReconcileAction(requeue_after=self.config.idle_requeue_seconds)

        self._require_identity(source)

        add_finalizer(self.store, source, self.config)
        namespaces = resolve_target_namespaces(directive, source.namespace, self.store)
        report = self.synchronizer.sync(source, namespaces, report_foreign)

        if report.writes or report.skipped:
            self.log_info(
                source,
                "Replicas synchronized",
                event="sync",
                reason="Synchronized",
                created=report.created,
                updated=report.updated,
                skipped=report.skipped,
            )
        return ReconcileAction(requeue_after=self.config.sync_requeue_seconds)

    def cleanup(self, source: SourceSecret) -> ReconcileAction:
        deleted = self.garbage_collector.collect(source)
        self.log_info(source, f"Cleanup finished, {deleted} replica(s) deleted", event="cleanup", reason="Cleanup")
        return ReconcileAction(requeue_after=None)

    @staticmethod
    def _require_identity(source: SourceSecret) -> None:
        if not source.namespace:
            raise UserInputError(
                "Expected Secret resource to be namespaced. Can't replicate from an unknown namespace."
            )
        if not source.uid:
            raise UserInputError("Expected Secret resource to have a uid")
