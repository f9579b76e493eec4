"""Replica synchronization across target namespaces."""

from __future__ import annotations

from .. import metrics
from ..builders.replica import build_data_patch, build_replica
from ..models import SourceSecret, SyncReport
from ..utils.events import emit_foreign_skipped, emit_replica_created, emit_replica_updated
from ..utils.ownership import Ownership, classify_replica
from .base import BaseHandler


class SecretSynchronizer(BaseHandler):
    """Creates, updates or leaves alone the replica in each target namespace."""

    def sync(self, source: SourceSecret, namespaces: list[str], report_foreign: bool = True) -> SyncReport:
        """Converge every target namespace onto the source payload.

        The source namespace is never written to, even if passed in.

        Args:
            source: Source secret, with namespace and uid set
            namespaces: Target namespaces
            report_foreign: Emit a Warning event for each foreign secret skipped

        Returns:
            What happened in each namespace

        Raises:
            ReplicaConflictError: If a replica appeared between read and create
            TransientApiError: On any other API failure
        """
        report = SyncReport()
        for namespace in namespaces:
            if namespace == source.namespace:
                continue
            self.sync_namespace(source, namespace, report, report_foreign)
        return report

    def sync_namespace(
        self,
        source: SourceSecret,
        namespace: str,
        report: SyncReport,
        report_foreign: bool = True,
    ) -> None:
        existing = self.store.get_secret(namespace, source.name)
        ownership = classify_replica(existing, self.config.owner_label)

        if ownership is Ownership.ABSENT:
            self._create_replica(source, namespace)
            report.created.append(namespace)
        elif ownership is Ownership.MANAGED:
            if existing.data == source.data:
                report.unchanged.append(namespace)
                return
            metrics.drift_detected_total.labels(kind=self.kind).inc()
            self._update_replica(source, namespace, existing.data)
            report.updated.append(namespace)
        else:
            self.log_warning(
                source,
                f"There is an unmanaged secret with the same name already in {namespace}",
                event="skip",
                reason="ForeignSecret",
                target_namespace=namespace,
            )
            metrics.foreign_conflicts_total.inc()
            if report_foreign:
                emit_foreign_skipped(source.reference(), namespace)
            report.skipped.append(namespace)

    def _create_replica(self, source: SourceSecret, namespace: str) -> None:
        replica = build_replica(source, namespace, self.config.owner_label)
        try:
            self.store.create_secret(namespace, replica)
        except Exception:
            metrics.replica_operations_total.labels(operation="create", result="error").inc()
            raise
        metrics.replica_operations_total.labels(operation="create", result="success").inc()
        self.log_info(source, f"Created replica in {namespace}", event="create", reason="ReplicaCreated", target_namespace=namespace)
        emit_replica_created(source.reference(), namespace)

    def _update_replica(self, source: SourceSecret, namespace: str, existing: dict[str, str] | None) -> None:
        try:
            self.store.patch_secret(namespace, source.name, build_data_patch(source.data, existing))
        except Exception:
            metrics.replica_operations_total.labels(operation="update", result="error").inc()
            raise
        metrics.replica_operations_total.labels(operation="update", result="success").inc()
        self.log_info(source, f"Updated replica data in {namespace}", event="update", reason="ReplicaUpdated", target_namespace=namespace)
        emit_replica_updated(source.reference(), namespace)
