"""Cleanup of every replica owned by a deleted source secret."""

from __future__ import annotations

from .. import metrics
from ..models import SourceSecret
from ..utils.events import emit_replicas_deleted
from ..utils.finalizers import remove_finalizer
from .base import BaseHandler


class GarbageCollector(BaseHandler):
    """Deletes managed replicas cluster-wide, then releases the finalizer."""

    def owner_selector(self, source: SourceSecret) -> str:
        return f"{self.config.owner_label}={source.uid}"

    def collect(self, source: SourceSecret) -> int:
        """Delete all replicas labelled with the source's uid.

        Replicas are found by label rather than by the current target
        directive, so namespaces dropped from the directive are cleaned up
        too. If any delete fails the finalizer stays in place and the error
        propagates; the next attempt re-enumerates from scratch.

        Args:
            source: Source secret being deleted, with namespace and uid set

        Returns:
            Number of replicas deleted in this pass

        Raises:
            TransientApiError: If listing, a delete or the finalizer patch fails
        """
        replicas = self.store.list_secrets(self.owner_selector(source))

        deleted = 0
        for replica in replicas:
            namespace = replica.metadata.namespace
            name = replica.metadata.name
            try:
                removed = self.store.delete_secret(namespace, name)
            except Exception:
                metrics.replica_operations_total.labels(operation="delete", result="error").inc()
                raise
            metrics.replica_operations_total.labels(operation="delete", result="success").inc()
            if removed:
                deleted += 1
                self.log_info(source, f"Cleaned up replica in {namespace}", event="delete", reason="ReplicaDeleted", target_namespace=namespace)

        if deleted:
            emit_replicas_deleted(source.reference(), deleted)

        remove_finalizer(self.store, source, self.config)
        return deleted
