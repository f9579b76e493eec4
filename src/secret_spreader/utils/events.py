"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_FOREIGN_SKIPPED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_REPLICA_CREATED,
    EVENT_REASON_REPLICA_UPDATED,
    EVENT_REASON_REPLICAS_DELETED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object reference (apiVersion, kind and metadata) the event is about
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_replica_created(body: dict[str, Any], namespace: str) -> None:
    """Emit replica created event."""
    emit_event(body, EVENT_REASON_REPLICA_CREATED, f"Replica created in namespace {namespace}")


def emit_replica_updated(body: dict[str, Any], namespace: str) -> None:
    """Emit replica updated event."""
    emit_event(body, EVENT_REASON_REPLICA_UPDATED, f"Replica data updated in namespace {namespace}")


def emit_foreign_skipped(body: dict[str, Any], namespace: str) -> None:
    """Emit foreign secret skipped event."""
    emit_event(
        body,
        EVENT_REASON_FOREIGN_SKIPPED,
        f"An unmanaged secret with the same name already exists in namespace {namespace}",
        type_="Warning",
    )


def emit_replicas_deleted(body: dict[str, Any], count: int) -> None:
    """Emit replicas deleted event."""
    emit_event(body, EVENT_REASON_REPLICAS_DELETED, f"Deleted {count} replica(s)")
