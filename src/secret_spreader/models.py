"""Typed views of the objects the reconciler works with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .constants import KIND_SECRET, SECRET_API_VERSION


@dataclass(frozen=True)
class SourceSecret:
    """A watched secret, parsed once from its watch event body."""

    name: str
    namespace: str | None
    uid: str | None
    type: str | None = None
    data: dict[str, str] | None = None
    string_data: dict[str, str] | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    deletion_timestamp: str | None = None

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> SourceSecret:
        """Build a source secret from a raw object body (as delivered by kopf).

        Args:
            body: Secret object as a mapping

        Returns:
            Parsed source secret
        """
        meta = body.get("metadata", {}) or {}
        data = body.get("data")
        string_data = body.get("stringData")
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace"),
            uid=meta.get("uid"),
            type=body.get("type"),
            data=dict(data) if data is not None else None,
            string_data=dict(string_data) if string_data is not None else None,
            labels=dict(meta.get("labels") or {}),
            annotations=dict(meta.get("annotations") or {}),
            finalizers=list(meta.get("finalizers") or []),
            deletion_timestamp=meta.get("deletionTimestamp"),
        )

    @property
    def is_deleting(self) -> bool:
        return self.deletion_timestamp is not None

    def reference(self) -> dict[str, Any]:
        """Minimal object reference used to attach Kubernetes events."""
        return {
            "apiVersion": SECRET_API_VERSION,
            "kind": KIND_SECRET,
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "uid": self.uid,
            },
        }


@dataclass(frozen=True)
class ReconcileAction:
    """Outcome of a reconciliation: when (if ever) to look at the object again."""

    requeue_after: float | None = None


@dataclass
class SyncReport:
    """Per-namespace outcome of one synchronization pass."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def writes(self) -> int:
        return len(self.created) + len(self.updated)
