"""Runtime configuration for the Secret Spreader operator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .constants import (
    ANNOTATION_TARGET_NAMESPACE,
    ERROR_BACKOFF_SECONDS,
    FINALIZER,
    IDLE_REQUEUE_SECONDS,
    LABEL_OWNER,
    SYNC_REQUEUE_SECONDS,
    WILDCARD_NAMESPACES,
)


@dataclass(frozen=True)
class ReplicationConfig:
    """Keys and intervals that drive replication.

    Each reconciler receives its own instance, so differently configured
    operators (or tests) never share process-wide literals.
    """

    annotation_key: str = ANNOTATION_TARGET_NAMESPACE
    owner_label: str = LABEL_OWNER
    finalizer: str = FINALIZER
    wildcard: str = WILDCARD_NAMESPACES
    idle_requeue_seconds: float = IDLE_REQUEUE_SECONDS
    sync_requeue_seconds: float = SYNC_REQUEUE_SECONDS
    error_backoff_seconds: float = ERROR_BACKOFF_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ReplicationConfig:
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Parsed configuration

        Raises:
            ValueError: If an interval is not a positive number
        """
        env = os.environ if environ is None else environ

        def _seconds(name: str, default: float) -> float:
            value = float(env.get(name, default))
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
            return value

        return cls(
            annotation_key=env.get("SPREAD_TARGET_ANNOTATION", ANNOTATION_TARGET_NAMESPACE),
            owner_label=env.get("SPREAD_OWNER_LABEL", LABEL_OWNER),
            finalizer=env.get("SPREAD_FINALIZER", FINALIZER),
            idle_requeue_seconds=_seconds("SPREAD_IDLE_REQUEUE_SECONDS", IDLE_REQUEUE_SECONDS),
            sync_requeue_seconds=_seconds("SPREAD_SYNC_INTERVAL_SECONDS", SYNC_REQUEUE_SECONDS),
            error_backoff_seconds=_seconds("SPREAD_ERROR_BACKOFF_SECONDS", ERROR_BACKOFF_SECONDS),
        )
