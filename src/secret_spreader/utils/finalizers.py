"""Finalizer bookkeeping on source secrets."""

from __future__ import annotations

import logging
from typing import Any

from ..builders.replica import build_finalizer_patch
from ..config import ReplicationConfig
from ..models import SourceSecret

logger = logging.getLogger(__name__)


def has_finalizer(finalizers: list[str] | None, token: str) -> bool:
    """Check for a finalizer token, ignoring case."""
    return any(f.lower() == token.lower() for f in finalizers or [])


def with_finalizer(finalizers: list[str] | None, token: str) -> list[str]:
    """Return the finalizer list with the token appended if missing."""
    current = list(finalizers or [])
    if not has_finalizer(current, token):
        current.append(token)
    return current


def without_finalizer(finalizers: list[str] | None, token: str) -> list[str]:
    """Return the finalizer list with every case-variant of the token removed."""
    return [f for f in finalizers or [] if f.lower() != token.lower()]


def add_finalizer(store: Any, source: SourceSecret, config: ReplicationConfig) -> bool:
    """Ensure our finalizer is on the source secret.

    Returns:
        True if a patch was issued, False if the finalizer was already present
    """
    if has_finalizer(source.finalizers, config.finalizer):
        return False
    finalizers = with_finalizer(source.finalizers, config.finalizer)
    store.patch_secret(source.namespace, source.name, build_finalizer_patch(finalizers))
    logger.debug(f"Added finalizer to {source.namespace}/{source.name}")
    return True


def remove_finalizer(store: Any, source: SourceSecret, config: ReplicationConfig) -> bool:
    """Release our finalizer from the source secret.

    Returns:
        True if a patch was issued, False if the finalizer was already absent
    """
    if not has_finalizer(source.finalizers, config.finalizer):
        return False
    finalizers = without_finalizer(source.finalizers, config.finalizer)
    store.patch_secret(source.namespace, source.name, build_finalizer_patch(finalizers))
    logger.debug(f"Removed finalizer from {source.namespace}/{source.name}")
    return True
