"""Classification of existing secrets at a replica location."""

from __future__ import annotations

import enum
from typing import Any


class Ownership(enum.Enum):
    """Who owns the secret found at a target location."""

    ABSENT = "absent"
    MANAGED = "managed"
    FOREIGN = "foreign"


def classify_replica(existing: Any, owner_label: str) -> Ownership:
    """Classify a secret found at a replica's (namespace, name).

    Presence of the ownership label marks the secret as managed regardless
    of its value.

    Args:
        existing: Secret read from the API (``V1Secret``) or None
        owner_label: Label key set on every managed replica

    Returns:
        Ownership classification
    """
    if existing is None:
        return Ownership.ABSENT
    labels = existing.metadata.labels or {}
    if owner_label in labels:
        return Ownership.MANAGED
    return Ownership.FOREIGN
