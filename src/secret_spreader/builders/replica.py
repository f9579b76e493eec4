"""Builders for replica secrets and field-scoped merge-patch payloads."""

from __future__ import annotations

from typing import Any

from kubernetes import client

from ..models import SourceSecret


def build_replica(source: SourceSecret, namespace: str, owner_label: str) -> client.V1Secret:
    """Build a replica of the source secret for a target namespace.

    Args:
        source: Source secret to copy
        namespace: Target namespace
        owner_label: Label key marking the replica as owned by the source

    Returns:
        Replica secret ready to be created
    """
    labels = dict(source.labels)
    labels[owner_label] = source.uid

    return client.V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=client.V1ObjectMeta(
            name=source.name,
            namespace=namespace,
            labels=labels,
        ),
        type=source.type,
        data=dict(source.data) if source.data is not None else None,
        string_data=dict(source.string_data) if source.string_data is not None else None,
    )


def build_data_patch(data: dict[str, str] | None, existing: dict[str, str] | None = None) -> dict[str, Any]:
    """Merge-patch body touching only the secret payload.

    A merge patch keeps keys it does not mention, so keys present on the
    replica but not on the source are sent as null to delete them.

    Args:
        data: Payload of the source secret
        existing: Current payload of the replica

    Returns:
        Patch body making the replica payload equal to ``data``
    """
    if data is None:
        return {"data": None}
    payload: dict[str, Any] = {key: None for key in existing or {} if key not in data}
    payload.update(data)
    return {"data": payload}


def build_finalizer_patch(finalizers: list[str]) -> dict[str, Any]:
    """Merge-patch body touching only ``metadata.finalizers``.

    An empty list is sent as-is; omitting the field would leave the
    existing finalizers in place.
    """
    return {"metadata": {"finalizers": list(finalizers)}}
