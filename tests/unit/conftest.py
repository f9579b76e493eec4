"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any
from unittest.mock import patch

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from secret_spreader.config import ReplicationConfig
from secret_spreader.models import SourceSecret
from secret_spreader.utils.errors import ReplicaConflictError, TransientApiError


def make_secret(
    name: str,
    namespace: str,
    uid: str | None = None,
    data: dict[str, str] | None = None,
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    finalizers: list[str] | None = None,
    type_: str = "Opaque",
) -> client.V1Secret:
    return client.V1Secret(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=namespace,
            uid=uid,
            labels=labels,
            annotations=annotations,
            finalizers=finalizers,
        ),
        type=type_,
        data=data,
    )


def to_body(secret: client.V1Secret) -> dict[str, Any]:
    meta = secret.metadata
    deletion = meta.deletion_timestamp.isoformat() if meta.deletion_timestamp else None
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "type": secret.type,
        "data": secret.data,
        "metadata": {
            "name": meta.name,
            "namespace": meta.namespace,
            "uid": meta.uid,
            "labels": meta.labels,
            "annotations": meta.annotations,
            "finalizers": meta.finalizers,
            "deletionTimestamp": deletion,
        },
    }


def _merge_data(current: dict[str, str] | None, patch: dict[str, str | None] | None) -> dict[str, str] | None:
    """JSON merge-patch (RFC 7386) of the data map: null deletes a key."""
    if patch is None:
        return None
    merged = dict(current or {})
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


class FakeSecretStore:
    """In-memory stand-in for KubernetesSecretStore with API-like semantics."""

    def __init__(self, namespaces: list[str] | None = None):
        self.namespaces = list(namespaces or [])
        self.secrets: dict[tuple[str, str], client.V1Secret] = {}
        self.writes: list[tuple[str, str, str]] = []

    def add(self, secret: client.V1Secret) -> client.V1Secret:
        self.secrets[(secret.metadata.namespace, secret.metadata.name)] = secret
        return secret

    def source(self, namespace: str, name: str) -> SourceSecret:
        return SourceSecret.from_body(to_body(self.secrets[(namespace, name)]))

    def request_deletion(self, namespace: str, name: str) -> None:
        """What the API server does when a finalized object is deleted."""
        secret = self.secrets[(namespace, name)]
        if secret.metadata.finalizers:
            secret.metadata.deletion_timestamp = datetime.now(timezone.utc)
        else:
            del self.secrets[(namespace, name)]

    def get_secret(self, namespace: str, name: str) -> client.V1Secret | None:
        return copy.deepcopy(self.secrets.get((namespace, name)))

    def list_namespaces(self) -> list[str]:
        return list(self.namespaces)

    def list_secrets(self, label_selector: str) -> list[client.V1Secret]:
        key, value = label_selector.split("=", 1)
        return [
            copy.deepcopy(secret)
            for secret in self.secrets.values()
            if (secret.metadata.labels or {}).get(key) == value
        ]

    def create_secret(self, namespace: str, body: client.V1Secret) -> None:
        key = (namespace, body.metadata.name)
        if key in self.secrets:
            raise ReplicaConflictError(
                f"create secret {namespace}/{body.metadata.name}",
                ApiException(status=409, reason="Conflict"),
            )
        self.writes.append(("create", namespace, body.metadata.name))
        self.secrets[key] = copy.deepcopy(body)

    def patch_secret(self, namespace: str, name: str, body: dict[str, Any]) -> None:
        key = (namespace, name)
        if key not in self.secrets:
            raise TransientApiError(f"patch secret {namespace}/{name}", ApiException(status=404, reason="Not Found"))
        self.writes.append(("patch", namespace, name))
        secret = self.secrets[key]
        if "data" in body:
            secret.data = _merge_data(secret.data, body["data"])
        if "finalizers" in body.get("metadata", {}):
            secret.metadata.finalizers = list(body["metadata"]["finalizers"])
            if secret.metadata.deletion_timestamp and not secret.metadata.finalizers:
                del self.secrets[key]

    def delete_secret(self, namespace: str, name: str) -> bool:
        self.writes.append(("delete", namespace, name))
        if (namespace, name) not in self.secrets:
            return False
        self.request_deletion(namespace, name)
        return True


@pytest.fixture
def config() -> ReplicationConfig:
    return ReplicationConfig()


@pytest.fixture
def fake_store() -> FakeSecretStore:
    return FakeSecretStore(namespaces=["default", "ns-a", "ns-b"])


@pytest.fixture(autouse=True)
def mock_kopf_event():
    """Kubernetes events can only be posted from inside a running operator."""
    with patch("secret_spreader.utils.events.kopf.event") as mock_event:
        yield mock_event
