"""Kubernetes object store adapter used by the reconciler."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from .. import metrics
from ..constants import FIELD_MANAGER, MERGE_PATCH_CONTENT_TYPE
from ..utils.errors import ReplicaConflictError, TransientApiError
from ..utils.rate_limit import is_rate_limit_error, rate_limit_k8s

logger = logging.getLogger(__name__)


def get_core_api() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client.

    Returns:
        CoreV1Api instance
    """
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CoreV1Api()


class KubernetesSecretStore:
    """Secret and namespace primitives on top of ``CoreV1Api``.

    Every call is rate limited, timed and counted, and API failures are
    translated into the reconciler's error types, transport failures
    included.
    """

    def __init__(self, api: client.CoreV1Api):
        self.api = api

    @contextmanager
    def _api_call(self, operation: str) -> Iterator[None]:
        start_time = time.time()
        try:
            yield
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            if is_rate_limit_error(e):
                metrics.rate_limit_hits_total.labels(api_type="k8s").inc()
            raise
        except HTTPError as e:
            # Transport errors from urllib3 carry no HTTP status
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            raise TransientApiError(operation, e) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def get_secret(self, namespace: str, name: str) -> client.V1Secret | None:
        """Read a secret, returning None when it does not exist.

        Raises:
            TransientApiError: On any API error other than 404
        """
        try:
            with self._api_call("read_secret"):
                return rate_limit_k8s(self.api.read_namespaced_secret)(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise TransientApiError(f"read secret {namespace}/{name}", e) from e

    def list_namespaces(self) -> list[str]:
        """List the names of all namespaces in the cluster."""
        try:
            with self._api_call("list_namespaces"):
                namespaces = rate_limit_k8s(self.api.list_namespace)()
        except ApiException as e:
            raise TransientApiError("list namespaces", e) from e
        return [ns.metadata.name for ns in namespaces.items]

    def list_secrets(self, label_selector: str) -> list[client.V1Secret]:
        """List secrets in all namespaces matching a label selector."""
        try:
            with self._api_call("list_secrets"):
                secrets = rate_limit_k8s(self.api.list_secret_for_all_namespaces)(
                    label_selector=label_selector,
                )
        except ApiException as e:
            raise TransientApiError(f"list secrets ({label_selector})", e) from e
        return list(secrets.items)

    def create_secret(self, namespace: str, body: client.V1Secret) -> None:
        """Create a secret.

        Raises:
            ReplicaConflictError: If a secret with that name appeared concurrently
            TransientApiError: On any other API error
        """
        name = body.metadata.name
        try:
            with self._api_call("create_secret"):
                rate_limit_k8s(self.api.create_namespaced_secret)(
                    namespace=namespace,
                    body=body,
                    field_manager=FIELD_MANAGER,
                )
        except ApiException as e:
            if e.status == 409:
                raise ReplicaConflictError(f"create secret {namespace}/{name}", e) from e
            raise TransientApiError(f"create secret {namespace}/{name}", e) from e

    def patch_secret(self, namespace: str, name: str, body: dict[str, Any]) -> None:
        """Apply a JSON merge-patch to a secret.

        The content type is forced to merge-patch; the client would otherwise
        send a strategic merge patch, which merges rather than replaces lists
        such as ``metadata.finalizers``.
        """
        try:
            with self._api_call("patch_secret"):
                rate_limit_k8s(self.api.patch_namespaced_secret)(
                    name=name,
                    namespace=namespace,
                    body=body,
                    field_manager=FIELD_MANAGER,
                    _content_type=MERGE_PATCH_CONTENT_TYPE,
                )
        except ApiException as e:
            raise TransientApiError(f"patch secret {namespace}/{name}", e) from e

    def delete_secret(self, namespace: str, name: str) -> bool:
        """Delete a secret.

        Returns:
            False if the secret was already gone, True otherwise
        """
        try:
            with self._api_call("delete_secret"):
                rate_limit_k8s(self.api.delete_namespaced_secret)(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                logger.debug(f"Secret {namespace}/{name} already deleted")
                return False
            raise TransientApiError(f"delete secret {namespace}/{name}", e) from e
        return True
