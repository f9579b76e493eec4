"""Target directive parsing and namespace resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..constants import NAMESPACE_SEPARATOR


@dataclass(frozen=True)
class TargetDirective:
    """Parsed value of the target-namespace annotation.

    Either ``all_namespaces`` is set, or ``namespaces`` holds the explicit
    list in annotation order.
    """

    all_namespaces: bool = False
    namespaces: tuple[str, ...] = ()


def parse_target_directive(annotations: Mapping[str, str], annotation_key: str, wildcard: str) -> TargetDirective | None:
    """Parse the target directive from a secret's annotations.

    The value is split literally on commas. Empty tokens (``"a,,b"``, a
    trailing comma) are dropped and duplicates keep their first position.
    Whitespace is not trimmed.

    Args:
        annotations: Annotations of the source secret
        annotation_key: Annotation holding the directive
        wildcard: Value that selects every namespace

    Returns:
        The directive, or None if the annotation is absent
    """
    value = annotations.get(annotation_key)
    if value is None:
        return None
    if value == wildcard:
        return TargetDirective(all_namespaces=True)

    namespaces = []
    for token in value.split(NAMESPACE_SEPARATOR):
        if token and token not in namespaces:
            namespaces.append(token)
    return TargetDirective(namespaces=tuple(namespaces))


def resolve_target_namespaces(directive: TargetDirective, source_namespace: str, store: Any) -> list[str]:
    """Resolve a directive into the namespaces that should hold a replica.

    Args:
        directive: Parsed target directive
        source_namespace: Namespace of the source secret, always excluded
        store: Object store used to list namespaces for the wildcard

    Returns:
        Sorted list of target namespace names
    """
    if directive.all_namespaces:
        candidates = store.list_namespaces()
    else:
        candidates = directive.namespaces
    return sorted({ns for ns in candidates if ns != source_namespace})
