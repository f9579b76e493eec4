"""Kopf persistence that never writes secret payloads into annotations."""

from __future__ import annotations

import hashlib
import json
from typing import Any

import kopf


def payload_digest(payload: dict[str, Any]) -> str:
    """Stable SHA-256 digest of a secret payload map."""
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class DigestDiffBaseStorage(kopf.AnnotationsDiffBaseStorage):
    """Last-handled-configuration storage with ``data``/``stringData`` hashed.

    Kopf keeps the last handled essence of every object in an annotation to
    detect updates. For secrets that essence would contain the payload in
    plain base64; storing a digest still lets payload changes trigger the
    update handlers.
    """

    def build(self, *, body: Any, extra_fields: Any = None) -> Any:
        essence = super().build(body=body, extra_fields=extra_fields)
        for field in ("data", "stringData"):
            if essence.get(field) is not None:
                essence[field] = payload_digest(essence[field])
        return essence
