"""Builder functions for replica secrets and patch payloads."""

from .replica import build_data_patch, build_finalizer_patch, build_replica

__all__ = [
    "build_replica",
    "build_data_patch",
    "build_finalizer_patch",
]
